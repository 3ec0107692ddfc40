"""I/O contracts for Step 01: Morton spatial sort."""

from pydantic import BaseModel, ConfigDict, Field

from splatasset.core.contracts import BoundingBox, NDArray


class SpatialSortInput(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    records: NDArray = Field(..., description="(N,) splat records in file order")


class SpatialSortOutput(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    records: NDArray = Field(..., description="(N,) splat records in Morton order")
    bounds: BoundingBox = Field(..., description="Bounds of all positions")
    sort_order: NDArray = Field(..., description="(N,) original index of each sorted record")
