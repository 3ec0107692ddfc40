"""I/O contracts for Step 02: Attribute normalization."""

from pydantic import BaseModel, ConfigDict, Field

from splatasset.core.contracts import NDArray


class NormalizeInput(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    records: NDArray = Field(..., description="(N,) splat records with raw PLY attributes")


class NormalizeOutput(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    records: NDArray = Field(
        ..., description="(N,) records: rot packed smallest-three, linear scale, display color, opacity in (0,1)"
    )
