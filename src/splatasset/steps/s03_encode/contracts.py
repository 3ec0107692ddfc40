"""I/O contracts for Step 03: Quantized buffer encoding."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from splatasset.core.contracts import BoundingBox, EncodingFormats, NDArray


class EncodeInput(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    records: NDArray = Field(..., description="(N,) normalized splat records in Morton order")
    bounds: BoundingBox = Field(..., description="Bounds of all positions")
    cluster_indices: Optional[NDArray] = Field(
        None, description="(N,) uint16 SH cluster index per splat from an external clustering pass"
    )


class EncodeOutput(BaseModel):
    formats: EncodingFormats
    splat_count: int
    positions: bytes = Field(..., repr=False)
    other: bytes = Field(..., repr=False)
    color: bytes = Field(..., repr=False)
    sh: bytes = Field(..., repr=False)
    texture_width: int = Field(..., description="Color texture width in pixels")
    texture_height: int = Field(..., description="Color texture height in pixels")
