"""I/O contracts for Step 04: Asset assembly."""

from pathlib import Path

from pydantic import BaseModel, Field

from splatasset.core.contracts import BoundingBox, EncodingFormats, OutputAsset


class AssembleInput(BaseModel):
    ply_path: Path = Field(..., description="Source PLY, used to locate camera metadata")
    splat_count: int
    bounds: BoundingBox
    formats: EncodingFormats
    positions: bytes = Field(..., repr=False)
    other: bytes = Field(..., repr=False)
    color: bytes = Field(..., repr=False)
    sh: bytes = Field(..., repr=False)
    texture_width: int
    texture_height: int


class AssembleOutput(BaseModel):
    asset: OutputAsset = Field(..., description="Immutable transcoded asset")
