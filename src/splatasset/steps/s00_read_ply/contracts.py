"""I/O contracts for Step 00: Read 3DGS PLY."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from splatasset.core.contracts import NDArray


class ReadPlyInput(BaseModel):
    ply_path: Path = Field(..., description="Path to a binary little-endian 3DGS PLY")


class ReadPlyOutput(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    ply_path: Path = Field(..., description="Source file the records were read from")
    records: NDArray = Field(..., description="(N,) INPUT_RECORD_DTYPE array, SH interleaved")
    splat_count: int = Field(..., description="Number of records")
    attribute_names: list[str] = Field(default_factory=list, description="PLY property names in file order")
