"""Configuration for Step 00: Read 3DGS PLY."""

from pydantic import BaseModel, Field

from splatasset.utils.io import MAX_FILE_SIZE


class ReadPlyConfig(BaseModel):
    max_file_size: int = Field(
        MAX_FILE_SIZE, gt=0, le=MAX_FILE_SIZE, description="Reject source files of this many bytes or more"
    )
