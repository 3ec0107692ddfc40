"""Configuration for Step 03: Quantized buffer encoding."""

from pydantic import BaseModel, Field, field_validator

from splatasset.core.contracts import EncodingFormats
from splatasset.utils.morton import TEXTURE_WIDTH, TILE_SIZE


class EncodeConfig(BaseModel):
    formats: EncodingFormats = Field(default_factory=EncodingFormats, description="Output precision per buffer")
    texture_width: int = Field(TEXTURE_WIDTH, gt=0, description="Color texture width, multiple of 16")
    workers: int = Field(4, ge=1, description="Threads encoding the four buffers (1 = sequential)")

    @field_validator("texture_width")
    @classmethod
    def _tile_aligned(cls, value: int) -> int:
        if value % TILE_SIZE:
            raise ValueError(f"texture_width must be a multiple of {TILE_SIZE}, got {value}")
        return value
