"""Configuration for Step 01: Morton spatial sort."""

from pydantic import BaseModel, Field


class SpatialSortConfig(BaseModel):
    grid_bits: int = Field(21, ge=1, le=21, description="Bits per axis of the Morton grid (3 x 21 = 63-bit keys)")
