"""Common Pydantic models shared across pipeline steps."""

from __future__ import annotations

from enum import IntEnum
from pathlib import Path
from typing import Annotated, Any, Optional

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, WithJsonSchema, field_validator

# Arrays travel between steps by reference; validation is an isinstance check.
NDArray = Annotated[np.ndarray, WithJsonSchema({"type": "array", "description": "numpy array"})]

FORMAT_VERSION = 20231020


class VectorFormat(IntEnum):
    Float32 = 0  # 12 bytes
    Norm16 = 1  # 6 bytes, 16.16.16
    Norm11 = 2  # 4 bytes, 11.10.11
    Norm6 = 3  # 2 bytes, 6.5.5


class ColorFormat(IntEnum):
    Float32x4 = 0
    Float16x4 = 1
    Norm8x4 = 2


class SHFormat(IntEnum):
    Float32 = 0
    Float16 = 1
    Norm11 = 2
    Norm6 = 3


_FORMAT_FIELDS = {"pos": VectorFormat, "scale": VectorFormat, "color": ColorFormat, "sh": SHFormat}

QUALITY_PRESETS: dict[str, dict[str, int]] = {
    "VeryLow": {"pos": VectorFormat.Norm11, "scale": VectorFormat.Norm6,
                "color": ColorFormat.Norm8x4, "sh": SHFormat.Norm6},
    "Low": {"pos": VectorFormat.Norm11, "scale": VectorFormat.Norm6,
            "color": ColorFormat.Norm8x4, "sh": SHFormat.Norm11},
    "Medium": {"pos": VectorFormat.Norm11, "scale": VectorFormat.Norm11,
               "color": ColorFormat.Norm8x4, "sh": SHFormat.Norm6},
    "High": {"pos": VectorFormat.Norm16, "scale": VectorFormat.Norm16,
             "color": ColorFormat.Float16x4, "sh": SHFormat.Norm11},
    "VeryHigh": {"pos": VectorFormat.Float32, "scale": VectorFormat.Float32,
                 "color": ColorFormat.Float32x4, "sh": SHFormat.Float32},
}


class EncodingFormats(BaseModel):
    """Output precision selection, fixed for the duration of one run."""

    model_config = ConfigDict(frozen=True)

    pos: VectorFormat = VectorFormat.Float32
    scale: VectorFormat = VectorFormat.Float32
    color: ColorFormat = ColorFormat.Float32x4
    sh: SHFormat = SHFormat.Float32

    @field_validator("pos", "scale", "color", "sh", mode="before")
    @classmethod
    def _accept_enum_names(cls, value: Any, info: ValidationInfo) -> Any:
        # YAML configs spell formats by name ("Norm11"), enums validate by value.
        if isinstance(value, str):
            enum_type = _FORMAT_FIELDS[info.field_name]
            try:
                return enum_type[value]
            except KeyError:
                raise ValueError(f"Unknown {enum_type.__name__} '{value}'") from None
        return value

    @classmethod
    def from_preset(cls, name: str) -> EncodingFormats:
        if name not in QUALITY_PRESETS:
            raise ValueError(f"Unknown quality preset '{name}', expected one of {list(QUALITY_PRESETS)}")
        return cls(**QUALITY_PRESETS[name])


class BoundingBox(BaseModel):
    """Axis-aligned bounds of all splat positions."""

    model_config = ConfigDict(frozen=True)

    min: tuple[float, float, float]
    max: tuple[float, float, float]


class CameraInfo(BaseModel):
    """Camera pose recovered from cameras.json (metadata only)."""

    model_config = ConfigDict(frozen=True)

    pos: tuple[float, float, float]
    axis_x: tuple[float, float, float]
    axis_y: tuple[float, float, float]
    axis_z: tuple[float, float, float]
    fov: float


class OutputAsset(BaseModel):
    """The transcoded splat asset handed to the rendering consumer."""

    model_config = ConfigDict(frozen=True)

    format_version: int = FORMAT_VERSION
    splat_count: int = Field(..., ge=1)
    bounds: BoundingBox
    formats: EncodingFormats
    positions: bytes = Field(..., repr=False)
    other: bytes = Field(..., repr=False)
    color: bytes = Field(..., repr=False)
    sh: bytes = Field(..., repr=False)
    texture_width: int
    texture_height: int
    content_hash: str = Field(..., min_length=32, max_length=32, description="128-bit hash, hex")
    cameras: Optional[list[CameraInfo]] = None
    source_path: Optional[Path] = None


class StepEntry(BaseModel):
    """One entry in the pipeline step list."""

    name: str
    module: str
    config_file: Optional[str] = None
    config: dict[str, Any] = Field(default_factory=dict, description="Inline config overrides")
    depends_on: list[str] = Field(default_factory=list)
    enabled: bool = True


class PipelineConfig(BaseModel):
    """Top-level pipeline configuration loaded from pipeline.yaml."""

    project_name: str = "splatasset"
    steps: list[StepEntry] = Field(default_factory=list)
