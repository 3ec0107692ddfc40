"""splatasset core: pipeline runner, base step, shared contracts."""

from .step_base import BaseStep
from .contracts import (
    BoundingBox,
    CameraInfo,
    ColorFormat,
    EncodingFormats,
    OutputAsset,
    PipelineConfig,
    SHFormat,
    StepEntry,
    VectorFormat,
)
from .errors import (
    EmptyPointCloud,
    HeaderParseError,
    RecordSizeMismatch,
    SourceNotFound,
    SourceTooLarge,
    TranscodeError,
)
from .pipeline_runner import default_pipeline_config, load_pipeline_config, run_pipeline, transcode
from .asset_store import AssetStore
from .logging import setup_logging

__all__ = [
    "BaseStep",
    "BoundingBox",
    "CameraInfo",
    "ColorFormat",
    "EncodingFormats",
    "OutputAsset",
    "PipelineConfig",
    "SHFormat",
    "StepEntry",
    "VectorFormat",
    "EmptyPointCloud",
    "HeaderParseError",
    "RecordSizeMismatch",
    "SourceNotFound",
    "SourceTooLarge",
    "TranscodeError",
    "AssetStore",
    "default_pipeline_config",
    "load_pipeline_config",
    "run_pipeline",
    "transcode",
    "setup_logging",
]
