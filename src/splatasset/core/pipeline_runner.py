"""Pipeline orchestrator: reads pipeline.yaml and executes steps in order."""

from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel

from .contracts import EncodingFormats, OutputAsset, PipelineConfig, StepEntry
from .errors import EmptyPointCloud

logger = logging.getLogger(__name__)

STEPS_PACKAGE = "splatasset.steps"

DEFAULT_STEPS: list[dict[str, Any]] = [
    {"name": "read_ply", "module": f"{STEPS_PACKAGE}.s00_read_ply"},
    {"name": "spatial_sort", "module": f"{STEPS_PACKAGE}.s01_spatial_sort", "depends_on": ["read_ply"]},
    {"name": "normalize", "module": f"{STEPS_PACKAGE}.s02_normalize", "depends_on": ["spatial_sort"]},
    {"name": "encode", "module": f"{STEPS_PACKAGE}.s03_encode", "depends_on": ["spatial_sort", "normalize"]},
    {
        "name": "assemble",
        "module": f"{STEPS_PACKAGE}.s04_assemble",
        "depends_on": ["read_ply", "spatial_sort", "encode"],
    },
]


def default_pipeline_config() -> PipelineConfig:
    """Five-step transcode pipeline with every step at its default config."""
    return PipelineConfig(steps=[StepEntry(**entry) for entry in DEFAULT_STEPS])


def load_pipeline_config(config_path: Path) -> PipelineConfig:
    """Load and validate pipeline.yaml.

    Relative step config_file paths are resolved against the YAML's directory.
    """
    config_path = Path(config_path)
    with open(config_path, encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}
    pipeline_cfg = PipelineConfig(**raw)
    for entry in pipeline_cfg.steps:
        if entry.config_file and not Path(entry.config_file).is_absolute():
            entry.config_file = str(config_path.parent / entry.config_file)
    return pipeline_cfg


def resolve_step_config(entry: StepEntry, config_class: type[BaseModel]) -> BaseModel:
    """Step config from its YAML file (if any) with inline overrides on top."""
    raw: dict[str, Any] = {}
    if entry.config_file:
        with open(entry.config_file, encoding="utf-8") as f:
            raw.update(yaml.safe_load(f) or {})
    raw.update(entry.config)
    return config_class(**raw)


def import_step_class(module_path: str):
    """Dynamically import a step class from its module path.

    Expects module_path like 'splatasset.steps.s01_spatial_sort'
    and looks for a class ending in 'Step' in that module's step.py.
    """
    step_module = importlib.import_module(f"{module_path}.step")
    for attr_name in dir(step_module):
        attr = getattr(step_module, attr_name)
        if (
            isinstance(attr, type)
            and hasattr(attr, "run")
            and attr_name.endswith("Step")
            and attr_name != "BaseStep"
        ):
            return attr
    raise ImportError(f"No Step class found in {module_path}.step")


def run_pipeline(pipeline_cfg: PipelineConfig, source_path: Path) -> Optional[BaseModel]:
    """Execute every enabled step on one source file.

    Each step's input is assembled from the outputs of the steps it depends on,
    later dependencies overriding earlier ones. Returns the last step's output,
    or None when the source holds no records.
    """
    results: dict[str, dict[str, Any]] = {"source": {"ply_path": Path(source_path)}}

    enabled_steps = [s for s in pipeline_cfg.steps if s.enabled]
    logger.info(f"Pipeline '{pipeline_cfg.project_name}' with {len(enabled_steps)} steps on {source_path}")

    output: Optional[BaseModel] = None
    for entry in enabled_steps:
        logger.debug(f"--- Step: {entry.name} ---")

        step_cls = import_step_class(entry.module)
        step_config = resolve_step_config(entry, step_cls.config_type)
        step_instance = step_cls(config=step_config)

        input_data: dict[str, Any] = dict(results["source"])
        for dep in entry.depends_on:
            if dep not in results:
                raise ValueError(f"Step '{entry.name}' depends on '{dep}', which has not run")
            input_data.update(results[dep])

        step_input = step_cls.input_type(**input_data)
        try:
            output = step_instance.execute(step_input)
        except EmptyPointCloud as e:
            logger.warning(f"Nothing to transcode: {e}")
            return None
        # Shallow field dict: arrays pass by reference to the next step.
        results[entry.name] = dict(output)

    logger.info("Pipeline complete.")
    return output


def transcode(
    source_path: Path,
    formats: Optional[EncodingFormats] = None,
    pipeline_cfg: Optional[PipelineConfig] = None,
) -> Optional[OutputAsset]:
    """Transcode one PLY file into an OutputAsset.

    ``formats`` overrides the encode step's configured formats. Returns None for
    a file with zero records; raises TranscodeError subclasses for bad input.
    """
    pipeline_cfg = pipeline_cfg or default_pipeline_config()
    if formats is not None:
        steps = [
            s.model_copy(update={"config": {**s.config, "formats": formats}}) if s.name == "encode" else s
            for s in pipeline_cfg.steps
        ]
        pipeline_cfg = pipeline_cfg.model_copy(update={"steps": steps})

    output = run_pipeline(pipeline_cfg, source_path)
    if output is None:
        return None
    asset = getattr(output, "asset", None)
    if not isinstance(asset, OutputAsset):
        raise ValueError(f"Last pipeline step produced {type(output).__name__}, not an asset")
    return asset
