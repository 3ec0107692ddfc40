"""Step 03: Encode normalized splats into the four GPU buffers."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from typing import Callable, ClassVar

import numpy as np

from splatasset.core.step_base import BaseStep
from ._encoders import create_color_data, create_other_data, create_positions_data, create_sh_data
from .config import EncodeConfig
from .contracts import EncodeInput, EncodeOutput

logger = logging.getLogger(__name__)


def _fits_uint16(values: np.ndarray) -> bool:
    values = np.asarray(values)
    return values.size == 0 or bool(values.min() >= 0 and values.max() <= np.iinfo(np.uint16).max)


class EncodeStep(BaseStep[EncodeInput, EncodeOutput, EncodeConfig]):
    """Runs the position, other, color and SH encoders, concurrently when workers > 1."""

    name: ClassVar[str] = "encode"
    input_type: ClassVar = EncodeInput
    output_type: ClassVar = EncodeOutput
    config_type: ClassVar = EncodeConfig

    def validate_inputs(self, inputs: EncodeInput) -> bool:
        n = len(inputs.records)
        if n == 0:
            logger.error("No records to encode")
            return False
        if inputs.cluster_indices is not None and len(inputs.cluster_indices) != n:
            logger.error(f"cluster_indices has {len(inputs.cluster_indices)} entries for {n} splats")
            return False
        if inputs.cluster_indices is not None and not _fits_uint16(inputs.cluster_indices):
            logger.error("cluster_indices must lie in 0..65535")
            return False
        return True

    def run(self, inputs: EncodeInput) -> EncodeOutput:
        fmts = self.config.formats
        records = inputs.records
        logger.info(
            f"Encoding {len(records)} splats: pos={fmts.pos.name} scale={fmts.scale.name} "
            f"color={fmts.color.name} sh={fmts.sh.name}"
        )

        jobs: dict[str, Callable] = {
            "positions": partial(create_positions_data, records, fmts.pos, inputs.bounds),
            "other": partial(create_other_data, records, fmts.scale, inputs.cluster_indices),
            "color": partial(create_color_data, records, fmts.color, self.config.texture_width),
            "sh": partial(create_sh_data, records, fmts.sh),
        }
        if self.config.workers > 1:
            with ThreadPoolExecutor(max_workers=self.config.workers, thread_name_prefix="encode") as pool:
                futures = {key: pool.submit(job) for key, job in jobs.items()}
                results = {key: future.result() for key, future in futures.items()}
        else:
            results = {key: job() for key, job in jobs.items()}

        color, width, height = results["color"]
        for key in ("positions", "other", "sh"):
            logger.debug(f"{key}: {len(results[key])} bytes")

        return EncodeOutput(
            formats=fmts,
            splat_count=len(records),
            positions=results["positions"],
            other=results["other"],
            color=color,
            sh=results["sh"],
            texture_width=width,
            texture_height=height,
        )
