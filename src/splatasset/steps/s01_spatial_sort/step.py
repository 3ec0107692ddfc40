"""Step 01: Reorder splats along a 3D Morton curve for spatial locality."""

from __future__ import annotations

import logging
from typing import ClassVar

import numpy as np

from splatasset.core.contracts import BoundingBox
from splatasset.core.step_base import BaseStep
from splatasset.utils.geometry import normalize_to_bounds
from splatasset.utils.morton import morton_encode3
from ._bounds import calc_bounds
from .config import SpatialSortConfig
from .contracts import SpatialSortInput, SpatialSortOutput

logger = logging.getLogger(__name__)


def compute_morton_keys(positions: np.ndarray, bounds: BoundingBox, grid_bits: int = 21) -> np.ndarray:
    """Morton key per position, normalized into ``bounds`` on a 2^grid_bits - 1 grid.

    An axis with zero extent maps every point to grid coordinate 0.
    """
    scaler = np.float32((1 << grid_bits) - 1)
    grid = normalize_to_bounds(positions, bounds.min, bounds.max) * scaler
    with np.errstate(invalid="ignore"):
        ipos = np.clip(grid, 0, scaler).astype(np.uint32)
    return morton_encode3(ipos)


class SpatialSortStep(BaseStep[SpatialSortInput, SpatialSortOutput, SpatialSortConfig]):
    """Bounds reduction, Morton keys, stable sort, permutation."""

    name: ClassVar[str] = "spatial_sort"
    input_type: ClassVar = SpatialSortInput
    output_type: ClassVar = SpatialSortOutput
    config_type: ClassVar = SpatialSortConfig

    def validate_inputs(self, inputs: SpatialSortInput) -> bool:
        records = inputs.records
        if records.ndim != 1 or len(records) == 0 or "pos" not in (records.dtype.names or ()):
            logger.error(f"Expected a non-empty 1-D record array with 'pos', got {records.dtype} {records.shape}")
            return False
        return True

    def run(self, inputs: SpatialSortInput) -> SpatialSortOutput:
        positions = inputs.records["pos"]

        bounds = calc_bounds(positions)
        logger.info(f"Bounds: min={bounds.min}, max={bounds.max}")

        keys = compute_morton_keys(positions, bounds, self.config.grid_bits)
        # Stable sort: equal keys keep ascending original index.
        order = np.argsort(keys, kind="stable")
        records = inputs.records[order]

        return SpatialSortOutput(records=records, bounds=bounds, sort_order=order)
