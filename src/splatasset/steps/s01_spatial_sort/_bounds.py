"""Axis-aligned bounds of splat positions."""

from __future__ import annotations

import numpy as np

from splatasset.core.contracts import BoundingBox


def calc_bounds(positions: np.ndarray) -> BoundingBox:
    """Component-wise min/max over (N, 3) positions. N must be > 0."""
    bounds_min = positions.min(axis=0)
    bounds_max = positions.max(axis=0)
    return BoundingBox(
        min=tuple(float(v) for v in bounds_min),
        max=tuple(float(v) for v in bounds_max),
    )
