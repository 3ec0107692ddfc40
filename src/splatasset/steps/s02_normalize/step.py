"""Step 02: Convert raw 3DGS attributes into display-ready values."""

from __future__ import annotations

import logging
from typing import ClassVar

import numpy as np

from splatasset.core.step_base import BaseStep
from splatasset.utils.geometry import (
    linear_scale,
    normalize_swizzle_rotation,
    pack_smallest3_rotation,
    sh0_to_color,
    sigmoid,
)
from .config import NormalizeConfig
from .contracts import NormalizeInput, NormalizeOutput

logger = logging.getLogger(__name__)

_REQUIRED_FIELDS = {"rot", "scale", "dc0", "opacity"}


class NormalizeStep(BaseStep[NormalizeInput, NormalizeOutput, NormalizeConfig]):
    """Rewrites rotation, scale, color and opacity of every record in place.

    NaN/Inf inputs and zero-length quaternions are passed through unvalidated.
    """

    name: ClassVar[str] = "normalize"
    input_type: ClassVar = NormalizeInput
    output_type: ClassVar = NormalizeOutput
    config_type: ClassVar = NormalizeConfig

    def validate_inputs(self, inputs: NormalizeInput) -> bool:
        names = set(inputs.records.dtype.names or ())
        missing = _REQUIRED_FIELDS - names
        if missing:
            logger.error(f"Record array lacks fields: {sorted(missing)}")
            return False
        return True

    def run(self, inputs: NormalizeInput) -> NormalizeOutput:
        records = inputs.records

        with np.errstate(all="ignore"):
            records["rot"] = pack_smallest3_rotation(normalize_swizzle_rotation(records["rot"]))
            records["scale"] = linear_scale(records["scale"])
            records["dc0"] = sh0_to_color(records["dc0"], self.config.sh_c0)
            records["opacity"] = sigmoid(records["opacity"])

        non_finite = int(np.count_nonzero(~np.isfinite(records["rot"]).all(axis=1)))
        if non_finite:
            logger.warning(f"{non_finite} splats have non-finite rotations after normalization")

        return NormalizeOutput(records=records)
