"""Step 04: Fingerprint the buffers and assemble the final asset."""

from __future__ import annotations

import logging
from typing import ClassVar

from splatasset.core.contracts import OutputAsset
from splatasset.core.step_base import BaseStep
from splatasset.utils.cameras import load_cameras
from ._fingerprint import compute_content_hash
from .config import AssembleConfig
from .contracts import AssembleInput, AssembleOutput

logger = logging.getLogger(__name__)


class AssembleStep(BaseStep[AssembleInput, AssembleOutput, AssembleConfig]):
    name: ClassVar[str] = "assemble"
    input_type: ClassVar = AssembleInput
    output_type: ClassVar = AssembleOutput
    config_type: ClassVar = AssembleConfig

    def validate_inputs(self, inputs: AssembleInput) -> bool:
        return inputs.splat_count > 0 and inputs.texture_width * inputs.texture_height >= inputs.splat_count

    def run(self, inputs: AssembleInput) -> AssembleOutput:
        content_hash = compute_content_hash(
            inputs.splat_count,
            inputs.formats,
            inputs.positions,
            inputs.other,
            inputs.color,
            inputs.sh,
        )

        cameras = None
        if self.config.load_cameras:
            cameras = load_cameras(inputs.ply_path, self.config.cameras_filename, self.config.fov)

        asset = OutputAsset(
            splat_count=inputs.splat_count,
            bounds=inputs.bounds,
            formats=inputs.formats,
            positions=inputs.positions,
            other=inputs.other,
            color=inputs.color,
            sh=inputs.sh,
            texture_width=inputs.texture_width,
            texture_height=inputs.texture_height,
            content_hash=content_hash,
            cameras=cameras,
            source_path=inputs.ply_path,
        )
        logger.info(f"Assembled asset: {asset.splat_count} splats, hash {content_hash}")
        return AssembleOutput(asset=asset)
