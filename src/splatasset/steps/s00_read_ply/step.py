"""Step 00: Read a 3DGS PLY into a verified, typed record array."""

from __future__ import annotations

import logging
from typing import ClassVar

import numpy as np

from splatasset.core.errors import EmptyPointCloud, RecordSizeMismatch, SourceNotFound
from splatasset.core.step_base import BaseStep
from splatasset.utils.io import INPUT_RECORD_DTYPE, RECORD_FLOATS, RECORD_SIZE, PlyHeader, read_ply_file
from ._deinterleave import deinterleave_sh
from .config import ReadPlyConfig
from .contracts import ReadPlyInput, ReadPlyOutput

logger = logging.getLogger(__name__)


def decode_records(header: PlyHeader, body: bytes) -> np.ndarray:
    """Decode raw vertex bytes into an owned INPUT_RECORD_DTYPE array.

    The declared stride must match the record layout exactly. SH coefficients
    are deinterleaved before the bytes are viewed as typed records.
    """
    if header.vertex_stride != RECORD_SIZE:
        raise RecordSizeMismatch(
            f"PLY vertex size mismatch, expected {RECORD_SIZE} but file has {header.vertex_stride}"
        )

    floats = np.frombuffer(body, dtype="<f4").reshape(header.vertex_count, RECORD_FLOATS).copy()
    deinterleave_sh(floats)
    return floats.view(INPUT_RECORD_DTYPE).reshape(header.vertex_count)


class ReadPlyStep(BaseStep[ReadPlyInput, ReadPlyOutput, ReadPlyConfig]):
    """Parse the PLY header, validate sizes, and decode the splat records."""

    name: ClassVar[str] = "read_ply"
    input_type: ClassVar = ReadPlyInput
    output_type: ClassVar = ReadPlyOutput
    config_type: ClassVar = ReadPlyConfig

    def validate_inputs(self, inputs: ReadPlyInput) -> bool:
        if not inputs.ply_path.is_file():
            raise SourceNotFound(f"Did not find {inputs.ply_path} file")
        if inputs.ply_path.suffix.lower() != ".ply":
            logger.warning(f"Unexpected extension '{inputs.ply_path.suffix}', reading as PLY anyway")
        return True

    def run(self, inputs: ReadPlyInput) -> ReadPlyOutput:
        header, body = read_ply_file(inputs.ply_path, max_size=self.config.max_file_size)
        logger.info(
            f"Read {inputs.ply_path.name}: {header.vertex_count} vertices, "
            f"stride {header.vertex_stride}, {len(header.attribute_names)} properties"
        )

        if header.vertex_count == 0:
            raise EmptyPointCloud(f"{inputs.ply_path} contains no splats")
        records = decode_records(header, body)

        return ReadPlyOutput(
            ply_path=inputs.ply_path,
            records=records,
            splat_count=len(records),
            attribute_names=header.attribute_names,
        )
