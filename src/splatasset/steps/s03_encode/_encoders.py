"""The four asset buffers: positions, other (rotation/scale), color texture, SH."""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np

from splatasset.core.contracts import BoundingBox, ColorFormat, SHFormat, VectorFormat
from splatasset.utils.geometry import normalize_to_bounds
from splatasset.utils.io import SH_COUNT
from splatasset.utils.morton import calc_texture_size, splat_index_to_texture_index
from ._packing import (
    as_bytes_rows,
    encode_norm11,
    encode_norm565,
    encode_quat_norm10,
    encode_vectors,
    other_record_size,
    pad_to_multiple,
    quantize,
)

logger = logging.getLogger(__name__)

COLOR_BYTES_PER_PIXEL = {
    ColorFormat.Float32x4: 16,
    ColorFormat.Float16x4: 8,
    ColorFormat.Norm8x4: 4,
}

# 15 coefficients + 1 padding slot per record.
SH_SLOTS = SH_COUNT + 1
SH_RECORD_SIZES = {
    SHFormat.Float32: SH_SLOTS * 12,
    SHFormat.Float16: SH_SLOTS * 6,
    SHFormat.Norm11: SH_SLOTS * 4,
    SHFormat.Norm6: SH_SLOTS * 2,
}


def create_positions_data(records: np.ndarray, fmt: VectorFormat, bounds: BoundingBox) -> bytes:
    """Position buffer, one vector per splat.

    Float32 keeps world-space positions; normalized formats store positions
    relative to ``bounds`` so they survive saturation.
    """
    positions = records["pos"]
    if fmt != VectorFormat.Float32:
        positions = normalize_to_bounds(positions, bounds.min, bounds.max)
    data = encode_vectors(positions, fmt).tobytes()
    return pad_to_multiple(data, 8)


def create_other_data(
    records: np.ndarray,
    scale_fmt: VectorFormat,
    cluster_indices: Optional[np.ndarray] = None,
) -> bytes:
    """Rotation (10.10.10.2), scale in ``scale_fmt``, optional uint16 cluster index."""
    n = len(records)
    rotation = encode_quat_norm10(records["rot"])
    columns = [
        as_bytes_rows(rotation[:, None], "<u4", 4),
        encode_vectors(records["scale"], scale_fmt),
    ]
    if cluster_indices is not None:
        columns.append(as_bytes_rows(np.asarray(cluster_indices).reshape(n, 1), "<u2", 2))

    rows = np.concatenate(columns, axis=1)
    logger.debug(f"Other buffer: {other_record_size(scale_fmt, cluster_indices is not None)} bytes per splat")
    return pad_to_multiple(rows.tobytes(), 8)


def create_color_data(records: np.ndarray, fmt: ColorFormat, texture_width: int) -> tuple[bytes, int, int]:
    """Color + opacity texture in 16x16 Z-order tiles.

    Returns:
        (data, width, height); pixels beyond the splat count are zero.
    """
    n = len(records)
    width, height = calc_texture_size(n, texture_width)

    pixels = np.zeros((width * height, 4), dtype=np.float32)
    dst = splat_index_to_texture_index(np.arange(n), width)
    pixels[dst, :3] = records["dc0"]
    pixels[dst, 3] = records["opacity"]

    fmt = ColorFormat(fmt)
    with np.errstate(over="ignore"):
        if fmt == ColorFormat.Float32x4:
            data = pixels.astype("<f4")
        elif fmt == ColorFormat.Float16x4:
            data = pixels.astype("<f2")
        elif fmt == ColorFormat.Norm8x4:
            data = quantize(pixels, 8).astype(np.uint8)
        else:
            raise ValueError(f"Unsupported color format {fmt}")

    logger.debug(f"Color texture {width}x{height} {fmt.name}: {data.nbytes} bytes")
    return data.tobytes(), width, height


def create_sh_data(records: np.ndarray, fmt: SHFormat) -> bytes:
    """SH table, 15 coefficient triples + one zero padding triple per splat."""
    n = len(records)
    padded = np.zeros((n, SH_SLOTS, 3), dtype=np.float32)
    padded[:, :SH_COUNT] = records["sh"]
    triples = padded.reshape(n * SH_SLOTS, 3)

    fmt = SHFormat(fmt)
    with np.errstate(over="ignore"):
        if fmt == SHFormat.Float32:
            data = triples.astype("<f4")
        elif fmt == SHFormat.Float16:
            data = triples.astype("<f2")
        elif fmt == SHFormat.Norm11:
            data = encode_norm11(triples).astype("<u4")
        elif fmt == SHFormat.Norm6:
            data = encode_norm565(triples).astype("<u2")
        else:
            raise ValueError(f"Unsupported SH format {fmt}")

    return pad_to_multiple(data.tobytes(), 8)
