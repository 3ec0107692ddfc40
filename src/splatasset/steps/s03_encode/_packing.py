"""Fixed-point packing of float vectors, quaternions and SH triples.

All normalized encodings saturate to [0, 1] and round to nearest:
``floor(clamp(v, 0, 1) * (2^bits - 1) + 0.5)``. Fields are packed with the
first component in the lowest bits and serialized little-endian.
"""

from __future__ import annotations

import numpy as np

from splatasset.core.contracts import VectorFormat

VECTOR_SIZES = {
    VectorFormat.Float32: 12,
    VectorFormat.Norm16: 6,
    VectorFormat.Norm11: 4,
    VectorFormat.Norm6: 2,
}

ROTATION_SIZE = 4
CLUSTER_INDEX_SIZE = 2


def vector_size(fmt: VectorFormat) -> int:
    return VECTOR_SIZES[VectorFormat(fmt)]


def other_record_size(scale_fmt: VectorFormat, with_cluster_index: bool = False) -> int:
    """Bytes per splat in the other buffer: rotation, scale, optional cluster index."""
    return ROTATION_SIZE + vector_size(scale_fmt) + (CLUSTER_INDEX_SIZE if with_cluster_index else 0)


def next_multiple_of(size: int, multiple_of: int) -> int:
    return (size + multiple_of - 1) // multiple_of * multiple_of


def pad_to_multiple(data: bytes, multiple_of: int = 8) -> bytes:
    """Zero-pad ``data`` so downstream can read it as 64-bit blocks."""
    padded = next_multiple_of(len(data), multiple_of)
    return data + b"\x00" * (padded - len(data))


def quantize(v: np.ndarray, bits: int) -> np.ndarray:
    """Saturate-then-scale to unsigned integers of ``bits`` width (as uint64)."""
    max_value = (1 << bits) - 1
    with np.errstate(invalid="ignore"):
        scaled = np.floor(np.clip(np.asarray(v, dtype=np.float64), 0.0, 1.0) * max_value + 0.5)
        return scaled.astype(np.uint64)


def _pack3(v: np.ndarray, bits: tuple[int, int, int]) -> np.ndarray:
    bx, by, bz = bits
    x = quantize(v[:, 0], bx)
    y = quantize(v[:, 1], by)
    z = quantize(v[:, 2], bz)
    return x | (y << np.uint64(bx)) | (z << np.uint64(bx + by))


def encode_norm16(v: np.ndarray) -> np.ndarray:
    """48 bits: 16.16.16, returned as uint64."""
    return _pack3(v, (16, 16, 16))


def encode_norm11(v: np.ndarray) -> np.ndarray:
    """32 bits: 11.10.11."""
    return _pack3(v, (11, 10, 11)).astype(np.uint32)


def encode_norm655(v: np.ndarray) -> np.ndarray:
    """16 bits: 6.5.5."""
    return _pack3(v, (6, 5, 5)).astype(np.uint16)


def encode_norm565(v: np.ndarray) -> np.ndarray:
    """16 bits: 5.6.5."""
    return _pack3(v, (5, 6, 5)).astype(np.uint16)


def encode_quat_norm10(q: np.ndarray) -> np.ndarray:
    """32 bits: 10.10.10.2 of a smallest-three packed rotation."""
    x = quantize(q[:, 0], 10)
    y = quantize(q[:, 1], 10)
    z = quantize(q[:, 2], 10)
    w = quantize(q[:, 3], 2)
    packed = x | (y << np.uint64(10)) | (z << np.uint64(20)) | (w << np.uint64(30))
    return packed.astype(np.uint32)


def decode_quat_norm10(packed: np.ndarray) -> np.ndarray:
    """Unpack 10.10.10.2 words back into (N, 4) floats in [0, 1]."""
    packed = np.asarray(packed, dtype=np.uint32)
    return np.column_stack([
        (packed & 0x3FF) / 1023.0,
        ((packed >> 10) & 0x3FF) / 1023.0,
        ((packed >> 20) & 0x3FF) / 1023.0,
        (packed >> 30) / 3.0,
    ])


def as_bytes_rows(values: np.ndarray, dtype: str, row_bytes: int) -> np.ndarray:
    """View (N, k) ``values`` cast to ``dtype`` as (N, row_bytes) uint8 rows."""
    raw = np.ascontiguousarray(np.asarray(values).astype(dtype))
    return raw.view(np.uint8).reshape(len(raw), -1)[:, :row_bytes]


def encode_vectors(v: np.ndarray, fmt: VectorFormat) -> np.ndarray:
    """Encode (N, 3) vectors into (N, vector_size(fmt)) little-endian bytes."""
    fmt = VectorFormat(fmt)
    v = np.asarray(v)
    if fmt == VectorFormat.Float32:
        return as_bytes_rows(v, "<f4", 12)
    if fmt == VectorFormat.Norm16:
        return as_bytes_rows(encode_norm16(v)[:, None], "<u8", 6)
    if fmt == VectorFormat.Norm11:
        return as_bytes_rows(encode_norm11(v)[:, None], "<u4", 4)
    if fmt == VectorFormat.Norm6:
        return as_bytes_rows(encode_norm655(v)[:, None], "<u2", 2)
    raise ValueError(f"Unsupported vector format {fmt}")
