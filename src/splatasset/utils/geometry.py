"""Per-splat attribute math: rotation packing, scale, color and opacity transforms."""

from __future__ import annotations

import numpy as np

SH_C0 = 0.2820948
SQRT2 = np.float32(np.sqrt(2.0))

# Component order that moves the largest component (row index) into the last slot.
_SMALLEST3_SWIZZLE = np.array([
    [1, 2, 3, 0],
    [0, 2, 3, 1],
    [0, 1, 3, 2],
    [0, 1, 2, 3],
])


def normalize_swizzle_rotation(wxyz: np.ndarray) -> np.ndarray:
    """Normalize (N, 4) quaternions stored as (w, x, y, z) and return them as (x, y, z, w)."""
    q = np.asarray(wxyz, dtype=np.float32)
    q = q / np.linalg.norm(q, axis=1, keepdims=True)
    return q[:, [1, 2, 3, 0]]


def pack_smallest3_rotation(q: np.ndarray) -> np.ndarray:
    """Smallest-three packing of unit (x, y, z, w) quaternions.

    Returns (N, 4) floats: the three smaller components remapped from
    [-1/sqrt2, 1/sqrt2] to [0, 1], and index/3 of the dropped largest component.
    The three are sign-flipped so the dropped component is non-negative.
    """
    q = np.asarray(q, dtype=np.float32)
    index = np.argmax(np.abs(q), axis=1)
    q = np.take_along_axis(q, _SMALLEST3_SWIZZLE[index], axis=1)

    sign = np.where(q[:, 3] >= 0, np.float32(1.0), np.float32(-1.0))
    three = q[:, :3] * sign[:, None]
    three = (three * SQRT2) * np.float32(0.5) + np.float32(0.5)
    return np.column_stack([three, index / np.float32(3.0)]).astype(np.float32)


def unpack_smallest3_rotation(packed: np.ndarray) -> np.ndarray:
    """Inverse of pack_smallest3_rotation; rebuilds the dropped component from unit length."""
    packed = np.asarray(packed, dtype=np.float64)
    three = (packed[:, :3] - 0.5) * np.sqrt(2.0)
    dropped = np.sqrt(np.maximum(0.0, 1.0 - np.sum(three * three, axis=1)))
    index = np.rint(packed[:, 3] * 3.0).astype(np.int64)

    swizzled = np.column_stack([three, dropped])
    q = np.empty_like(swizzled)
    np.put_along_axis(q, _SMALLEST3_SWIZZLE[index], swizzled, axis=1)
    return q


def linear_scale(log_scale: np.ndarray) -> np.ndarray:
    return np.abs(np.exp(log_scale))


def sh0_to_color(dc0: np.ndarray, sh_c0: float = SH_C0) -> np.ndarray:
    """Band-0 SH coefficient to linear color."""
    return dc0 * np.float32(sh_c0) + np.float32(0.5)


def sigmoid(v: np.ndarray) -> np.ndarray:
    return np.float32(1.0) / (np.float32(1.0) + np.exp(-v))


def normalize_to_bounds(positions: np.ndarray, bounds_min, bounds_max) -> np.ndarray:
    """Map (N, 3) positions into [0, 1]^3 of the given box; a flat axis maps to 0."""
    bounds_min = np.asarray(bounds_min, dtype=np.float32)
    size = np.asarray(bounds_max, dtype=np.float32) - bounds_min
    with np.errstate(divide="ignore", invalid="ignore"):
        inv_size = np.where(size > 0, np.float32(1.0) / size, np.float32(0.0)).astype(np.float32)
        return (np.asarray(positions, dtype=np.float32) - bounds_min) * inv_size
