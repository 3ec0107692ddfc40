"""Z-order (Morton) curves: 3D sort keys and the 16x16-tiled color texture layout."""

from __future__ import annotations

import numpy as np

TEXTURE_WIDTH = 2048
TILE_SIZE = 16

_U64 = np.uint64


def part1by2(v: np.ndarray) -> np.ndarray:
    """Spread the low 21 bits of each value so two zero bits separate them."""
    x = np.asarray(v, dtype=np.uint64) & _U64(0x1FFFFF)
    x = (x ^ (x << _U64(32))) & _U64(0x1F00000000FFFF)
    x = (x ^ (x << _U64(16))) & _U64(0x1F0000FF0000FF)
    x = (x ^ (x << _U64(8))) & _U64(0x100F00F00F00F00F)
    x = (x ^ (x << _U64(4))) & _U64(0x10C30C30C30C30C3)
    x = (x ^ (x << _U64(2))) & _U64(0x1249249249249249)
    return x


def morton_encode3(ipos: np.ndarray) -> np.ndarray:
    """Interleave (N, 3) integer grid coordinates into 63-bit keys, x in the lowest bit."""
    ipos = np.asarray(ipos)
    return (part1by2(ipos[:, 2]) << _U64(2)) | (part1by2(ipos[:, 1]) << _U64(1)) | part1by2(ipos[:, 0])


def decode_morton2d_16x16(t: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Decode the low 8 bits of ``t`` into (x, y) inside a 16x16 tile."""
    t = np.asarray(t, dtype=np.int64)
    t = (t & 0xFF) | ((t & 0xFE) << 7)  # -EAFBGCHEAFBGCHD
    t &= 0x5555                         # -E-F-G-H-A-B-C-D
    t = (t ^ (t >> 1)) & 0x3333         # --EF--GH--AB--CD
    t = (t ^ (t >> 2)) & 0x0F0F         # ----EFGH----ABCD
    return t & 0xF, t >> 8


def splat_index_to_texture_index(idx: np.ndarray, width: int = TEXTURE_WIDTH) -> np.ndarray:
    """Map splat indices to linear pixel indices of a ``width``-wide tiled texture.

    Each run of 256 consecutive indices fills one 16x16 tile in Z-order; tiles
    are laid out row by row, ``width // 16`` per row.
    """
    idx = np.asarray(idx, dtype=np.int64)
    local_x, local_y = decode_morton2d_16x16(idx)
    tiles_per_row = width // TILE_SIZE
    tile = idx >> 8
    x = (tile % tiles_per_row) * TILE_SIZE + local_x
    y = (tile // tiles_per_row) * TILE_SIZE + local_y
    return y * width + x


def calc_texture_size(splat_count: int, width: int = TEXTURE_WIDTH) -> tuple[int, int]:
    """Texture dimensions holding ``splat_count`` pixels, height a multiple of the tile size."""
    if width <= 0 or width % TILE_SIZE:
        raise ValueError(f"Texture width must be a positive multiple of {TILE_SIZE}, got {width}")
    height = max(1, (splat_count + width - 1) // width)
    height = (height + TILE_SIZE - 1) // TILE_SIZE * TILE_SIZE
    return width, height
