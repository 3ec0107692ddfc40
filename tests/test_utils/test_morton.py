"""Tests for splatasset.utils.morton: Morton keys and tiled texture layout."""

import numpy as np
import pytest

from splatasset.utils.morton import (
    calc_texture_size,
    decode_morton2d_16x16,
    morton_encode3,
    part1by2,
    splat_index_to_texture_index,
)


class TestMorton3D:
    def test_part1by2_spreads_bits(self):
        assert int(part1by2(np.array([0b1]))[0]) == 0b1
        assert int(part1by2(np.array([0b11]))[0]) == 0b1001
        assert int(part1by2(np.array([0b101]))[0]) == 0b1000001

    def test_axis_bit_positions(self):
        keys = morton_encode3(np.array([[1, 0, 0], [0, 1, 0], [0, 0, 1], [1, 1, 1]], dtype=np.uint32))
        assert keys.tolist() == [1, 2, 4, 7]

    def test_max_coordinate_fits_63_bits(self):
        top = (1 << 21) - 1
        key = morton_encode3(np.array([[top, top, top]], dtype=np.uint32))
        assert int(key[0]) == (1 << 63) - 1


class TestTextureLayout:
    def test_first_tile_is_z_order(self):
        x, y = decode_morton2d_16x16(np.arange(4))
        assert x.tolist() == [0, 1, 0, 1]
        assert y.tolist() == [0, 0, 1, 1]

    def test_tile_covers_16x16(self):
        x, y = decode_morton2d_16x16(np.arange(256))
        assert set(zip(x.tolist(), y.tolist())) == {(i, j) for i in range(16) for j in range(16)}

    @pytest.mark.parametrize("width", [16, 64, 2048])
    def test_mapping_is_a_bijection(self, width: int):
        n = width * 32
        dst = splat_index_to_texture_index(np.arange(n), width)
        assert len(np.unique(dst)) == n
        assert dst.min() == 0
        assert dst.max() == n - 1

    def test_second_tile_starts_at_x16(self):
        dst = splat_index_to_texture_index(np.array([256]), 2048)
        assert int(dst[0]) == 16

    def test_next_tile_row(self):
        # 2048 / 16 = 128 tiles per row
        dst = splat_index_to_texture_index(np.array([128 * 256]), 2048)
        assert int(dst[0]) == 16 * 2048


class TestCalcTextureSize:
    @pytest.mark.parametrize("count, height", [(1, 16), (2048, 16), (2048 * 16, 16), (2048 * 16 + 1, 32)])
    def test_height_rounds_to_tile(self, count: int, height: int):
        assert calc_texture_size(count, 2048) == (2048, height)

    def test_zero_count_still_one_tile_row(self):
        assert calc_texture_size(0, 2048) == (2048, 16)

    def test_width_must_be_tile_multiple(self):
        with pytest.raises(ValueError):
            calc_texture_size(10, 100)
