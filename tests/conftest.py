"""Shared pytest fixtures for splatasset tests."""

import json
from pathlib import Path
from typing import Optional

import numpy as np
import pytest
from plyfile import PlyData, PlyElement

# Property order written by 3DGS training: 62 floats, 248 bytes per vertex.
SPLAT_PROPERTIES = (
    ["x", "y", "z", "nx", "ny", "nz", "f_dc_0", "f_dc_1", "f_dc_2"]
    + [f"f_rest_{i}" for i in range(45)]
    + ["opacity", "scale_0", "scale_1", "scale_2", "rot_0", "rot_1", "rot_2", "rot_3"]
)


def write_splat_ply(
    path: Path,
    positions: np.ndarray,
    f_dc: Optional[np.ndarray] = None,
    f_rest: Optional[np.ndarray] = None,
    opacity: Optional[np.ndarray] = None,
    scale: Optional[np.ndarray] = None,
    rot: Optional[np.ndarray] = None,
) -> Path:
    """Write a binary little-endian 3DGS PLY.

    ``f_rest`` is (N, 45) in file order: 15 red, then 15 green, then 15 blue
    coefficients. ``rot`` is (w, x, y, z). Omitted attributes are zero, except
    rotation which defaults to identity.
    """
    positions = np.asarray(positions, dtype=np.float32).reshape(-1, 3)
    n = len(positions)
    vertex = np.zeros(n, dtype=[(name, "<f4") for name in SPLAT_PROPERTIES])

    for i, axis in enumerate("xyz"):
        vertex[axis] = positions[:, i]
    if f_dc is not None:
        for i in range(3):
            vertex[f"f_dc_{i}"] = np.asarray(f_dc)[:, i]
    if f_rest is not None:
        for i in range(45):
            vertex[f"f_rest_{i}"] = np.asarray(f_rest)[:, i]
    if opacity is not None:
        vertex["opacity"] = opacity
    if scale is not None:
        for i in range(3):
            vertex[f"scale_{i}"] = np.asarray(scale)[:, i]
    if rot is None:
        rot = np.tile([1.0, 0.0, 0.0, 0.0], (n, 1))
    for i in range(4):
        vertex[f"rot_{i}"] = np.asarray(rot)[:, i]

    PlyData([PlyElement.describe(vertex, "vertex")], text=False, byte_order="<").write(str(path))
    return path


@pytest.fixture
def data_root(tmp_path: Path) -> Path:
    """Create a temporary data root with a scans directory."""
    (tmp_path / "scans").mkdir(parents=True, exist_ok=True)
    return tmp_path


@pytest.fixture
def make_splat_ply():
    """The write_splat_ply helper, for tests that build their own files."""
    return write_splat_ply


@pytest.fixture
def two_splat_ply(data_root: Path) -> Path:
    """Two splats at (0,0,0) and (1,1,1), zero opacity logit, identity rotation."""
    return write_splat_ply(
        data_root / "scans" / "two.ply",
        positions=np.array([[0.0, 0.0, 0.0], [1.0, 1.0, 1.0]]),
    )


@pytest.fixture
def random_splat_ply(data_root: Path) -> Path:
    """300 random splats with every attribute populated."""
    rng = np.random.default_rng(42)
    n = 300
    return write_splat_ply(
        data_root / "scans" / "random.ply",
        positions=rng.uniform(-5, 5, (n, 3)),
        f_dc=rng.standard_normal((n, 3)),
        f_rest=rng.uniform(-0.3, 0.3, (n, 45)),
        opacity=rng.uniform(-4, 4, n),
        scale=rng.uniform(-6, 0, (n, 3)),
        rot=rng.standard_normal((n, 4)),
    )


@pytest.fixture
def sample_cameras_json(data_root: Path) -> Path:
    """cameras.json one level above the scans directory, as 3DGS training writes it."""
    cameras = [
        {
            "id": 0, "img_name": "frame_00000", "width": 640, "height": 480,
            "position": [1.0, 2.0, 3.0],
            "rotation": [[1.0, 0.0, 0.0], [0.0, 0.0, -1.0], [0.0, 1.0, 0.0]],
            "fx": 500.0, "fy": 500.0,
        },
        {
            "id": 1, "img_name": "frame_00001", "width": 640, "height": 480,
            "position": [0.0, 0.0, 0.0],
            "rotation": [[1.0, 0.0, 0.0], [0.0, 1.0, 0.0], [0.0, 0.0, 1.0]],
            "fx": 500.0, "fy": 500.0,
        },
    ]
    cameras_file = data_root / "cameras.json"
    with open(cameras_file, "w") as f:
        json.dump(cameras, f)
    return cameras_file
