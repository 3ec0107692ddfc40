"""Camera metadata: locate and parse the cameras.json written next to 3DGS training output."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Annotated, Optional

import numpy as np
from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from splatasset.core.contracts import CameraInfo

logger = logging.getLogger(__name__)

CAMERAS_FILENAME = "cameras.json"
DEFAULT_FOV = 25.0

Vec3 = Annotated[list[float], Field(min_length=3, max_length=3)]


class JsonCamera(BaseModel):
    """One record of cameras.json as written by 3DGS training."""

    id: int
    img_name: str = ""
    width: int
    height: int
    position: Vec3
    fx: float
    fy: float
    rotation: list[Vec3] = Field(..., min_length=3, max_length=3)


_CAMERA_LIST = TypeAdapter(list[JsonCamera])


def find_cameras_file(source_path: Path, filename: str = CAMERAS_FILENAME) -> Optional[Path]:
    """Search the source file's directory, then each ancestor, for ``filename``."""
    for directory in Path(source_path).absolute().parents:
        candidate = directory / filename
        if candidate.is_file():
            return candidate
    return None


def camera_from_json(cam: JsonCamera, fov: float = DEFAULT_FOV) -> CameraInfo:
    """Recover the camera basis from the stored rotation.

    The columns of ``rotation`` are the camera axes; Y and Z are flipped to get
    a camera-facing convention. ``fov`` is a placeholder, fx/fy are not used.
    """
    rot = np.asarray(cam.rotation, dtype=np.float32)
    axis_x = rot[:, 0]
    axis_y = -rot[:, 1]
    axis_z = -rot[:, 2]
    return CameraInfo(
        pos=tuple(float(v) for v in cam.position),
        axis_x=tuple(float(v) for v in axis_x),
        axis_y=tuple(float(v) for v in axis_y),
        axis_z=tuple(float(v) for v in axis_z),
        fov=fov,
    )


def load_cameras(
    source_path: Path,
    filename: str = CAMERAS_FILENAME,
    fov: float = DEFAULT_FOV,
) -> Optional[list[CameraInfo]]:
    """Load camera metadata for a source file. Missing or empty metadata yields None."""
    cameras_path = find_cameras_file(source_path, filename)
    if cameras_path is None:
        logger.debug(f"No {filename} found above {source_path}")
        return None

    try:
        with open(cameras_path, encoding="utf-8") as f:
            json_cameras = _CAMERA_LIST.validate_python(json.load(f))
    except (json.JSONDecodeError, UnicodeDecodeError, ValidationError) as exc:
        logger.warning(f"Ignoring unreadable camera metadata {cameras_path}: {exc}")
        return None

    if not json_cameras:
        return None

    cameras = [camera_from_json(cam, fov) for cam in json_cameras]
    logger.info(f"Loaded {len(cameras)} cameras from {cameras_path}")
    return cameras
