"""Configuration for Step 04: Asset assembly."""

from pydantic import BaseModel, Field

from splatasset.utils.cameras import CAMERAS_FILENAME, DEFAULT_FOV


class AssembleConfig(BaseModel):
    load_cameras: bool = Field(True, description="Attach camera metadata found next to or above the source")
    cameras_filename: str = Field(CAMERAS_FILENAME, description="Camera metadata file name to search for")
    fov: float = Field(DEFAULT_FOV, gt=0, lt=180, description="Placeholder field of view for every camera")
