"""Configuration for Step 02: Attribute normalization."""

from pydantic import BaseModel, Field

from splatasset.utils.geometry import SH_C0


class NormalizeConfig(BaseModel):
    sh_c0: float = Field(SH_C0, gt=0, description="Band-0 SH basis constant used for base color")
