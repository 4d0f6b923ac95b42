"""
Request bodies for the Tiger HTTP API.

``script`` is optional at the schema level so a missing script is reported
as ``{"error": "Script is required"}`` rather than a generic validation error.
"""

from typing import Any, Optional

from pydantic import Field

from services.analysis.models import CamelModel
from services.image_set.models import ImageSet


class ScriptBody(CamelModel):
    script: Optional[str] = None
    user_id: Optional[str] = None

    @property
    def has_script(self) -> bool:
        return bool(self.script and self.script.strip())


class GenerateEpisodeBody(ScriptBody):
    platform: Optional[str] = "youtube"


class GenerateVideoBody(ScriptBody):
    image_set: ImageSet
    platform: Optional[str] = "youtube"


class ComplianceBody(ScriptBody):
    image_descriptions: list[str] = Field(default_factory=list)


class MultiPlatformBody(ScriptBody):
    platforms: Optional[list[str]] = None


class SeriesBody(ScriptBody):
    series_goals: Optional[Any] = None


class OptimizeScriptBody(ScriptBody):
    platform: Optional[str] = "youtube"
    target_length: Optional[int] = Field(default=None, gt=0)


class PlatformImagesBody(CamelModel):
    image_set: ImageSet
    platform: Optional[str] = "youtube"
