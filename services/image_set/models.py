"""
Image set data model.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import Field

from services.analysis.models import CamelModel, FrozenCamelModel, ScriptAnalysis


class ImageType(str, Enum):
    MASTER_BACKGROUND = "master_background"
    YOUTUBE_THUMBNAIL = "youtube_thumbnail"
    SUBJECT_PORTRAIT = "subject_portrait"


class GeneratedImage(FrozenCamelModel):
    """One image produced by one provider call."""
    url: str
    type: ImageType
    prompt: str

    # Provenance (depends on type)
    subject: Optional[str] = None
    role: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    timeframe: Optional[str] = None
    title: Optional[str] = None


class ImageFailure(CamelModel):
    """An image that was planned but could not be generated."""
    type: ImageType
    subject: Optional[str] = None
    reason_code: str
    message: str


class ImageSetMetadata(CamelModel):
    total_images: int
    generation_time: str = Field(default_factory=lambda: datetime.utcnow().isoformat())
    duration_seconds: float = 0.0
    format: str = "true_crime_polaroid_set"


class ImageSet(CamelModel):
    """Fixed-shape image bundle for one episode."""
    analysis: ScriptAnalysis
    master_background: Optional[GeneratedImage] = None
    thumbnail: Optional[GeneratedImage] = None
    portraits: list[GeneratedImage] = Field(default_factory=list)
    failures: list[ImageFailure] = Field(default_factory=list)
    metadata: ImageSetMetadata

    @staticmethod
    def count_images(
        master_background: Optional[GeneratedImage],
        thumbnail: Optional[GeneratedImage],
        portraits: list[GeneratedImage],
    ) -> int:
        return sum(image is not None for image in (master_background, thumbnail)) + len(portraits)

    def portrait_descriptions(self) -> list[str]:
        """Human-readable descriptions of the portraits, for compliance review."""
        return [
            f"{p.role or 'subject'} portrait of {p.subject}: {p.description or 'documentary headshot'}"
            for p in self.portraits
        ]

    def primary_image_url(self) -> Optional[str]:
        """Best source frame for video generation: thumbnail, then background, then a portrait."""
        for image in (self.thumbnail, self.master_background, *self.portraits):
            if image is not None:
                return image.url
        return None
