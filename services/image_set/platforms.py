"""
Per-platform image specifications for an episode's image set.
"""

from dataclasses import dataclass

from pydantic import Field

from core.errors import ConfigurationError
from services.analysis.models import CamelModel
from services.video_generation.platforms import normalize_platform
from .models import ImageSet


@dataclass(frozen=True)
class ImageSpec:
    width: int
    height: int
    aspect_ratio: str

    def to_dict(self) -> dict:
        return {"width": self.width, "height": self.height, "aspectRatio": self.aspect_ratio}


IMAGE_PLATFORM_SPECS: dict[str, ImageSpec] = {
    "youtube": ImageSpec(1280, 720, "16:9"),
    "tiktok": ImageSpec(1080, 1920, "9:16"),
    "instagram": ImageSpec(1080, 1080, "1:1"),
    "shorts": ImageSpec(1080, 1920, "9:16"),
}


class PlatformImageSet(CamelModel):
    platform: str
    specifications: dict
    image_set: ImageSet
    optimization_required: bool = True
    notes: list[str] = Field(default_factory=list)


def optimize_for_platform(image_set: ImageSet, platform: str) -> PlatformImageSet:
    """
    Attach ``platform``'s image specifications to an image set.

    Images are not re-rendered; ``optimizationRequired`` tells the caller the
    set still has to be cropped or resized to the target dimensions.

    Raises:
        ConfigurationError: Unknown platform (UNSUPPORTED_PLATFORM)
    """
    key = normalize_platform(platform)
    spec = IMAGE_PLATFORM_SPECS.get(key)
    if spec is None:
        raise ConfigurationError(
            f"Platform {platform} not supported",
            reason_code="UNSUPPORTED_PLATFORM",
            details={"supported": list(IMAGE_PLATFORM_SPECS)},
        )

    notes = []
    if image_set.thumbnail is not None and spec.aspect_ratio != "16:9":
        notes.append(f"Thumbnail is 16:9 and needs a {spec.aspect_ratio} crop")
    return PlatformImageSet(
        platform=key,
        specifications=spec.to_dict(),
        image_set=image_set,
        notes=notes,
    )
