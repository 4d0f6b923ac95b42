"""
Static render parameters per target platform.
"""

from dataclasses import asdict, dataclass
from typing import Optional

from core.errors import ConfigurationError


@dataclass(frozen=True)
class PlatformSpec:
    name: str
    width: int
    height: int
    aspect_ratio: str
    max_duration: int  # seconds
    fps: int = 30

    @property
    def runway_ratio(self) -> str:
        """Closest output ratio accepted by Runway image-to-video models."""
        return RUNWAY_RATIOS[self.aspect_ratio]

    def to_dict(self) -> dict:
        data = asdict(self)
        return {
            "width": data["width"],
            "height": data["height"],
            "aspectRatio": data["aspect_ratio"],
            "maxDuration": data["max_duration"],
            "fps": data["fps"],
        }


RUNWAY_RATIOS = {
    "16:9": "1280:720",
    "9:16": "720:1280",
    "1:1": "960:960",
}

PLATFORM_SPECS: dict[str, PlatformSpec] = {
    "youtube": PlatformSpec("youtube", 1920, 1080, "16:9", max_duration=600),  # 10 minutes
    "tiktok": PlatformSpec("tiktok", 1080, 1920, "9:16", max_duration=180),
    "instagram": PlatformSpec("instagram", 1080, 1080, "1:1", max_duration=90),  # reels
    "shorts": PlatformSpec("shorts", 1080, 1920, "9:16", max_duration=60),
}

SUPPORTED_PLATFORMS = tuple(PLATFORM_SPECS)

DEFAULT_PLATFORM = "youtube"


def normalize_platform(platform: Optional[str]) -> str:
    """Canonical platform key: trimmed, lower-case, blank means the default."""
    return (platform or "").strip().lower() or DEFAULT_PLATFORM


def get_platform_spec(platform: Optional[str]) -> PlatformSpec:
    """Look up render parameters, rejecting unknown platforms."""
    spec = PLATFORM_SPECS.get(normalize_platform(platform))
    if spec is None:
        raise ConfigurationError(
            f"Unsupported platform: {platform}",
            reason_code="UNSUPPORTED_PLATFORM",
            details={"supported": list(SUPPORTED_PLATFORMS)},
        )
    return spec
