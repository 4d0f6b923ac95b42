"""
Image Set Generation

Background, thumbnail and paced character portraits for one episode, plus
per-platform image specifications.
"""

from .generator import ImageSetGenerator
from .models import GeneratedImage, ImageFailure, ImageSet, ImageSetMetadata, ImageType
from .platforms import IMAGE_PLATFORM_SPECS, PlatformImageSet, optimize_for_platform

__all__ = [
    "ImageSetGenerator",
    "GeneratedImage",
    "ImageFailure",
    "ImageSet",
    "ImageSetMetadata",
    "ImageType",
    "IMAGE_PLATFORM_SPECS",
    "PlatformImageSet",
    "optimize_for_platform",
]
