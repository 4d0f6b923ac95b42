"""
Video Generation Service

Image-to-video (or text-to-video) rendering with bounded completion polling.

Usage:
    from services.video_generation import VideoJobPoller

    poller = VideoJobPoller(RunwayClient())
    asset = await poller.generate_video_from_script(script, image_set, "tiktok")
"""

from .models import JobStatus, VideoAsset, VideoJob, VideoMetadata
from .platforms import PLATFORM_SPECS, SUPPORTED_PLATFORMS, PlatformSpec, get_platform_spec, normalize_platform
from .poller import VideoJobPoller, create_documentary_prompt, create_text_to_video_prompt

__all__ = [
    "JobStatus",
    "VideoAsset",
    "VideoJob",
    "VideoMetadata",
    "PLATFORM_SPECS",
    "SUPPORTED_PLATFORMS",
    "PlatformSpec",
    "get_platform_spec",
    "normalize_platform",
    "VideoJobPoller",
    "create_documentary_prompt",
    "create_text_to_video_prompt",
]
