"""
Provider Clients

Thin httpx clients for the three upstream generative providers:
- Anthropic (text): advanced analysis, synthesis, compliance, series planning
- OpenAI (text + images): basic script analysis, DALL-E 3 images
- Runway (video): image-to-video tasks

All calls go through a per-provider circuit breaker with a bounded timeout.
"""

from .anthropic_client import AnthropicClient
from .base import HTTPProvider, ImageProvider, TextProvider, VideoProvider
from .openai_client import OpenAIImageClient, OpenAITextClient
from .runway_client import RunwayClient

__all__ = [
    "AnthropicClient",
    "HTTPProvider",
    "ImageProvider",
    "TextProvider",
    "VideoProvider",
    "OpenAIImageClient",
    "OpenAITextClient",
    "RunwayClient",
]
