"""
Configuration management for the Tiger episode pipeline.

Centralizes all configuration including:
- Provider API keys and endpoints
- Model selections
- Per-provider call timeouts
- Video polling and image pacing policy
"""

import os
from dataclasses import dataclass, field
from typing import Optional


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    return float(value) if value else default


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    return int(value) if value else default


@dataclass
class APIConfig:
    """API configuration for the generative providers."""

    # Text + image (OpenAI)
    openai_api_key: str = field(default_factory=lambda: os.getenv("OPENAI_API_KEY", ""))
    openai_api_base: str = field(
        default_factory=lambda: os.getenv("OPENAI_API_BASE", "https://api.openai.com/v1")
    )

    # Advanced analysis, synthesis, compliance (Anthropic)
    anthropic_api_key: str = field(default_factory=lambda: os.getenv("ANTHROPIC_API_KEY", ""))
    anthropic_api_base: str = field(
        default_factory=lambda: os.getenv("ANTHROPIC_API_BASE", "https://api.anthropic.com/v1")
    )
    anthropic_version: str = "2023-06-01"

    # Video (Runway)
    runway_api_key: str = field(
        default_factory=lambda: os.getenv("RUNWAYML_API_SECRET") or os.getenv("RUNWAY_API_KEY", "")
    )
    runway_api_base: str = field(
        default_factory=lambda: os.getenv("RUNWAY_API_BASE", "https://api.dev.runwayml.com/v1")
    )
    runway_version: str = "2024-11-06"


@dataclass
class ModelConfig:
    """Model selection configuration."""

    # OpenAI
    analysis_model: str = field(default_factory=lambda: os.getenv("TIGER_ANALYSIS_MODEL", "gpt-4o"))
    image_model: str = "dall-e-3"

    # Anthropic: primary for creative/analytic work, advanced for compliance
    primary_model: str = "claude-sonnet-4-20250514"
    advanced_model: str = "claude-opus-4-20250514"

    # Runway
    video_model: str = "gen4_turbo"
    text_video_model: str = field(default_factory=lambda: os.getenv("TIGER_TEXT_VIDEO_MODEL", "gen4.5"))
    video_max_clip_seconds: int = 10


@dataclass
class TimeoutConfig:
    """Upper bound (seconds) for a single provider call."""
    text_seconds: float = field(default_factory=lambda: _env_float("TIGER_TEXT_TIMEOUT", 90.0))
    image_seconds: float = field(default_factory=lambda: _env_float("TIGER_IMAGE_TIMEOUT", 120.0))
    video_submit_seconds: float = field(default_factory=lambda: _env_float("TIGER_VIDEO_SUBMIT_TIMEOUT", 30.0))
    video_poll_seconds: float = field(default_factory=lambda: _env_float("TIGER_VIDEO_POLL_TIMEOUT", 30.0))


@dataclass
class PollingConfig:
    """Video job polling policy."""
    interval_seconds: float = field(default_factory=lambda: _env_float("TIGER_POLL_INTERVAL", 10.0))
    max_attempts: int = field(default_factory=lambda: _env_int("TIGER_POLL_MAX_ATTEMPTS", 60))
    transient_retries: int = 3
    transient_backoff_seconds: float = 5.0

    @property
    def ceiling_seconds(self) -> float:
        return self.interval_seconds * self.max_attempts


@dataclass
class ImageConfig:
    """Image set generation settings."""
    pacing_seconds: float = field(default_factory=lambda: _env_float("TIGER_IMAGE_PACING", 1.0))
    resolution: str = "1024x1024"
    thumbnail_size: str = "1792x1024"  # YouTube thumbnail ratio
    quality: str = "hd"
    style: str = "natural"
    max_segments: int = 4
    max_title_length: int = 60


@dataclass
class Config:
    """Main configuration class."""

    api: APIConfig = field(default_factory=APIConfig)
    models: ModelConfig = field(default_factory=ModelConfig)
    timeouts: TimeoutConfig = field(default_factory=TimeoutConfig)
    polling: PollingConfig = field(default_factory=PollingConfig)
    images: ImageConfig = field(default_factory=ImageConfig)

    default_platform: str = "youtube"

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        return cls()

    def validate(self) -> list[str]:
        """Validate configuration and return list of issues."""
        issues = []

        if not self.api.openai_api_key:
            issues.append("OPENAI_API_KEY not configured (needed for script analysis and images)")

        if not self.api.anthropic_api_key:
            issues.append("ANTHROPIC_API_KEY not configured (needed for synthesis and compliance)")

        if not self.api.runway_api_key:
            issues.append("RUNWAYML_API_SECRET not configured (needed for video generation)")

        if self.polling.max_attempts < 1:
            issues.append("TIGER_POLL_MAX_ATTEMPTS must be at least 1")

        return issues


# Global config instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config.from_env()
    return _config


def reload_config():
    """Reload configuration from environment."""
    global _config
    _config = Config.from_env()
