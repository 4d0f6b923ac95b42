"""
Video job and video asset models.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import Field

from services.analysis.models import CamelModel


class JobStatus(str, Enum):
    """Status of a video generation job."""
    PENDING = "PENDING"
    RUNNING = "RUNNING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"

    @property
    def terminal(self) -> bool:
        return self in (JobStatus.SUCCEEDED, JobStatus.FAILED)


# Provider statuses outside the four we track
STATUS_ALIASES = {
    "THROTTLED": JobStatus.PENDING,
    "CANCELLED": JobStatus.FAILED,
}


def parse_job_status(raw: Optional[str]) -> JobStatus:
    value = (raw or "").upper()
    if value in STATUS_ALIASES:
        return STATUS_ALIASES[value]
    try:
        return JobStatus(value)
    except ValueError:
        return JobStatus.RUNNING


class VideoJob(CamelModel):
    id: str
    status: JobStatus = JobStatus.PENDING
    output_url: Optional[str] = None
    failure_reason: Optional[str] = None
    progress: Optional[float] = None
    attempts: int = 0
    submitted_at: str = Field(default_factory=lambda: datetime.utcnow().isoformat())
    completed_at: Optional[str] = None


class VideoMetadata(CamelModel):
    generated_at: str = Field(default_factory=lambda: datetime.utcnow().isoformat())
    script: str
    image_count: int
    model: str


class VideoAsset(CamelModel):
    """A rendered video for one platform."""
    video_url: str
    platform: str
    duration: int
    specifications: dict[str, Any]
    segments: int = 1
    generation_type: str = "image_to_video"  # or "text_to_video"
    job: VideoJob
    metadata: VideoMetadata
