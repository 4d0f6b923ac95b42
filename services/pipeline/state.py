"""
Episode Pipeline State

Request, result and outcome shapes for one episode run. A run always ends
in exactly one EpisodeOutcome:

- succeeded: EpisodeResult with every asset
- rejected:  the compliance gate returned ``fail`` (business outcome, no video)
- failed:    a stage raised; the failure names the stage and carries every
             artifact produced before it
"""

import time
from datetime import datetime
from enum import Enum
from typing import Any, Literal, Optional, Union
from uuid import uuid4

from pydantic import Field, field_validator

from core.errors import TigerError
from services.analysis.models import (
    AdvancedAnalysis,
    CamelModel,
    ComplianceVerdict,
    FrozenCamelModel,
    ScriptAnalysis,
    SynthesisResult,
)
from services.image_set.models import GeneratedImage, ImageSet
from services.video_generation.models import VideoAsset
from services.video_generation.platforms import SUPPORTED_PLATFORMS, normalize_platform


class StageName(str, Enum):
    """Pipeline stages, in execution order."""
    ADVANCED_ANALYSIS = "advanced_analysis"
    IMAGE_SET = "image_set"
    SYNTHESIS = "synthesis"
    COMPLIANCE = "compliance"
    VIDEO = "video"
    ASSEMBLY = "assembly"


def new_episode_id() -> str:
    return f"tiger_{int(time.time() * 1000)}_{uuid4().hex[:6]}"


def _normalize_platform(value: Any) -> Any:
    if value is None or isinstance(value, str):
        value = normalize_platform(value)
        if value not in SUPPORTED_PLATFORMS:
            raise ValueError(f"Unsupported platform: {value}")
    return value


class EpisodeRequest(FrozenCamelModel):
    script: str = Field(min_length=1)
    platform: str = "youtube"
    user_id: Optional[str] = None

    @field_validator("script")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Script is required")
        return value

    @field_validator("platform", mode="before")
    @classmethod
    def _platform(cls, value: Any) -> Any:
        return _normalize_platform(value)


# ============================================================
# Successful result
# ============================================================

class EpisodeScript(CamelModel):
    original: str
    optimized: Optional[str] = None


class EpisodeAnalysis(CamelModel):
    claude: AdvancedAnalysis
    basic: ScriptAnalysis
    synthesis: SynthesisResult
    compliance: ComplianceVerdict


class ScriptAnalysisReport(CamelModel):
    """Both analyses of one script and their reconciliation."""
    claude: AdvancedAnalysis
    basic: ScriptAnalysis
    synthesis: SynthesisResult


class EpisodeImages(CamelModel):
    thumbnail: Optional[GeneratedImage] = None
    master_background: Optional[GeneratedImage] = None
    portraits: list[GeneratedImage] = Field(default_factory=list)
    total_images: int

    @classmethod
    def from_image_set(cls, image_set: ImageSet) -> "EpisodeImages":
        return cls(
            thumbnail=image_set.thumbnail,
            master_background=image_set.master_background,
            portraits=image_set.portraits,
            total_images=image_set.metadata.total_images,
        )


class EpisodeAssets(CamelModel):
    images: EpisodeImages
    video: VideoAsset


class EpisodeResult(CamelModel):
    episode_id: str
    generation_time: int  # milliseconds
    script: EpisodeScript
    analysis: EpisodeAnalysis
    assets: EpisodeAssets
    platform: str
    user_id: Optional[str] = None
    created_at: str = Field(default_factory=lambda: datetime.utcnow().isoformat())


# ============================================================
# Rejection and failure
# ============================================================

class ComplianceRejection(CamelModel):
    error: str = "Content failed compliance check"
    compliance: ComplianceVerdict
    suggestions: list[str] = Field(default_factory=list)

    @classmethod
    def from_verdict(cls, verdict: ComplianceVerdict) -> "ComplianceRejection":
        return cls(compliance=verdict, suggestions=verdict.alternative_approaches)


class StageFailure(CamelModel):
    stage: StageName
    reason_code: str
    message: str
    provider: Optional[str] = None
    details: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_exception(cls, stage: StageName, error: BaseException) -> "StageFailure":
        if isinstance(error, TigerError):
            return cls(
                stage=stage,
                reason_code=error.reason_code,
                message=str(error),
                provider=error.provider,
                details=error.details,
            )
        return cls(
            stage=stage,
            reason_code="INTERNAL_ERROR",
            message=f"{type(error).__name__}: {error}",
        )


class PartialArtifacts(CamelModel):
    """Whatever a run produced before it stopped."""
    advanced_analysis: Optional[AdvancedAnalysis] = None
    image_set: Optional[ImageSet] = None
    synthesis: Optional[SynthesisResult] = None
    compliance: Optional[ComplianceVerdict] = None
    video: Optional[VideoAsset] = None


# ============================================================
# Outcome
# ============================================================

OutcomeStatus = Literal["succeeded", "rejected", "failed"]


class EpisodeOutcome(CamelModel):
    status: OutcomeStatus
    episode_id: str
    result: Optional[EpisodeResult] = None
    rejection: Optional[ComplianceRejection] = None
    failure: Optional[StageFailure] = None
    partial: PartialArtifacts = Field(default_factory=PartialArtifacts)
    finished_at: str = Field(default_factory=lambda: datetime.utcnow().isoformat())

    @property
    def http_status(self) -> int:
        return {"succeeded": 200, "rejected": 400, "failed": 500}[self.status]

    def to_response(self) -> dict[str, Any]:
        """HTTP body for this outcome."""
        if self.status == "succeeded":
            return {
                "success": True,
                "message": "True crime episode generated successfully",
                "data": self.result.to_json_dict(),
            }
        if self.status == "rejected":
            return self.rejection.to_json_dict()
        return {
            "error": "Episode generation failed",
            "message": self.failure.message,
            "timestamp": self.finished_at,
            "stage": self.failure.stage.value,
            "reasonCode": self.failure.reason_code,
            "details": self.failure.details,
            "partial": self.partial.model_dump(mode="json", by_alias=True, exclude_none=True),
        }


# ============================================================
# Multi-platform
# ============================================================

class DeferredRender(CamelModel):
    """A platform that was not rendered in this run."""
    note: str = "Multi-platform generation limited to avoid API rate limits"
    recommendation: str = "Generate individually for each platform"
    specs: dict[str, Any]


class RenderError(CamelModel):
    error: str
    reason_code: str


class MultiPlatformResult(CamelModel):
    image_set: ImageSet
    compliance: Optional[ComplianceVerdict] = None
    rejection: Optional[ComplianceRejection] = None
    videos: dict[str, Union[VideoAsset, DeferredRender, RenderError]] = Field(default_factory=dict)

    @property
    def success_count(self) -> int:
        return sum(isinstance(v, VideoAsset) for v in self.videos.values())
