"""
Structured outputs of the analysis passes.

These schemas double as the validation step for LLM responses
(see core.extraction) and as the JSON shapes returned over HTTP, so fields
are snake_case in Python and camelCase on the wire.
"""

from enum import Enum
from typing import Any, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with camelCase aliases."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class FrozenCamelModel(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class CharacterRole(str, Enum):
    VICTIM = "victim"
    SUSPECT = "suspect"
    DETECTIVE = "detective"
    WITNESS = "witness"
    FAMILY = "family"


# ============================================================
# Basic analysis (drives image generation)
# ============================================================

class CharacterProfile(FrozenCamelModel):
    """A person extracted from the script."""
    name: str = Field(min_length=1, validation_alias=AliasChoices("name", "subjectName"))
    role: CharacterRole
    description: str
    age_range: str = Field(validation_alias=AliasChoices("ageRange", "age_range"))
    gender: str

    @field_validator("role", mode="before")
    @classmethod
    def _normalize_role(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("age_range", mode="before")
    @classmethod
    def _stringify_age(cls, value: Any) -> Any:
        if isinstance(value, (int, float)):
            return str(value)
        return value


class ScriptAnalysis(FrozenCamelModel):
    """Structured entities extracted from a narrative script."""
    episode_title: str = Field(min_length=1)
    master_location: str = Field(min_length=1)
    timeframe: str
    segments: tuple[CharacterProfile, ...]


# ============================================================
# Advanced analysis (second, independent analysis)
# ============================================================

class ContentQuality(CamelModel):
    score: int = Field(ge=0, le=100)
    strengths: list[str] = Field(default_factory=list)
    improvements: list[str] = Field(default_factory=list)
    factual_accuracy: Optional[str] = None
    narrative_flow: Optional[str] = None


class CharacterInsight(CamelModel):
    name: str
    role: str
    description: str = ""
    emotional_context: Optional[str] = None
    timeframe: Optional[str] = None
    significance: Optional[str] = None


class LocationInsight(CamelModel):
    name: str
    type: Optional[str] = None
    description: str = ""
    atmosphere: Optional[str] = None
    significance: Optional[str] = None


class VisualRequirements(CamelModel):
    key_scenes: list[str] = Field(default_factory=list)
    character_profiles: list[CharacterInsight] = Field(default_factory=list)
    locations: list[LocationInsight] = Field(default_factory=list)


class AdvancedAnalysis(CamelModel):
    """Forensic-depth analysis used as the second synthesis input."""
    content_quality: ContentQuality
    visual_requirements: VisualRequirements
    content_optimization: dict[str, Any] = Field(default_factory=dict)
    compliance_check: dict[str, Any] = Field(default_factory=dict)


# ============================================================
# Synthesis
# ============================================================

class Discrepancy(CamelModel):
    aspect: str
    views: dict[str, str] = Field(default_factory=dict)
    recommendation: str


class SynthesizedRecommendation(CamelModel):
    final_script: Optional[str] = None
    visual_direction: Optional[str] = None
    quality_score: int = Field(ge=0, le=100)


class SynthesisResult(CamelModel):
    """Reconciliation of two independent analyses."""
    best_elements: dict[str, list[str]]
    discrepancies: list[Discrepancy] = Field(default_factory=list)
    synthesized_recommendation: SynthesizedRecommendation
    confidence_level: str

    @property
    def final_script(self) -> Optional[str]:
        script = self.synthesized_recommendation.final_script
        return script if script and script.strip() else None


# ============================================================
# Compliance
# ============================================================

ComplianceLevel = Literal["pass", "warning", "fail"]
PlatformStanding = Literal["compliant", "warning", "violation"]


class PlatformCompliance(CamelModel):
    youtube: PlatformStanding
    tiktok: PlatformStanding
    instagram: PlatformStanding
    issues: list[str] = Field(default_factory=list)

    @field_validator("youtube", "tiktok", "instagram", mode="before")
    @classmethod
    def _lower(cls, value: Any) -> Any:
        return value.strip().lower() if isinstance(value, str) else value


class ComplianceVerdict(CamelModel):
    """Outcome of the legal/ethical/platform-policy check."""
    overall_compliance: ComplianceLevel
    platform_compliance: PlatformCompliance
    legal_assessment: dict[str, Any] = Field(default_factory=dict)
    ethical_considerations: dict[str, Any] = Field(default_factory=dict)
    required_changes: list[str] = Field(default_factory=list)
    alternative_approaches: list[str] = Field(default_factory=list)

    @field_validator("overall_compliance", mode="before")
    @classmethod
    def _lower(cls, value: Any) -> Any:
        return value.strip().lower() if isinstance(value, str) else value

    @property
    def failed(self) -> bool:
        return self.overall_compliance == "fail"


# ============================================================
# Series planning
# ============================================================

class PlannedEpisode(CamelModel):
    episode_number: int
    title: str
    focus_aspect: str = ""
    duration: Optional[str] = None
    key_visuals: list[str] = Field(default_factory=list)
    cliffhanger: Optional[str] = None


class SeriesPlan(CamelModel):
    series_overview: dict[str, Any]
    episodes: list[PlannedEpisode]
    branding_consistency: dict[str, Any] = Field(default_factory=dict)
    growth_strategy: dict[str, Any] = Field(default_factory=dict)


# ============================================================
# Content optimization
# ============================================================

class ScriptSegment(CamelModel):
    time_start: float
    time_end: float
    content: str
    visual_cue: Optional[str] = None
    voice_direction: Optional[str] = None


class ScriptTiming(CamelModel):
    total_seconds: float
    segments: list[ScriptSegment] = Field(default_factory=list)


class VideoScriptOptimization(CamelModel):
    optimized_script: str
    timing: ScriptTiming
    platform_optimization: dict[str, Any] = Field(default_factory=dict)
    engagement_tactics: list[str] = Field(default_factory=list)


class CharacterPrompt(CamelModel):
    character: str
    prompt: str
    style: Optional[str] = None
    mood: Optional[str] = None


class LocationPrompt(CamelModel):
    location: str
    prompt: str
    atmosphere: Optional[str] = None
    time_of_day: Optional[str] = None


class ImagePromptOptimization(CamelModel):
    character_prompts: list[CharacterPrompt] = Field(default_factory=list)
    location_prompts: list[LocationPrompt] = Field(default_factory=list)
    composition_tips: list[str] = Field(default_factory=list)
