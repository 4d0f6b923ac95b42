"""
Shared fixtures: a sample case script, canned provider responses and stub
providers for every pipeline component.
"""

import json
import os
import sys
from unittest.mock import AsyncMock, MagicMock

import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.config import Config
from services.analysis import (
    AdvancedScriptAnalyzer,
    ComplianceGate,
    ContentOptimizer,
    DualModelSynthesizer,
    ScriptAnalyzer,
    SeriesPlanner,
)
from services.image_set import ImageSetGenerator
from services.pipeline import EpisodePipeline, LoggingAnalyticsSink
from services.video_generation import VideoJobPoller


SAMPLE_SCRIPT = """
In 1987, Sarah Mitchell disappeared from downtown Portland after leaving her job at the First National Bank. The 28-year-old accountant was last seen walking to her car in the parking garage at 6:15 PM on a rainy October evening.

Detective Robert Johnson led the investigation into what became one of the city's most puzzling cases.

The first suspect was her ex-boyfriend Mark Stevens, who had a documented history of stalking and had been seen arguing with Sarah outside her apartment the week before she vanished.

A neighbor, maintenance worker Rick Wilson, was also questioned after witnesses saw him arguing with Sarah in the lobby the day before her disappearance.

Sarah's car was found three days later in a remote area outside the city. Her purse was missing, but her jewelry was left behind.

Despite searches involving hundreds of volunteers and several agencies, Sarah was never found.

Two weeks later Mark Stevens left town for a job in Seattle, but he had an alibi for the night in question: he was at a bar with several witnesses.

Rick Wilson refused a polygraph test and moved out of the apartment complex within a month.

Twenty-five years later, the case remains unsolved, and Sarah's family is still searching for answers.
""".strip()


BASIC_ANALYSIS = {
    "episodeTitle": "The Vanishing of Sarah Mitchell",
    "masterLocation": "Downtown Portland parking garage",
    "timeframe": "October 1987",
    "segments": [
        {
            "name": "Sarah Mitchell",
            "role": "victim",
            "description": "28-year-old accountant in 1980s office attire",
            "ageRange": "28",
            "gender": "female",
        },
        {
            "name": "Robert Johnson",
            "role": "detective",
            "description": "Veteran Portland detective in a trench coat",
            "ageRange": "45-50",
            "gender": "male",
        },
        {
            "name": "Mark Stevens",
            "role": "suspect",
            "description": "Ex-boyfriend, late twenties, casual clothing",
            "ageRange": "28-32",
            "gender": "male",
        },
    ],
}

ADVANCED_ANALYSIS = {
    "contentQuality": {
        "score": 82,
        "strengths": ["Clear timeline", "Restrained tone"],
        "improvements": ["Attribute witness statements"],
        "factualAccuracy": "Consistent with the stated facts",
        "narrativeFlow": "Chronological and easy to follow",
    },
    "visualRequirements": {
        "keyScenes": ["Rainy parking garage at dusk", "Abandoned car on a rural road"],
        "characterProfiles": [
            {"name": "Sarah Mitchell", "role": "victim", "description": "Young accountant"},
            {"name": "Robert Johnson", "role": "detective", "description": "Lead investigator"},
        ],
        "locations": [
            {"name": "First National Bank garage", "type": "crime scene", "description": "Concrete garage"},
        ],
    },
    "contentOptimization": {"hooks": ["Where did Sarah go?"]},
    "complianceCheck": {"sensitivityLevel": "medium", "concerns": []},
}

SYNTHESIS = {
    "bestElements": {
        "claude": ["Narrative quality assessment"],
        "gpt": ["Concise cast list"],
    },
    "discrepancies": [
        {
            "aspect": "Number of suspects",
            "views": {"claude": "Two", "gpt": "One"},
            "recommendation": "Keep both suspects",
        }
    ],
    "synthesizedRecommendation": {
        "finalScript": "Optimized script: In 1987, Sarah Mitchell vanished from Portland.",
        "visualDirection": "Muted documentary palette",
        "qualityScore": 85,
    },
    "confidenceLevel": "high",
}


SCRIPT_OPTIMIZATION = {
    "optimizedScript": "1987. Portland. Sarah Mitchell walks into a parking garage and is never seen again.",
    "timing": {
        "totalSeconds": 10,
        "segments": [
            {
                "timeStart": 0,
                "timeEnd": 4,
                "content": "1987. Portland.",
                "visualCue": "Rain on a parking garage entrance",
                "voiceDirection": "Low, measured",
            },
            {"timeStart": 4, "timeEnd": 10, "content": "Sarah Mitchell is never seen again."},
        ],
    },
    "platformOptimization": {"hookTiming": "First two seconds", "pacing": "Fast"},
    "engagementTactics": ["Open on the unanswered question"],
}

IMAGE_PROMPTS = {
    "characterPrompts": [
        {"character": "Sarah Mitchell", "prompt": "1980s portrait, soft light", "style": "historical", "mood": "respectful"}
    ],
    "locationPrompts": [
        {"location": "Portland parking garage", "prompt": "Rainy garage at dusk", "timeOfDay": "evening"}
    ],
    "compositionTips": ["Keep the victim portrait centered"],
}


def compliance_verdict(overall: str = "pass", **overrides) -> dict:
    verdict = {
        "overallCompliance": overall,
        "platformCompliance": {
            "youtube": "compliant",
            "tiktok": "compliant",
            "instagram": "compliant",
            "issues": [],
        },
        "legalAssessment": {"defamationRisk": "low"},
        "ethicalConsiderations": {"victimRespect": "appropriate"},
        "requiredChanges": [],
        "alternativeApproaches": [],
    }
    verdict.update(overrides)
    return verdict


REJECTED_VERDICT = compliance_verdict(
    "fail",
    platformCompliance={
        "youtube": "violation",
        "tiktok": "violation",
        "instagram": "warning",
        "issues": ["Names a living private individual as the perpetrator"],
    },
    requiredChanges=["Remove accusations against named individuals"],
    alternativeApproaches=[
        "Refer to suspects as persons of interest",
        "Focus on the unanswered questions of the case",
    ],
)


def fenced(data: dict) -> str:
    """Wrap a payload the way chat models usually return JSON."""
    return f"Here is the analysis:\n```json\n{json.dumps(data, indent=2)}\n```"


def text_provider(*responses: str) -> AsyncMock:
    provider = AsyncMock()
    if len(responses) == 1:
        provider.complete = AsyncMock(return_value=responses[0])
    else:
        provider.complete = AsyncMock(side_effect=list(responses))
    return provider


def image_provider(fail_on: tuple = ()) -> AsyncMock:
    """Image stub returning numbered URLs; prompts containing any of ``fail_on`` fail."""
    from core.errors import ProviderError

    counter = {"n": 0}

    async def generate_image(prompt, size="1024x1024", quality="hd", style="natural"):
        if any(marker in prompt for marker in fail_on):
            raise ProviderError("content policy violation", reason_code="HTTP_400", provider="openai_images")
        counter["n"] += 1
        return f"https://images.example.com/{counter['n']}.png"

    provider = AsyncMock()
    provider.generate_image = AsyncMock(side_effect=generate_image)
    return provider


def video_provider(*statuses: dict, task_id: str = "task-123") -> MagicMock:
    provider = MagicMock()
    provider.provider_name = "runway"
    provider.submit_task = AsyncMock(return_value=task_id)
    provider.submit_text_task = AsyncMock(return_value=task_id)
    provider.get_task = AsyncMock(side_effect=list(statuses))
    return provider


def running(progress: float = 0.5) -> dict:
    return {"id": "task-123", "status": "RUNNING", "progress": progress}


def succeeded(url: str = "https://videos.example.com/episode.mp4") -> dict:
    return {"id": "task-123", "status": "SUCCEEDED", "output": [url]}


@pytest.fixture
def config():
    """Config with no real waiting between calls."""
    cfg = Config()
    cfg.images.pacing_seconds = 0
    cfg.polling.interval_seconds = 0
    cfg.polling.max_attempts = 5
    cfg.polling.transient_retries = 3
    cfg.polling.transient_backoff_seconds = 0
    return cfg


@pytest.fixture
def sample_script():
    return SAMPLE_SCRIPT


@pytest.fixture
def build_pipeline(config):
    """
    Factory for a pipeline wired to stub providers.

    Each keyword overrides the stub for one component.
    """

    def _build(
        basic=None,
        advanced=None,
        synthesis=None,
        compliance=None,
        images=None,
        video=None,
        series=None,
        optimizer=None,
        analytics=None,
    ):
        basic = basic or text_provider(fenced(BASIC_ANALYSIS))
        advanced = advanced or text_provider(fenced(ADVANCED_ANALYSIS))
        synthesis = synthesis or text_provider(fenced(SYNTHESIS))
        compliance = compliance or text_provider(fenced(compliance_verdict("pass")))
        images = images or image_provider()
        video = video or video_provider(running(), succeeded())
        series = series or text_provider("{}")
        optimizer = optimizer or text_provider(fenced(SCRIPT_OPTIMIZATION))

        script_analyzer = ScriptAnalyzer(basic, config)
        pipeline = EpisodePipeline(
            script_analyzer=script_analyzer,
            advanced_analyzer=AdvancedScriptAnalyzer(advanced, config),
            image_generator=ImageSetGenerator(script_analyzer, images, config),
            synthesizer=DualModelSynthesizer(synthesis, config),
            compliance_gate=ComplianceGate(compliance, config),
            video_poller=VideoJobPoller(video, config, sleep=AsyncMock()),
            series_planner=SeriesPlanner(series, config),
            content_optimizer=ContentOptimizer(optimizer, config),
            analytics=analytics or LoggingAnalyticsSink(),
            config=config,
        )
        pipeline.stubs = {
            "basic": basic,
            "advanced": advanced,
            "synthesis": synthesis,
            "compliance": compliance,
            "images": images,
            "video": video,
            "series": series,
            "optimizer": optimizer,
        }
        return pipeline

    return _build
