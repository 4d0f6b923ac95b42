"""
Episode Pipeline

Script -> analyses + images -> synthesis -> compliance gate -> video.
"""

from .analytics import AnalyticsSink, LoggingAnalyticsSink, emit_event
from .orchestrator import EpisodePipeline
from .registry import EpisodeRegistry
from .state import (
    ComplianceRejection,
    EpisodeOutcome,
    EpisodeRequest,
    EpisodeResult,
    MultiPlatformResult,
    PartialArtifacts,
    ScriptAnalysisReport,
    StageFailure,
    StageName,
)

__all__ = [
    "AnalyticsSink",
    "LoggingAnalyticsSink",
    "emit_event",
    "EpisodePipeline",
    "EpisodeRegistry",
    "ComplianceRejection",
    "EpisodeOutcome",
    "EpisodeRequest",
    "EpisodeResult",
    "MultiPlatformResult",
    "PartialArtifacts",
    "ScriptAnalysisReport",
    "StageFailure",
    "StageName",
]
