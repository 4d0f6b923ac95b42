"""
Script Analysis Services

- ScriptAnalyzer: structured cast/location extraction that drives images
- AdvancedScriptAnalyzer: second, independent forensic analysis
- DualModelSynthesizer: reconciles the two analyses
- ComplianceGate: pass/warning/fail verdict before video rendering
- SeriesPlanner: multi-episode planning
- ContentOptimizer: platform script rewrites and image prompt suggestions
"""

from .advanced_analyzer import AdvancedScriptAnalyzer
from .compliance import ComplianceGate
from .models import (
    AdvancedAnalysis,
    CharacterProfile,
    CharacterRole,
    ComplianceVerdict,
    ImagePromptOptimization,
    ScriptAnalysis,
    SeriesPlan,
    SynthesisResult,
    VideoScriptOptimization,
)
from .optimizer import ContentOptimizer
from .script_analyzer import ScriptAnalyzer
from .series_planner import SeriesPlanner
from .synthesizer import DualModelSynthesizer

__all__ = [
    "AdvancedScriptAnalyzer",
    "ComplianceGate",
    "AdvancedAnalysis",
    "CharacterProfile",
    "CharacterRole",
    "ComplianceVerdict",
    "ContentOptimizer",
    "ImagePromptOptimization",
    "ScriptAnalysis",
    "SeriesPlan",
    "SynthesisResult",
    "VideoScriptOptimization",
    "ScriptAnalyzer",
    "SeriesPlanner",
    "DualModelSynthesizer",
]
