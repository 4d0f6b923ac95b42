"""
Advanced Script Analyzer - the forensic-depth second opinion that feeds the
synthesizer alongside the basic ScriptAnalysis.
"""

import logging
from typing import Optional

from core.config import Config, get_config
from core.errors import AnalysisError, ExtractionError, ProviderError
from core.extraction import extract_structured
from services.providers.base import TextProvider
from .models import AdvancedAnalysis

logger = logging.getLogger(__name__)


ADVANCED_PROMPT = """You are an expert in true crime content analysis. Analyze this script with forensic precision:

Script: "{script}"

Provide detailed analysis in JSON format:
{{
  "contentQuality": {{
    "score": 0-100,
    "strengths": ["specific strengths"],
    "improvements": ["specific suggestions"],
    "factualAccuracy": "assessment",
    "narrativeFlow": "assessment"
  }},
  "visualRequirements": {{
    "keyScenes": ["scene descriptions for image generation"],
    "characterProfiles": [
      {{
        "name": "Full name",
        "role": "victim/suspect/detective/witness/family",
        "description": "Physical description and context",
        "emotionalContext": "Relevant emotional state",
        "timeframe": "When they appear in story",
        "significance": "Why they're important"
      }}
    ],
    "locations": [
      {{
        "name": "Location name",
        "type": "crime scene/residence/workplace/public",
        "description": "Visual description",
        "atmosphere": "Mood and tone needed",
        "significance": "Role in the story"
      }}
    ]
  }},
  "contentOptimization": {{
    "targetAudience": "Primary audience",
    "engagementHooks": ["Specific hooks to maintain interest"],
    "pacing": "Assessment of story pacing",
    "suspenseElements": ["Elements that create suspense"],
    "informationBalance": "Balance of facts vs narrative"
  }},
  "complianceCheck": {{
    "sensitivityLevel": "low/medium/high",
    "potentialIssues": ["Any compliance concerns"],
    "ageAppropriate": true,
    "factualVerifiable": true,
    "respectfulTreatment": "Assessment of victim/family treatment"
  }}
}}

Focus on creating compelling, respectful true crime content that honors victims while engaging audiences."""


class AdvancedScriptAnalyzer:
    """Detailed content/visual/compliance analysis on the primary model."""

    def __init__(self, text_provider: TextProvider, config: Optional[Config] = None):
        self.text_provider = text_provider
        self.config = config or get_config()

    async def analyze(self, script: str) -> AdvancedAnalysis:
        if not script or not script.strip():
            raise AnalysisError("Script is required", reason_code="EMPTY_SCRIPT")

        try:
            text = await self.text_provider.complete(
                ADVANCED_PROMPT.format(script=script.strip()),
                model=self.config.models.primary_model,
                max_tokens=2000,
                temperature=0.3,
            )
        except ProviderError as e:
            raise AnalysisError(f"Advanced script analysis failed: {e}", provider=e.provider) from e

        try:
            return extract_structured(text, AdvancedAnalysis, source="advanced analysis")
        except ExtractionError as e:
            raise AnalysisError(
                f"Advanced script analysis failed: {e}",
                reason_code=e.reason_code,
                details=e.details,
            ) from e
