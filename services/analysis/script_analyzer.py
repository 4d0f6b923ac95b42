"""
Script Analyzer - turns a narrative script into structured entities
(title, master location, timeframe, cast) that drive image generation.

Usage:
    analyzer = ScriptAnalyzer(text_provider, config)
    analysis = await analyzer.analyze(script)
"""

import logging
from typing import Optional

from core.config import Config, get_config
from core.errors import AnalysisError, ExtractionError, ProviderError
from core.extraction import extract_structured
from services.providers.base import TextProvider
from .models import ScriptAnalysis

logger = logging.getLogger(__name__)


ANALYSIS_PROMPT = """Analyze this true crime script and extract structured data for image generation.

Script: "{script}"

Extract:
1. Episode title (catchy, under {max_title} characters)
2. Primary location/setting for master background
3. Individual segments with subjects (at most {max_segments} people)

Return JSON only, in exactly this format:
{{
  "episodeTitle": "Title for YouTube thumbnail",
  "masterLocation": "Primary crime scene or location",
  "timeframe": "Time period (year/decade)",
  "segments": [
    {{
      "name": "Full name",
      "role": "victim | suspect | detective | witness | family",
      "description": "Brief description for image generation",
      "ageRange": "approximate age",
      "gender": "male | female"
    }}
  ]
}}

Focus on people mentioned in the script. Avoid graphic violence descriptions."""


def truncate_title(title: str, limit: int) -> str:
    """Shorten a title to ``limit`` characters, preferring a word boundary."""
    title = title.strip()
    if len(title) <= limit:
        return title
    cut = title[:limit].rstrip()
    space = cut.rfind(" ")
    if space >= limit // 2:
        cut = cut[:space]
    return cut.rstrip(" ,;:-")


class ScriptAnalyzer:
    """Single-call structured script analysis."""

    def __init__(
        self,
        text_provider: TextProvider,
        config: Optional[Config] = None,
    ):
        self.text_provider = text_provider
        self.config = config or get_config()

    async def analyze(self, script: str) -> ScriptAnalysis:
        """
        Extract title, location, timeframe and cast from a script.

        Raises:
            AnalysisError: If the provider fails or returns an invalid structure
        """
        if not script or not script.strip():
            raise AnalysisError("Script is required", reason_code="EMPTY_SCRIPT")

        limits = self.config.images
        prompt = ANALYSIS_PROMPT.format(
            script=script.strip(),
            max_title=limits.max_title_length,
            max_segments=limits.max_segments,
        )

        try:
            text = await self.text_provider.complete(
                prompt,
                model=self.config.models.analysis_model,
                max_tokens=1000,
                temperature=0.3,
            )
        except ProviderError as e:
            raise AnalysisError(f"Script analysis failed: {e}", provider=e.provider) from e

        try:
            analysis = extract_structured(text, ScriptAnalysis, source="script analysis")
        except ExtractionError as e:
            raise AnalysisError(
                f"Script analysis failed: {e}",
                reason_code=e.reason_code,
                details=e.details,
            ) from e

        return self._apply_limits(analysis)

    def _apply_limits(self, analysis: ScriptAnalysis) -> ScriptAnalysis:
        limits = self.config.images
        update = {}

        title = truncate_title(analysis.episode_title, limits.max_title_length)
        if title != analysis.episode_title:
            logger.info(f"Episode title truncated to {limits.max_title_length} chars: {title!r}")
            update["episode_title"] = title

        if len(analysis.segments) > limits.max_segments:
            dropped = [s.name for s in analysis.segments[limits.max_segments:]]
            logger.warning(f"Capping segments at {limits.max_segments}; dropped {dropped}")
            update["segments"] = analysis.segments[:limits.max_segments]

        return analysis.model_copy(update=update) if update else analysis
