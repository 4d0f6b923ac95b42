"""
Series Planner - proposes a multi-episode content series from an initial
script.
"""

import json
import logging
from typing import Any, Optional

from core.config import Config, get_config
from core.errors import AnalysisError, ExtractionError, ProviderError
from core.extraction import extract_structured
from services.providers.base import TextProvider
from .models import SeriesPlan

logger = logging.getLogger(__name__)


SERIES_PROMPT = """Plan a content series based on this initial true crime script:

Initial Script: "{script}"
Series Goals: {goals}

Create series plan as JSON only:
{{
  "seriesOverview": {{
    "theme": "Overarching series theme",
    "episodeCount": "Recommended number",
    "releaseSchedule": "Optimal posting frequency",
    "audience": "Target audience profile"
  }},
  "episodes": [
    {{
      "episodeNumber": 1,
      "title": "Episode title",
      "focusAspect": "What this episode emphasizes",
      "duration": "Recommended length",
      "keyVisuals": ["Main visual elements needed"],
      "cliffhanger": "How to connect to next episode"
    }}
  ],
  "brandingConsistency": {{
    "visualStyle": "Consistent visual elements",
    "narrativeVoice": "Consistent tone and approach",
    "seriesIdentifiers": "What makes it recognizable"
  }},
  "growthStrategy": {{
    "seoKeywords": ["Relevant keywords for discovery"],
    "crossPromotion": ["How episodes promote each other"],
    "communityBuilding": ["Audience engagement tactics"]
  }}
}}"""


class SeriesPlanner:
    def __init__(self, text_provider: TextProvider, config: Optional[Config] = None):
        self.text_provider = text_provider
        self.config = config or get_config()

    async def plan_content_series(self, script: str, series_goals: Optional[Any] = None) -> SeriesPlan:
        prompt = SERIES_PROMPT.format(script=script.strip(), goals=json.dumps(series_goals or {}))

        try:
            text = await self.text_provider.complete(
                prompt,
                model=self.config.models.primary_model,
                max_tokens=2000,
                temperature=0.6,
            )
            return extract_structured(text, SeriesPlan, source="series planning")
        except ProviderError as e:
            raise AnalysisError(f"Content series planning failed: {e}", provider=e.provider) from e
        except ExtractionError as e:
            raise AnalysisError(
                f"Content series planning failed: {e}",
                reason_code=e.reason_code,
                details=e.details,
            ) from e
