"""
Dual-Model Synthesizer - reconciles two independent analyses of the same
script into one ranked recommendation.

The two analyses are produced concurrently upstream; this component only
issues the reconciliation call. There is no retry and no fallback to either
source: a failure here is a stage failure.
"""

import json
import logging
from typing import Any, Optional

from pydantic import BaseModel

from core.config import Config, get_config
from core.errors import ExtractionError, ProviderError, SynthesisError
from core.extraction import extract_structured
from services.providers.base import TextProvider
from .models import SynthesisResult

logger = logging.getLogger(__name__)


SYNTHESIS_PROMPT = """Compare these two AI analyses of the same true crime content:

{label_a} analysis: {analysis_a}
{label_b} analysis: {analysis_b}

Provide synthesis as JSON only:
{{
  "bestElements": {{
    "{label_a}": ["specific superior elements"],
    "{label_b}": ["specific superior elements"]
  }},
  "discrepancies": [
    {{
      "aspect": "Where they disagree",
      "views": {{"{label_a}": "its perspective", "{label_b}": "its perspective"}},
      "recommendation": "Which to follow and why"
    }}
  ],
  "synthesizedRecommendation": {{
    "finalScript": "Best version of the script combining both analyses",
    "visualDirection": "Optimal visual approach",
    "qualityScore": 0-100
  }},
  "confidenceLevel": "How confident in final recommendation"
}}"""


def _to_jsonable(analysis: Any) -> Any:
    if isinstance(analysis, BaseModel):
        return analysis.model_dump(mode="json", by_alias=True)
    return analysis


class DualModelSynthesizer:
    """Reconciliation pass over two analyses."""

    def __init__(
        self,
        text_provider: TextProvider,
        config: Optional[Config] = None,
        labels: tuple[str, str] = ("claude", "gpt"),
    ):
        self.text_provider = text_provider
        self.config = config or get_config()
        self.labels = labels

    async def compare(self, analysis_a: Any, analysis_b: Any) -> SynthesisResult:
        """
        Reconcile two analyses.

        Raises:
            SynthesisError: On provider failure or malformed response
        """
        label_a, label_b = self.labels
        prompt = SYNTHESIS_PROMPT.format(
            label_a=label_a,
            label_b=label_b,
            analysis_a=json.dumps(_to_jsonable(analysis_a)),
            analysis_b=json.dumps(_to_jsonable(analysis_b)),
        )

        try:
            text = await self.text_provider.complete(
                prompt,
                model=self.config.models.primary_model,
                max_tokens=1500,
                temperature=0.2,
            )
        except ProviderError as e:
            raise SynthesisError(f"AI comparison analysis failed: {e}", provider=e.provider) from e

        try:
            result = extract_structured(text, SynthesisResult, source="synthesis")
        except ExtractionError as e:
            raise SynthesisError(
                f"AI comparison analysis failed: {e}",
                reason_code=e.reason_code,
                details=e.details,
            ) from e

        logger.info(
            f"Synthesis complete: quality={result.synthesized_recommendation.quality_score}, "
            f"discrepancies={len(result.discrepancies)}"
        )
        return result
