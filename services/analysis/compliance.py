"""
Compliance Gate - legal, ethical and platform-policy check run before any
video budget is spent.

A ``fail`` verdict is a normal business outcome returned to the caller; only
an inability to produce a verdict raises.
"""

import json
import logging
from typing import Optional, Sequence

from core.config import Config, get_config
from core.errors import ComplianceCheckError, ExtractionError, ProviderError
from core.extraction import extract_structured
from services.providers.base import TextProvider
from .models import ComplianceVerdict

logger = logging.getLogger(__name__)


COMPLIANCE_PROMPT = """Conduct a thorough compliance analysis for this true crime content:

Script: "{script}"
Image Descriptions: {image_descriptions}

Analyze for:
1. Legal compliance (defamation, privacy rights)
2. Platform guidelines (YouTube, TikTok, Instagram)
3. Ethical considerations (victim dignity, family impact)
4. Age appropriateness
5. Factual accuracy requirements

Return detailed assessment as JSON only:
{{
  "overallCompliance": "pass | warning | fail",
  "legalAssessment": {{
    "defamationRisk": "low/medium/high",
    "privacyRisk": "low/medium/high",
    "recommendations": ["specific legal recommendations"]
  }},
  "platformCompliance": {{
    "youtube": "compliant | warning | violation",
    "tiktok": "compliant | warning | violation",
    "instagram": "compliant | warning | violation",
    "issues": ["specific platform issues"]
  }},
  "ethicalConsiderations": {{
    "victimRespect": "assessment",
    "familyImpact": "assessment",
    "sensationalism": "low/medium/high",
    "recommendations": ["ethical improvements"]
  }},
  "requiredChanges": ["specific changes needed"],
  "alternativeApproaches": ["if major issues exist"]
}}"""


class ComplianceGate:
    """Safety-relevant analysis on the advanced model at low temperature."""

    def __init__(self, text_provider: TextProvider, config: Optional[Config] = None):
        self.text_provider = text_provider
        self.config = config or get_config()

    async def analyze_compliance(
        self,
        script: str,
        image_descriptions: Sequence[str] = (),
    ) -> ComplianceVerdict:
        prompt = COMPLIANCE_PROMPT.format(
            script=script.strip(),
            image_descriptions=json.dumps(list(image_descriptions)),
        )

        try:
            text = await self.text_provider.complete(
                prompt,
                model=self.config.models.advanced_model,
                max_tokens=2000,
                temperature=0.1,
            )
        except ProviderError as e:
            raise ComplianceCheckError(f"Compliance analysis failed: {e}", provider=e.provider) from e

        try:
            verdict = extract_structured(text, ComplianceVerdict, source="compliance analysis")
        except ExtractionError as e:
            raise ComplianceCheckError(
                f"Compliance analysis failed: {e}",
                reason_code=e.reason_code,
                details=e.details,
            ) from e

        logger.info(
            f"Compliance verdict: {verdict.overall_compliance} "
            f"({len(verdict.required_changes)} required changes)"
        )
        return verdict
