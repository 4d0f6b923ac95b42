"""
Content Optimizer - rewrites a script for a platform's video format and
turns character/location analysis into image-generation prompts.
"""

import json
import logging
from typing import Any, Optional, Sequence

from core.config import Config, get_config
from core.errors import AnalysisError, ExtractionError, ProviderError
from core.extraction import extract_structured
from services.providers.base import TextProvider
from .models import ImagePromptOptimization, VideoScriptOptimization

logger = logging.getLogger(__name__)


VIDEO_SCRIPT_PROMPT = """Optimize this true crime script for {platform} video content:

Original Script: "{script}"
Target Length: {target_length} seconds
Platform: {platform}

Provide optimization as JSON only:
{{
  "optimizedScript": "Rewritten script optimized for video",
  "timing": {{
    "totalSeconds": {target_length},
    "segments": [
      {{
        "timeStart": 0,
        "timeEnd": 30,
        "content": "Segment content",
        "visualCue": "What should be shown",
        "voiceDirection": "Tone and pacing notes"
      }}
    ]
  }},
  "platformOptimization": {{
    "hookTiming": "When to place the strongest hook",
    "pacing": "Optimal pacing for platform",
    "visualChanges": "Recommended visual change frequency",
    "callToAction": "Platform-specific CTA suggestions"
  }},
  "engagementTactics": [
    "Specific tactics to maintain viewer attention"
  ]
}}"""


IMAGE_PROMPTS_PROMPT = """Create optimized image-generation prompts for true crime documentary imagery.

Characters: {characters}
Locations: {locations}

Generate prompts that:
1. Create professional, documentary-quality images
2. Respect the subjects and avoid sensationalism
3. Match the "Binge True Crime" polaroid aesthetic
4. Include appropriate historical context
5. Ensure legal and ethical compliance

Return JSON only:
{{
  "characterPrompts": [
    {{
      "character": "Character name",
      "prompt": "Detailed image prompt",
      "style": "documentary/professional/historical",
      "mood": "appropriate emotional tone"
    }}
  ],
  "locationPrompts": [
    {{
      "location": "Location name",
      "prompt": "Detailed image prompt",
      "atmosphere": "environmental mood",
      "timeOfDay": "optimal lighting"
    }}
  ],
  "compositionTips": [
    "Specific guidance for polaroid layouts"
  ]
}}"""


def _as_json(items: Sequence[Any]) -> str:
    return json.dumps([
        item.to_json_dict() if hasattr(item, "to_json_dict") else item
        for item in items
    ])


class ContentOptimizer:
    """
    Usage:
        optimizer = ContentOptimizer(AnthropicClient())
        result = await optimizer.optimize_video_script(script, 60, "tiktok")
        print(result.optimized_script)
    """

    def __init__(self, text_provider: TextProvider, config: Optional[Config] = None):
        self.text_provider = text_provider
        self.config = config or get_config()

    async def optimize_video_script(
        self,
        script: str,
        target_length: int,
        platform: str,
    ) -> VideoScriptOptimization:
        """Rewrite ``script`` into timed segments for ``target_length`` seconds on ``platform``."""
        if target_length <= 0:
            raise AnalysisError(
                "Target length must be a positive number of seconds",
                reason_code="INVALID_TARGET_LENGTH",
            )

        prompt = VIDEO_SCRIPT_PROMPT.format(
            script=script.strip(), target_length=target_length, platform=platform
        )
        logger.info(f"Optimizing script for {platform} ({target_length}s)...")
        return await self._complete(
            prompt,
            VideoScriptOptimization,
            "video script optimization",
            max_tokens=1800,
            temperature=0.4,
        )

    async def optimize_image_prompts(
        self,
        character_profiles: Sequence[Any],
        locations: Sequence[Any],
    ) -> ImagePromptOptimization:
        prompt = IMAGE_PROMPTS_PROMPT.format(
            characters=_as_json(character_profiles), locations=_as_json(locations)
        )
        return await self._complete(
            prompt,
            ImagePromptOptimization,
            "image prompt optimization",
            max_tokens=1500,
            temperature=0.7,
        )

    async def _complete(self, prompt: str, schema, operation: str, max_tokens: int, temperature: float):
        failure = f"{operation.capitalize()} failed"
        try:
            text = await self.text_provider.complete(
                prompt,
                model=self.config.models.primary_model,
                max_tokens=max_tokens,
                temperature=temperature,
            )
            return extract_structured(text, schema, source=operation)
        except ProviderError as e:
            raise AnalysisError(f"{failure}: {e}", provider=e.provider) from e
        except ExtractionError as e:
            raise AnalysisError(
                f"{failure}: {e}",
                reason_code=e.reason_code,
                details=e.details,
            ) from e
