"""
Image Set Generator

Produces the episode's image bundle from a script:
- one master background keyed on (masterLocation, timeframe)
- one YouTube thumbnail keyed on episodeTitle
- one portrait per character, generated sequentially with pacing

Every image is independently fallible: a failed image is logged, recorded in
``failures`` and skipped, and ``metadata.total_images`` counts only images
that actually exist.
"""

import logging
import time
from typing import Awaitable, Callable, Optional

from core.config import Config, get_config
from core.errors import GenerationError, ProviderError
from core.pacing import RequestPacer
from services.analysis.models import CharacterProfile, ScriptAnalysis
from services.analysis.script_analyzer import ScriptAnalyzer
from services.providers.base import ImageProvider
from .models import GeneratedImage, ImageFailure, ImageSet, ImageSetMetadata, ImageType

logger = logging.getLogger(__name__)


BACKGROUND_PROMPT = """Create a documentary-style photograph of {location} from {timeframe}.

Style: Professional crime documentary, neutral lighting, slightly desaturated colors.
Content: Establishing shot of the location, no people visible, atmospheric.
Mood: Serious, investigative, historical accuracy.
Quality: High resolution, suitable for text overlays.

Avoid: Graphic content, overly dramatic lighting, modern elements if historical."""

THUMBNAIL_PROMPT = """Create a YouTube thumbnail for true crime episode: "{title}"

Style: Professional documentary thumbnail
Layout: Text overlay on crime scene background
Colors: Dark, serious tones with readable text
Text: Large, bold title text
Quality: Eye-catching but tasteful, no clickbait elements

Background reference: Crime scene or location setting
Mood: Mysterious, investigative, professional"""

PORTRAIT_PROMPT = """Create a professional documentary-style portrait photograph of {name}.

Subject: {age_range} year old {gender} {role}
Description: {description}

Style: Police file photo or professional headshot style
Lighting: Even, professional lighting
Background: Neutral gray or white background
Expression: Neutral, serious, appropriate for documentary
Quality: High resolution, clear facial features

Format: Head and shoulders portrait, facing camera
Avoid: Graphic content, exaggerated features, modern clothing if historical"""


class ImageSetGenerator:
    """
    Usage:
        generator = ImageSetGenerator(analyzer, image_provider)
        image_set = await generator.generate_episode_image_set(script)
        print(image_set.metadata.total_images)
    """

    def __init__(
        self,
        analyzer: ScriptAnalyzer,
        image_provider: ImageProvider,
        config: Optional[Config] = None,
        pacer_factory: Optional[Callable[[], RequestPacer]] = None,
    ):
        self.analyzer = analyzer
        self.image_provider = image_provider
        self.config = config or get_config()
        self._pacer_factory = pacer_factory or (lambda: RequestPacer(self.config.images.pacing_seconds))

    async def _generate(self, prompt: str, size: str, what: str) -> str:
        try:
            return await self.image_provider.generate_image(
                prompt,
                size=size,
                quality=self.config.images.quality,
                style=self.config.images.style,
            )
        except ProviderError as e:
            raise GenerationError(
                f"{what} generation failed: {e}",
                reason_code=e.reason_code,
                provider=e.provider,
            ) from e

    async def generate_master_background(self, location: str, timeframe: str) -> GeneratedImage:
        prompt = BACKGROUND_PROMPT.format(location=location, timeframe=timeframe or "the period of the case")
        url = await self._generate(prompt, self.config.images.resolution, "Master background")
        return GeneratedImage(
            url=url,
            type=ImageType.MASTER_BACKGROUND,
            prompt=prompt,
            location=location,
            timeframe=timeframe,
        )

    async def generate_thumbnail(self, episode_title: str) -> GeneratedImage:
        prompt = THUMBNAIL_PROMPT.format(title=episode_title)
        url = await self._generate(prompt, self.config.images.thumbnail_size, "YouTube thumbnail")
        return GeneratedImage(
            url=url,
            type=ImageType.YOUTUBE_THUMBNAIL,
            prompt=prompt,
            title=episode_title,
        )

    async def generate_subject_portrait(self, subject: CharacterProfile) -> GeneratedImage:
        prompt = PORTRAIT_PROMPT.format(
            name=subject.name,
            age_range=subject.age_range,
            gender=subject.gender,
            role=subject.role.value,
            description=subject.description,
        )
        url = await self._generate(
            prompt, self.config.images.resolution, f"Subject portrait for {subject.name}"
        )
        return GeneratedImage(
            url=url,
            type=ImageType.SUBJECT_PORTRAIT,
            prompt=prompt,
            subject=subject.name,
            role=subject.role.value,
            description=subject.description,
        )

    async def _attempt(
        self,
        image_type: ImageType,
        call: Callable[[], Awaitable[GeneratedImage]],
        failures: list[ImageFailure],
        subject: Optional[str] = None,
    ) -> Optional[GeneratedImage]:
        try:
            return await call()
        except GenerationError as e:
            logger.warning(f"Skipping {image_type.value}{f' ({subject})' if subject else ''}: {e}")
            failures.append(ImageFailure(
                type=image_type,
                subject=subject,
                reason_code=e.reason_code,
                message=str(e),
            ))
            return None

    async def generate_from_analysis(self, analysis: ScriptAnalysis) -> ImageSet:
        """Generate all images for an existing analysis."""
        started = time.monotonic()
        failures: list[ImageFailure] = []

        logger.info("Generating master background...")
        master_background = await self._attempt(
            ImageType.MASTER_BACKGROUND,
            lambda: self.generate_master_background(analysis.master_location, analysis.timeframe),
            failures,
        )

        logger.info("Generating YouTube thumbnail...")
        thumbnail = await self._attempt(
            ImageType.YOUTUBE_THUMBNAIL,
            lambda: self.generate_thumbnail(analysis.episode_title),
            failures,
        )

        logger.info(f"Generating {len(analysis.segments)} subject portraits...")
        pacer = self._pacer_factory()
        outcomes = await pacer.run_sequential(
            analysis.segments,
            self.generate_subject_portrait,
            recoverable=(GenerationError,),
        )

        portraits = []
        for outcome in outcomes:
            if outcome.ok:
                portraits.append(outcome.result)
                continue
            logger.warning(f"Skipping portrait for {outcome.item.name}: {outcome.error}")
            failures.append(ImageFailure(
                type=ImageType.SUBJECT_PORTRAIT,
                subject=outcome.item.name,
                reason_code=outcome.error.reason_code,
                message=str(outcome.error),
            ))

        total = ImageSet.count_images(master_background, thumbnail, portraits)
        logger.info(f"Image set complete: {total} images, {len(failures)} failures")

        return ImageSet(
            analysis=analysis,
            master_background=master_background,
            thumbnail=thumbnail,
            portraits=portraits,
            failures=failures,
            metadata=ImageSetMetadata(
                total_images=total,
                duration_seconds=round(time.monotonic() - started, 3),
            ),
        )

    async def generate_episode_image_set(self, script: str) -> ImageSet:
        """
        Analyze a script and generate its complete image set.

        Raises:
            AnalysisError: If the script cannot be analyzed (no images are attempted)
        """
        logger.info("Analyzing script for true crime content...")
        analysis = await self.analyzer.analyze(script)
        return await self.generate_from_analysis(analysis)
