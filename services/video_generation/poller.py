"""
Video Job Poller

Submits a render job and follows it to a terminal state:

    SUBMITTED -> RUNNING -> SUCCEEDED | FAILED
                         -> TIMED_OUT (poll ceiling reached)

Each attempt fetches the task once; a transient fetch failure is retried a
few times with a short backoff before the attempt is counted as failed.
An explicit provider failure raises RenderFailure, exhausting the attempts
raises PollingTimeoutError.
"""

import asyncio
import logging
import random
from datetime import datetime
from typing import Any, Awaitable, Callable, Optional

from tenacity import AsyncRetrying, retry_if_exception, stop_after_attempt, wait_fixed

from core.config import Config, get_config
from core.errors import PollingTimeoutError, ProviderError, RenderFailure, SubmissionError
from services.image_set.models import ImageSet
from services.providers.base import VideoProvider
from .models import JobStatus, VideoAsset, VideoJob, VideoMetadata, parse_job_status
from .platforms import PlatformSpec, get_platform_spec

logger = logging.getLogger(__name__)


STYLE_ELEMENTS = [
    "Professional documentary cinematography",
    "Subtle camera movements",
    "Serious investigative tone",
    "Crime scene establishing shots",
    "Documentary lighting",
    "Respectful treatment of subject matter",
]

VISUAL_ELEMENTS = [
    "Archival footage aesthetic",
    "Police investigation visuals",
    "Location establishing shots",
    "Professional news broadcast style",
]


SCRIPT_EXCERPT_CHARS = 200

TEXT_TO_VIDEO_DIRECTION = [
    "Style: Documentary cinematography, investigative journalism aesthetic, serious tone.",
    "Visuals: Crime scene locations, archival footage style, professional news broadcast quality.",
    "Movement: Subtle camera movements, slow pans, documentary-style establishing shots.",
    "Lighting: Professional documentary lighting, realistic but dramatic.",
    "Mood: Mysterious, respectful, investigative journalism standard.",
]


def script_excerpt(script: str, limit: int = SCRIPT_EXCERPT_CHARS) -> str:
    """Opening of the script on one line, cut at a word boundary."""
    text = " ".join((script or "").split())
    if len(text) <= limit:
        return text
    cut = text[:limit].rsplit(" ", 1)[0] or text[:limit]
    return cut + "..."


def create_documentary_prompt(episode_title: str, script: str = "") -> str:
    prompt = f"Documentary style true crime video: {episode_title}. "
    excerpt = script_excerpt(script)
    if excerpt:
        prompt += f"Story: \"{excerpt}\" "
    return prompt + ", ".join(STYLE_ELEMENTS) + ". " + ", ".join(VISUAL_ELEMENTS) + "."


def create_text_to_video_prompt(script: str) -> str:
    """Prompt for rendering without a source image; the script carries the content."""
    return (
        f"Professional true crime documentary video based on: \"{script_excerpt(script)}\"\n"
        + "\n".join(TEXT_TO_VIDEO_DIRECTION)
    )


def _is_transient(error: BaseException) -> bool:
    return isinstance(error, ProviderError) and error.transient


class VideoJobPoller:
    """
    Usage:
        poller = VideoJobPoller(RunwayClient())
        asset = await poller.generate_video_from_script(script, image_set, "youtube")
        print(asset.video_url)
    """

    def __init__(
        self,
        video_provider: VideoProvider,
        config: Optional[Config] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.video_provider = video_provider
        self.config = config or get_config()
        self._sleep = sleep

    @property
    def provider_name(self) -> str:
        return getattr(self.video_provider, "provider_name", "video provider")

    def build_payload(self, prompt: str, image_url: Optional[str], platform_spec: PlatformSpec) -> dict[str, Any]:
        payload = {
            "promptText": prompt,
            "model": self.config.models.video_model if image_url else self.config.models.text_video_model,
            "duration": min(self.config.models.video_max_clip_seconds, platform_spec.max_duration),
            "ratio": platform_spec.runway_ratio,
            "seed": random.randint(0, 999_999),
        }
        if image_url:
            payload["promptImage"] = image_url
        return payload

    async def submit(self, prompt: str, image_url: Optional[str], platform_spec: PlatformSpec) -> str:
        """
        Create the render job; without ``image_url`` it is a text-to-video job.

        Raises:
            SubmissionError: If the provider rejects the job synchronously
        """
        if image_url:
            submit_task = self.video_provider.submit_task
        else:
            submit_task = getattr(self.video_provider, "submit_text_task", None)
            if submit_task is None:
                raise SubmissionError(
                    "No image available to seed video generation",
                    reason_code="NO_SOURCE_IMAGE",
                    provider=self.provider_name,
                )

        payload = self.build_payload(prompt, image_url, platform_spec)
        try:
            job_id = await submit_task(payload)
        except ProviderError as e:
            raise SubmissionError(
                f"Video submission failed: {e}",
                reason_code=e.reason_code,
                provider=e.provider or self.provider_name,
                details={"statusCode": e.status_code} if e.status_code else None,
            ) from e

        logger.info(f"Submitted {platform_spec.name} video job {job_id}")
        return job_id

    async def _fetch(self, job_id: str) -> dict[str, Any]:
        retrying = AsyncRetrying(
            stop=stop_after_attempt(max(1, self.config.polling.transient_retries)),
            wait=wait_fixed(self.config.polling.transient_backoff_seconds),
            retry=retry_if_exception(_is_transient),
            sleep=self._sleep,
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                return await self.video_provider.get_task(job_id)

    async def poll(self, job_id: str) -> VideoJob:
        """
        Poll until the job reaches a terminal state.

        Returns:
            The SUCCEEDED job, with ``output_url`` set

        Raises:
            RenderFailure: The provider reported the job as FAILED
            PollingTimeoutError: No terminal state within the poll ceiling
            ProviderError: A non-transient error while fetching the job
        """
        polling = self.config.polling
        job = VideoJob(id=job_id)

        for attempt in range(1, polling.max_attempts + 1):
            job.attempts = attempt
            try:
                record = await self._fetch(job_id)
            except ProviderError as e:
                if not e.transient:
                    raise
                logger.warning(f"Poll attempt {attempt}/{polling.max_attempts} for {job_id} failed: {e}")
                record = None

            if record is not None:
                job.status = parse_job_status(record.get("status"))
                job.progress = record.get("progress")
                logger.info(f"Status check {attempt}/{polling.max_attempts}: {job.status.value}")

                if job.status == JobStatus.SUCCEEDED:
                    output = record.get("output") or []
                    if not output:
                        raise RenderFailure("Task succeeded without an output URL", job_id, provider=self.provider_name)
                    job.output_url = output[0]
                    job.completed_at = datetime.utcnow().isoformat()
                    return job

                if job.status == JobStatus.FAILED:
                    job.failure_reason = record.get("failure_reason") or record.get("failure") or "Unknown error"
                    raise RenderFailure(job.failure_reason, job_id, provider=self.provider_name)

            if attempt < polling.max_attempts:
                await self._sleep(polling.interval_seconds)

        raise PollingTimeoutError(
            f"Video generation timeout after {polling.max_attempts} attempts "
            f"- please check the {self.provider_name} dashboard",
            job_id=job_id,
            attempts=polling.max_attempts,
            provider=self.provider_name,
        )

    async def generate_video_from_script(
        self,
        script: str,
        image_set: ImageSet,
        platform: Optional[str] = None,
    ) -> VideoAsset:
        """
        Render one video for ``platform`` from the episode's image set.

        The set's primary image seeds an image-to-video job; a set with no
        images at all renders from the script alone.
        """
        platform = platform or self.config.default_platform
        spec = get_platform_spec(platform)

        image_url = image_set.primary_image_url()
        if image_url:
            generation_type = "image_to_video"
            model = self.config.models.video_model
            prompt = create_documentary_prompt(image_set.analysis.episode_title, script)
        else:
            logger.warning("No image in the set; falling back to text-to-video")
            generation_type = "text_to_video"
            model = self.config.models.text_video_model
            prompt = create_text_to_video_prompt(script)

        logger.info(f"Generating {spec.name} video from script ({generation_type})...")
        job_id = await self.submit(prompt, image_url, spec)
        job = await self.poll(job_id)

        return VideoAsset(
            video_url=job.output_url,
            platform=spec.name,
            duration=min(self.config.models.video_max_clip_seconds, spec.max_duration),
            specifications=spec.to_dict(),
            generation_type=generation_type,
            job=job,
            metadata=VideoMetadata(
                script=script[:100] + "...",
                image_count=len(image_set.portraits),
                model=model,
            ),
        )
