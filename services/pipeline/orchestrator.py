"""
Episode Pipeline Orchestrator

Coordinates the providers for one episode:

    1. advanced analysis  ┐ (concurrent)
       image set          ┘
    2. synthesis of the two analyses
    3. compliance gate    -> fail: rejected outcome, no video
    4. video render + poll
    5. assemble result, emit analytics

Stage failures never roll back earlier work: the failed outcome carries
every artifact produced before the failing stage.
"""

import asyncio
import logging
import time
from typing import Any, Optional, Sequence

from core.config import Config, get_config
from core.errors import ConfigurationError
from services.analysis import (
    AdvancedScriptAnalyzer,
    ComplianceGate,
    ComplianceVerdict,
    ContentOptimizer,
    DualModelSynthesizer,
    ImagePromptOptimization,
    ScriptAnalyzer,
    SeriesPlan,
    SeriesPlanner,
    VideoScriptOptimization,
)
from services.image_set import ImageSet, ImageSetGenerator, PlatformImageSet, optimize_for_platform
from services.providers import AnthropicClient, OpenAIImageClient, OpenAITextClient, RunwayClient
from services.video_generation import VideoAsset, VideoJobPoller, get_platform_spec, normalize_platform
from .analytics import AnalyticsSink, LoggingAnalyticsSink, emit_event
from .registry import EpisodeRegistry
from .state import (
    ComplianceRejection,
    DeferredRender,
    EpisodeAnalysis,
    EpisodeAssets,
    EpisodeImages,
    EpisodeOutcome,
    EpisodeRequest,
    EpisodeResult,
    EpisodeScript,
    MultiPlatformResult,
    PartialArtifacts,
    RenderError,
    ScriptAnalysisReport,
    StageFailure,
    StageName,
    new_episode_id,
)

logger = logging.getLogger(__name__)


def _service_state(*clients: Any) -> str:
    """Summarize provider clients as operational / not_configured / degraded."""
    for client in clients:
        if client is None:
            continue
        if not getattr(client, "configured", True):
            return "not_configured"
        breaker = getattr(client, "breaker", None)
        if breaker is not None and breaker.is_open:
            return "degraded"
    return "operational"


class EpisodePipeline:
    """
    Usage:
        pipeline = EpisodePipeline.from_config(get_config())

        outcome = await pipeline.generate_episode(
            EpisodeRequest(script=script, platform="youtube", user_id="u1")
        )
        if outcome.status == "succeeded":
            print(outcome.result.assets.video.video_url)
    """

    def __init__(
        self,
        script_analyzer: ScriptAnalyzer,
        advanced_analyzer: AdvancedScriptAnalyzer,
        image_generator: ImageSetGenerator,
        synthesizer: DualModelSynthesizer,
        compliance_gate: ComplianceGate,
        video_poller: VideoJobPoller,
        series_planner: Optional[SeriesPlanner] = None,
        content_optimizer: Optional[ContentOptimizer] = None,
        analytics: Optional[AnalyticsSink] = None,
        registry: Optional[EpisodeRegistry] = None,
        config: Optional[Config] = None,
        clients: Optional[dict[str, Any]] = None,
    ):
        self.script_analyzer = script_analyzer
        self.advanced_analyzer = advanced_analyzer
        self.image_generator = image_generator
        self.synthesizer = synthesizer
        self.compliance_gate = compliance_gate
        self.video_poller = video_poller
        self.series_planner = series_planner
        self.content_optimizer = content_optimizer
        self.analytics = analytics or LoggingAnalyticsSink()
        self.registry = registry or EpisodeRegistry()
        self.config = config or get_config()
        self.clients = clients or {}

    @classmethod
    def from_config(
        cls,
        config: Optional[Config] = None,
        analytics: Optional[AnalyticsSink] = None,
    ) -> "EpisodePipeline":
        """Build the production component graph."""
        config = config or get_config()

        openai_text = OpenAITextClient(config)
        openai_images = OpenAIImageClient(config)
        anthropic = AnthropicClient(config)
        runway = RunwayClient(config)

        script_analyzer = ScriptAnalyzer(openai_text, config)
        return cls(
            script_analyzer=script_analyzer,
            advanced_analyzer=AdvancedScriptAnalyzer(anthropic, config),
            image_generator=ImageSetGenerator(script_analyzer, openai_images, config),
            synthesizer=DualModelSynthesizer(anthropic, config),
            compliance_gate=ComplianceGate(anthropic, config),
            video_poller=VideoJobPoller(runway, config),
            series_planner=SeriesPlanner(anthropic, config),
            content_optimizer=ContentOptimizer(anthropic, config),
            analytics=analytics,
            config=config,
            clients={
                "openai": openai_text,
                "openai_images": openai_images,
                "anthropic": anthropic,
                "runway": runway,
            },
        )

    async def close(self):
        """Close provider HTTP clients."""
        for client in self.clients.values():
            close = getattr(client, "close", None)
            if close is not None:
                await close()

    # ============================================================
    # Full episode
    # ============================================================

    async def generate_episode(self, request: EpisodeRequest) -> EpisodeOutcome:
        """Run all stages for one episode. Never raises for stage failures."""
        episode_id = new_episode_id()
        started = time.monotonic()
        partial = PartialArtifacts()
        stage = StageName.ADVANCED_ANALYSIS

        logger.info(f"[{episode_id}] Starting Tiger pipeline ({request.platform})")

        try:
            # Step 1: both analyses in parallel
            logger.info(f"[{episode_id}] Running dual AI analysis...")
            advanced, image_set = await asyncio.gather(
                self.advanced_analyzer.analyze(request.script),
                self.image_generator.generate_episode_image_set(request.script),
                return_exceptions=True,
            )
            if not isinstance(advanced, BaseException):
                partial.advanced_analysis = advanced
            if not isinstance(image_set, BaseException):
                partial.image_set = image_set

            step_one = ((StageName.ADVANCED_ANALYSIS, advanced), (StageName.IMAGE_SET, image_set))
            errors = [(name, value) for name, value in step_one if isinstance(value, BaseException)]
            for name, error in errors[1:]:
                logger.warning(f"[{episode_id}] {name.value} also failed: {error}")
            if errors:
                stage, error = errors[0]
                raise error

            # Step 2: reconcile
            stage = StageName.SYNTHESIS
            logger.info(f"[{episode_id}] Synthesizing AI analyses...")
            synthesis = await self.synthesizer.compare(advanced, image_set.analysis)
            partial.synthesis = synthesis

            # Step 3: gate
            stage = StageName.COMPLIANCE
            logger.info(f"[{episode_id}] Running compliance analysis...")
            compliance = await self.compliance_gate.analyze_compliance(
                request.script, image_set.portrait_descriptions()
            )
            partial.compliance = compliance

            if compliance.failed:
                logger.warning(f"[{episode_id}] Content failed compliance check; no video rendered")
                return EpisodeOutcome(
                    status="rejected",
                    episode_id=episode_id,
                    rejection=ComplianceRejection.from_verdict(compliance),
                    partial=partial,
                )

            # Step 4: render
            stage = StageName.VIDEO
            logger.info(f"[{episode_id}] Generating video content...")
            video = await self.video_poller.generate_video_from_script(
                synthesis.final_script or request.script,
                image_set,
                request.platform,
            )
            partial.video = video

            # Step 5: assemble
            stage = StageName.ASSEMBLY
            result = EpisodeResult(
                episode_id=episode_id,
                generation_time=int((time.monotonic() - started) * 1000),
                script=EpisodeScript(original=request.script, optimized=synthesis.final_script),
                analysis=EpisodeAnalysis(
                    claude=advanced,
                    basic=image_set.analysis,
                    synthesis=synthesis,
                    compliance=compliance,
                ),
                assets=EpisodeAssets(images=EpisodeImages.from_image_set(image_set), video=video),
                platform=request.platform,
                user_id=request.user_id,
            )
        except Exception as e:
            failure = StageFailure.from_exception(stage, e)
            logger.error(f"[{episode_id}] Pipeline failed at {stage.value}: [{failure.reason_code}] {failure.message}")
            return EpisodeOutcome(status="failed", episode_id=episode_id, failure=failure, partial=partial)

        self.registry.add(result)
        await emit_event(self.analytics, "episode_generated", {
            "userId": request.user_id,
            "platform": request.platform,
            "generationTime": result.generation_time,
            "imageCount": image_set.metadata.total_images,
            "complianceStatus": compliance.overall_compliance,
        })

        logger.info(f"[{episode_id}] Episode generated in {result.generation_time}ms")
        return EpisodeOutcome(status="succeeded", episode_id=episode_id, result=result, partial=partial)

    def get_episode(self, episode_id: str) -> Optional[EpisodeResult]:
        return self.registry.get(episode_id)

    # ============================================================
    # Single-stage operations
    # ============================================================

    async def generate_images(self, script: str, user_id: Optional[str] = None) -> ImageSet:
        image_set = await self.image_generator.generate_episode_image_set(script)
        await emit_event(self.analytics, "images_generated", {
            "userId": user_id,
            "imageCount": image_set.metadata.total_images,
        })
        return image_set

    async def analyze_script(self, script: str) -> ScriptAnalysisReport:
        """Advanced and basic analysis concurrently, then synthesis."""
        claude, basic = await asyncio.gather(
            self.advanced_analyzer.analyze(script),
            self.script_analyzer.analyze(script),
        )
        synthesis = await self.synthesizer.compare(claude, basic)
        return ScriptAnalysisReport(claude=claude, basic=basic, synthesis=synthesis)

    async def generate_video(
        self,
        script: str,
        image_set: ImageSet,
        platform: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> VideoAsset:
        video = await self.video_poller.generate_video_from_script(script, image_set, platform)
        await emit_event(self.analytics, "video_generated", {
            "userId": user_id,
            "platform": video.platform,
            "duration": video.duration,
        })
        return video

    async def check_compliance(self, script: str, image_descriptions: Sequence[str] = ()) -> ComplianceVerdict:
        return await self.compliance_gate.analyze_compliance(script, image_descriptions)

    async def plan_series(self, script: str, series_goals: Optional[Any] = None) -> SeriesPlan:
        if self.series_planner is None:
            raise ConfigurationError("Series planner not configured")
        return await self.series_planner.plan_content_series(script, series_goals)

    async def optimize_script(
        self,
        script: str,
        platform: Optional[str] = None,
        target_length: Optional[int] = None,
    ) -> VideoScriptOptimization:
        """Platform rewrite of ``script``; the target length defaults to one rendered clip."""
        if self.content_optimizer is None:
            raise ConfigurationError("Content optimizer not configured")
        spec = get_platform_spec(platform)
        if target_length is None:
            target_length = min(self.config.models.video_max_clip_seconds, spec.max_duration)
        return await self.content_optimizer.optimize_video_script(script, target_length, spec.name)

    async def optimize_image_prompts(self, script: str) -> ImagePromptOptimization:
        if self.content_optimizer is None:
            raise ConfigurationError("Content optimizer not configured")
        analysis = await self.script_analyzer.analyze(script)
        return await self.content_optimizer.optimize_image_prompts(
            analysis.segments, [analysis.master_location]
        )

    def optimize_images_for_platform(self, image_set: ImageSet, platform: Optional[str] = None) -> PlatformImageSet:
        return optimize_for_platform(image_set, platform)

    async def generate_multiplatform(
        self,
        script: str,
        platforms: Optional[Sequence[str]] = None,
        user_id: Optional[str] = None,
    ) -> MultiPlatformResult:
        """
        Generate the image set once and render the primary platform.

        Remaining platforms are returned as deferred renders with their specs.
        A failed compliance verdict stops before any render.
        """
        platforms = [normalize_platform(p) for p in (platforms or ["youtube", "tiktok", "instagram"])]
        specs = {p: get_platform_spec(p) for p in platforms}
        primary = platforms[0]

        logger.info(f"Generating multi-platform content for {', '.join(platforms)}...")
        image_set = await self.image_generator.generate_episode_image_set(script)

        compliance = await self.compliance_gate.analyze_compliance(script, image_set.portrait_descriptions())
        result = MultiPlatformResult(image_set=image_set, compliance=compliance)
        if compliance.failed:
            result.rejection = ComplianceRejection.from_verdict(compliance)
            logger.warning("Multi-platform content failed compliance check; no video rendered")
            return result

        try:
            result.videos[primary] = await self.video_poller.generate_video_from_script(script, image_set, primary)
        except Exception as e:
            failure = StageFailure.from_exception(StageName.VIDEO, e)
            logger.error(f"Failed to generate for {primary}: {failure.message}")
            result.videos[primary] = RenderError(error=failure.message, reason_code=failure.reason_code)

        for platform in platforms[1:]:
            result.videos[platform] = DeferredRender(specs=specs[platform].to_dict())

        await emit_event(self.analytics, "multiplatform_generated", {
            "userId": user_id,
            "platforms": platforms,
            "successCount": result.success_count,
        })
        return result

    # ============================================================
    # Health
    # ============================================================

    async def status(self) -> dict[str, Any]:
        """Aggregated provider health."""
        runway = self.clients.get("runway")
        runway_stats = await runway.health() if hasattr(runway, "health") else {}

        return {
            "services": {
                "trueCrime": _service_state(self.clients.get("openai"), self.clients.get("openai_images")),
                "anthropic": _service_state(self.clients.get("anthropic")),
                "runway": "error" if runway_stats.get("error") else "operational",
            },
            "runway": runway_stats,
            "circuits": {
                name: client.breaker.get_status()
                for name, client in self.clients.items()
                if getattr(client, "breaker", None) is not None
            },
            "episodesInMemory": len(self.registry),
        }
