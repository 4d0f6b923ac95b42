"""
Tiger HTTP Server

FastAPI server that exposes the episode pipeline:
- POST /api/tiger/generate-episode - Full pipeline (script -> video)
- POST /api/tiger/generate-images - Image set only
- POST /api/tiger/analyze-script - Dual analysis + synthesis
- POST /api/tiger/generate-video - Video from an existing image set
- POST /api/tiger/generate-multiplatform - One image set, primary platform render
- POST /api/tiger/check-compliance - Compliance verdict
- POST /api/tiger/plan-series - Content series plan
- POST /api/tiger/optimize-script - Platform rewrite with timed segments
- POST /api/tiger/optimize-image-prompts - Image prompts from the script's cast
- POST /api/tiger/optimize-images - Image set specifications for a platform
- GET /api/tiger/episode/{episode_id} - Previously generated episode
- GET /api/tiger/status - Provider health
- GET /health - Health check

Usage:
    # Start server
    python -m uvicorn services.api.server:app --host 0.0.0.0 --port 8765

    # Or via main.py
    python main.py server
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from core.config import get_config
from core.errors import ConfigurationError, TigerError
from services.pipeline import EpisodePipeline, EpisodeRequest
from services.video_generation import get_platform_spec
from .schemas import (
    ComplianceBody,
    GenerateEpisodeBody,
    GenerateVideoBody,
    MultiPlatformBody,
    OptimizeScriptBody,
    PlatformImagesBody,
    ScriptBody,
    SeriesBody,
)

logger = logging.getLogger(__name__)

SERVICE_NAME = "Tiger Episode Pipeline"
VERSION = "1.0.0"


def _now() -> str:
    return datetime.utcnow().isoformat()


def _script_required() -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": "Script is required"})


def _error_response(label: str, error: Exception) -> JSONResponse:
    """Map a failed single-stage operation to an HTTP error body."""
    if isinstance(error, ConfigurationError):
        status_code = 400
    else:
        status_code = 500

    body: dict[str, Any] = {
        "error": label,
        "message": str(error),
        "timestamp": _now(),
    }
    if isinstance(error, TigerError):
        body["reasonCode"] = error.reason_code
        if error.details:
            body["details"] = error.details
    else:
        body["reasonCode"] = "INTERNAL_ERROR"

    logger.error(f"{label}: {error}")
    return JSONResponse(status_code=status_code, content=body)


def _ok(data: Any) -> dict[str, Any]:
    if hasattr(data, "to_json_dict"):
        data = data.to_json_dict()
    return {"success": True, "data": data}


def create_app(pipeline: Optional[EpisodePipeline] = None) -> FastAPI:
    """
    Build the API around a pipeline.

    When no pipeline is given, the production pipeline is built from the
    environment at startup and closed at shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = app.state.pipeline is None
        if owned:
            config = get_config()
            for issue in config.validate():
                logger.warning(f"Config: {issue}")
            app.state.pipeline = EpisodePipeline.from_config(config)

        logger.info(f"Starting {SERVICE_NAME} server...")
        yield

        logger.info(f"Shutting down {SERVICE_NAME} server...")
        if owned:
            await app.state.pipeline.close()

    app = FastAPI(
        title="Tiger API",
        description="True crime episode generation: analysis, images, compliance, video",
        version=VERSION,
        lifespan=lifespan,
    )
    app.state.pipeline = pipeline

    def get_pipeline() -> EpisodePipeline:
        return app.state.pipeline

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={
                "error": "Invalid request",
                "message": "; ".join(
                    f"{'.'.join(str(p) for p in err['loc'][1:]) or 'body'}: {err['msg']}"
                    for err in exc.errors()
                ),
                "timestamp": _now(),
            },
        )

    @app.get("/")
    async def root():
        """Root endpoint with API info."""
        return {
            "service": SERVICE_NAME,
            "version": VERSION,
            "endpoints": {
                "POST /api/tiger/generate-episode": "Complete pipeline: script to video",
                "POST /api/tiger/generate-images": "Image set only",
                "POST /api/tiger/analyze-script": "Dual AI analysis and synthesis",
                "POST /api/tiger/generate-video": "Video from an existing image set",
                "POST /api/tiger/generate-multiplatform": "Image set once, primary platform render",
                "POST /api/tiger/check-compliance": "Compliance verdict",
                "POST /api/tiger/plan-series": "Content series plan",
                "POST /api/tiger/optimize-script": "Platform script rewrite with timing",
                "POST /api/tiger/optimize-image-prompts": "Image prompts for the cast and location",
                "POST /api/tiger/optimize-images": "Image set specifications for a platform",
                "GET /api/tiger/episode/{episode_id}": "Generated episode",
                "GET /api/tiger/status": "Provider status",
                "GET /health": "Health check",
            },
        }

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "episodes_in_memory": len(get_pipeline().registry),
            "timestamp": _now(),
        }

    @app.post("/api/tiger/generate-episode")
    async def generate_episode(body: GenerateEpisodeBody):
        if not body.has_script:
            return _script_required()

        try:
            get_platform_spec(body.platform)
        except ConfigurationError as e:
            return _error_response("Episode generation failed", e)

        request = EpisodeRequest(script=body.script, platform=body.platform, user_id=body.user_id)
        outcome = await get_pipeline().generate_episode(request)
        return JSONResponse(status_code=outcome.http_status, content=outcome.to_response())

    @app.post("/api/tiger/generate-images")
    async def generate_images(body: ScriptBody):
        if not body.has_script:
            return _script_required()
        try:
            image_set = await get_pipeline().generate_images(body.script, user_id=body.user_id)
        except Exception as e:
            return _error_response("Image generation failed", e)
        return _ok(image_set)

    @app.post("/api/tiger/analyze-script")
    async def analyze_script(body: ScriptBody):
        if not body.has_script:
            return _script_required()
        try:
            report = await get_pipeline().analyze_script(body.script)
        except Exception as e:
            return _error_response("Script analysis failed", e)
        return _ok(report)

    @app.post("/api/tiger/generate-video")
    async def generate_video(body: GenerateVideoBody):
        if not body.has_script:
            return _script_required()
        try:
            video = await get_pipeline().generate_video(
                body.script, body.image_set, body.platform, user_id=body.user_id
            )
        except Exception as e:
            return _error_response("Video generation failed", e)
        return _ok(video)

    @app.post("/api/tiger/generate-multiplatform")
    async def generate_multiplatform(body: MultiPlatformBody):
        if not body.has_script:
            return _script_required()
        try:
            result = await get_pipeline().generate_multiplatform(
                body.script, body.platforms, user_id=body.user_id
            )
        except Exception as e:
            return _error_response("Multi-platform generation failed", e)

        if result.rejection is not None:
            return JSONResponse(status_code=400, content=result.rejection.to_json_dict())
        return _ok(result)

    @app.post("/api/tiger/check-compliance")
    async def check_compliance(body: ComplianceBody):
        if not body.has_script:
            return _script_required()
        try:
            verdict = await get_pipeline().check_compliance(body.script, body.image_descriptions)
        except Exception as e:
            return _error_response("Compliance check failed", e)
        return _ok(verdict)

    @app.post("/api/tiger/plan-series")
    async def plan_series(body: SeriesBody):
        if not body.has_script:
            return _script_required()
        try:
            plan = await get_pipeline().plan_series(body.script, body.series_goals)
        except Exception as e:
            return _error_response("Series planning failed", e)
        return _ok(plan)

    @app.post("/api/tiger/optimize-script")
    async def optimize_script(body: OptimizeScriptBody):
        if not body.has_script:
            return _script_required()
        try:
            result = await get_pipeline().optimize_script(body.script, body.platform, body.target_length)
        except Exception as e:
            return _error_response("Video script optimization failed", e)
        return _ok(result)

    @app.post("/api/tiger/optimize-image-prompts")
    async def optimize_image_prompts(body: ScriptBody):
        if not body.has_script:
            return _script_required()
        try:
            result = await get_pipeline().optimize_image_prompts(body.script)
        except Exception as e:
            return _error_response("Image prompt optimization failed", e)
        return _ok(result)

    @app.post("/api/tiger/optimize-images")
    async def optimize_images(body: PlatformImagesBody):
        try:
            result = get_pipeline().optimize_images_for_platform(body.image_set, body.platform)
        except Exception as e:
            return _error_response("Platform optimization failed", e)
        return _ok(result)

    @app.get("/api/tiger/episode/{episode_id}")
    async def get_episode(episode_id: str):
        result = get_pipeline().get_episode(episode_id)
        if result is None:
            raise HTTPException(status_code=404, detail="Episode not found")
        return _ok(result)

    @app.get("/api/tiger/status")
    async def status():
        try:
            data = await get_pipeline().status()
        except Exception as e:
            return _error_response("Status check failed", e)
        return _ok({"timestamp": _now(), **data})

    return app


app = create_app()
