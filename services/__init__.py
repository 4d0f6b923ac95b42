"""
Tiger Services

Services for the true crime episode pipeline:
- providers: Anthropic, OpenAI and Runway HTTP clients
- analysis: script analysis, synthesis, compliance, series planning
- image_set: background, thumbnail and portrait generation
- video_generation: image-to-video rendering with bounded polling
- pipeline: episode orchestration
- api: FastAPI server
"""

from .pipeline import EpisodeOutcome, EpisodePipeline, EpisodeRequest, EpisodeResult

__all__ = [
    "EpisodeOutcome",
    "EpisodePipeline",
    "EpisodeRequest",
    "EpisodeResult",
]
