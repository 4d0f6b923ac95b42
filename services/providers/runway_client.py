"""
Runway API client.

Submits image-to-video and text-to-video tasks and reads task status. Polling
policy lives in services.video_generation.poller; this client only maps HTTP
to dicts.
"""

import logging
from datetime import datetime
from typing import Any, Optional

import httpx

from core.circuit_breaker import CircuitBreaker
from core.config import Config, get_config
from core.errors import ProviderError
from .base import HTTPProvider

logger = logging.getLogger(__name__)


class RunwayClient(HTTPProvider):
    """VideoProvider backed by Runway's generation and /tasks endpoints."""

    provider_name = "runway"

    def __init__(
        self,
        config: Optional[Config] = None,
        breaker: Optional[CircuitBreaker] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.config = config or get_config()
        # Status reads use the poll timeout; submissions pass their own
        super().__init__(
            api_key=self.config.api.runway_api_key,
            base_url=self.config.api.runway_api_base,
            timeout=self.config.timeouts.video_poll_seconds,
            breaker=breaker,
            http_client=http_client,
        )

    def _headers(self) -> dict[str, str]:
        headers = super()._headers()
        headers["X-Runway-Version"] = self.config.api.runway_version
        return headers

    async def _create_task(self, path: str, payload: dict[str, Any]) -> str:
        logger.info(
            f"Runway submit {path}: model={payload.get('model')}, ratio={payload.get('ratio')}, "
            f"prompt={str(payload.get('promptText', ''))[:50]}..."
        )
        data = await self._request(
            "POST", path, json=payload, timeout=self.config.timeouts.video_submit_seconds
        )

        task_id = data.get("id")
        if not task_id:
            raise ProviderError(
                "No task id in Runway response",
                reason_code="NO_TASK_ID",
                provider=self.provider_name,
            )
        return task_id

    async def submit_task(self, payload: dict[str, Any]) -> str:
        """Create an image-to-video task and return its id."""
        return await self._create_task("/image_to_video", payload)

    async def submit_text_task(self, payload: dict[str, Any]) -> str:
        """Create a text-to-video task (no source image) and return its id."""
        return await self._create_task("/text_to_video", payload)

    async def get_task(self, task_id: str) -> dict[str, Any]:
        """Fetch the raw task record (status, output, failure)."""
        return await self._request(
            "GET", f"/tasks/{task_id}", timeout=self.config.timeouts.video_poll_seconds
        )

    async def health(self) -> dict[str, Any]:
        """Connectivity check used by the status endpoint."""
        status = {
            "apiEndpoint": self.base_url,
            "lastCheck": datetime.utcnow().isoformat(),
            "circuit": self.breaker.get_status()["state"],
        }
        if not self.configured:
            status["error"] = "RUNWAYML_API_SECRET not configured"
            status["suggestion"] = "Check API key and endpoint URL"
            return status

        try:
            await self._request("GET", "/organization")
        except ProviderError as e:
            status["error"] = f"API connection failed: {e}"
            status["suggestion"] = "Check API key and endpoint URL"
            return status

        status["connectivity"] = "Working"
        return status
