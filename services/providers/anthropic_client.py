"""
Anthropic Messages API client.

Used for the advanced script analysis, synthesis, compliance and series
planning passes.
"""

import logging
from typing import Any, Optional

import httpx

from core.circuit_breaker import CircuitBreaker
from core.config import Config, get_config
from core.errors import ProviderError
from .base import HTTPProvider

logger = logging.getLogger(__name__)


class AnthropicClient(HTTPProvider):
    """TextProvider backed by Anthropic's /messages endpoint."""

    provider_name = "anthropic"

    def __init__(
        self,
        config: Optional[Config] = None,
        breaker: Optional[CircuitBreaker] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.config = config or get_config()
        super().__init__(
            api_key=self.config.api.anthropic_api_key,
            base_url=self.config.api.anthropic_api_base,
            timeout=self.config.timeouts.text_seconds,
            breaker=breaker,
            http_client=http_client,
        )
        self.default_model = self.config.models.primary_model

    def _headers(self) -> dict[str, str]:
        return {
            "x-api-key": self.api_key,
            "anthropic-version": self.config.api.anthropic_version,
            "content-type": "application/json",
        }

    async def complete(
        self,
        prompt: str,
        model: Optional[str] = None,
        max_tokens: int = 1000,
        temperature: float = 0.3,
        system: Optional[str] = None,
    ) -> str:
        payload: dict[str, Any] = {
            "model": model or self.default_model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": [{"role": "user", "content": prompt}],
        }
        if system:
            payload["system"] = system

        data = await self._request("POST", "/messages", json=payload)

        blocks = data.get("content") or []
        text = "".join(block.get("text", "") for block in blocks if block.get("type") == "text")
        if not text:
            raise ProviderError(
                "Anthropic response contained no text content",
                reason_code="EMPTY_RESPONSE",
                provider=self.provider_name,
            )
        return text
