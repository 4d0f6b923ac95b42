"""
OpenAI client: chat completions for the basic script analysis and the
Images API (DALL-E 3) for backgrounds, thumbnails and portraits.
"""

import logging
from typing import Any, Optional

import httpx

from core.circuit_breaker import CircuitBreaker, build_provider_breaker
from core.config import Config, get_config
from core.errors import ProviderError
from .base import HTTPProvider

logger = logging.getLogger(__name__)


class OpenAITextClient(HTTPProvider):
    """TextProvider backed by /chat/completions."""

    provider_name = "openai"

    def __init__(
        self,
        config: Optional[Config] = None,
        breaker: Optional[CircuitBreaker] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.config = config or get_config()
        super().__init__(
            api_key=self.config.api.openai_api_key,
            base_url=self.config.api.openai_api_base,
            timeout=self.config.timeouts.text_seconds,
            breaker=breaker,
            http_client=http_client,
        )

    async def complete(
        self,
        prompt: str,
        model: Optional[str] = None,
        max_tokens: int = 1000,
        temperature: float = 0.3,
        system: Optional[str] = None,
    ) -> str:
        messages = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})

        data = await self._request(
            "POST",
            "/chat/completions",
            json={
                "model": model or self.config.models.analysis_model,
                "messages": messages,
                "temperature": temperature,
                "max_tokens": max_tokens,
            },
        )

        choices = data.get("choices") or []
        content = choices[0].get("message", {}).get("content") if choices else None
        if not content:
            raise ProviderError(
                "OpenAI response contained no message content",
                reason_code="EMPTY_RESPONSE",
                provider=self.provider_name,
            )
        return content


class OpenAIImageClient(HTTPProvider):
    """ImageProvider backed by /images/generations."""

    provider_name = "openai_images"

    def __init__(
        self,
        config: Optional[Config] = None,
        breaker: Optional[CircuitBreaker] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.config = config or get_config()
        super().__init__(
            api_key=self.config.api.openai_api_key,
            base_url=self.config.api.openai_api_base,
            timeout=self.config.timeouts.image_seconds,
            breaker=breaker or build_provider_breaker("openai_images", self.config.timeouts.image_seconds),
            http_client=http_client,
        )

    async def generate_image(
        self,
        prompt: str,
        size: str = "1024x1024",
        quality: str = "hd",
        style: str = "natural",
    ) -> str:
        payload: dict[str, Any] = {
            "model": self.config.models.image_model,
            "prompt": prompt,
            "n": 1,
            "size": size,
            "quality": quality,
            "style": style,
        }
        data = await self._request("POST", "/images/generations", json=payload)

        images = data.get("data") or []
        url = images[0].get("url") if images else None
        if not url:
            raise ProviderError(
                "Image response contained no URL",
                reason_code="NO_IMAGE_URL",
                provider=self.provider_name,
            )
        return url
