"""
Provider contracts and the shared HTTP plumbing.

Each provider is a thin API-key-bearer HTTP client. The pipeline depends only
on the three protocols below, so tests can substitute stubs.
"""

import asyncio
import logging
from typing import Any, Optional, Protocol

import httpx

from core.circuit_breaker import CircuitBreaker, CircuitBreakerOpen, build_provider_breaker
from core.errors import ProviderError

logger = logging.getLogger(__name__)


class TextProvider(Protocol):
    """Chat/completion style text generation."""

    async def complete(
        self,
        prompt: str,
        model: Optional[str] = None,
        max_tokens: int = 1000,
        temperature: float = 0.3,
        system: Optional[str] = None,
    ) -> str:
        ...


class ImageProvider(Protocol):
    """Text-to-image generation returning a hosted image URL."""

    async def generate_image(
        self,
        prompt: str,
        size: str = "1024x1024",
        quality: str = "hd",
        style: str = "natural",
    ) -> str:
        ...


class VideoProvider(Protocol):
    """Asynchronous video rendering: submit a task, then poll it by id."""

    provider_name: str

    async def submit_task(self, payload: dict[str, Any]) -> str:
        ...

    async def submit_text_task(self, payload: dict[str, Any]) -> str:
        ...

    async def get_task(self, task_id: str) -> dict[str, Any]:
        ...


def _is_transient_status(status_code: int) -> bool:
    return status_code == 429 or status_code >= 500


class HTTPProvider:
    """
    Base class for provider clients.

    Every request goes through the provider's circuit breaker, which bounds
    the call with ``timeout`` seconds.
    """

    provider_name: str = "provider"

    def __init__(
        self,
        api_key: str,
        base_url: str,
        timeout: float,
        breaker: Optional[CircuitBreaker] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.breaker = breaker or build_provider_breaker(self.provider_name, timeout)
        self._http_client = http_client

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self.timeout)
        return self._http_client

    async def close(self):
        """Close the HTTP client."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None

    async def _request(
        self,
        method: str,
        path: str,
        json: Optional[dict[str, Any]] = None,
        params: Optional[dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> dict[str, Any]:
        """
        Issue a request through the circuit breaker and return the JSON body.

        ``timeout`` replaces the breaker's call timeout for this request.
        """
        if not self.configured:
            raise ProviderError(
                f"{self.provider_name} API key not configured",
                reason_code="NOT_CONFIGURED",
                provider=self.provider_name,
            )

        try:
            return await self.breaker.call(self._send, method, path, json, params, timeout, timeout=timeout)
        except CircuitBreakerOpen as e:
            raise ProviderError(
                str(e),
                reason_code="CIRCUIT_OPEN",
                provider=self.provider_name,
                transient=True,
            ) from e
        except asyncio.TimeoutError as e:
            raise ProviderError(
                f"{self.provider_name} call exceeded {timeout or self.breaker.policy.call_timeout:.0f}s",
                reason_code="TIMEOUT",
                provider=self.provider_name,
                transient=True,
            ) from e

    async def _send(
        self,
        method: str,
        path: str,
        json: Optional[dict[str, Any]],
        params: Optional[dict[str, Any]],
        timeout: Optional[float] = None,
    ) -> dict[str, Any]:
        client = await self._get_client()
        url = f"{self.base_url}/{path.lstrip('/')}"
        extra = {"timeout": timeout} if timeout is not None else {}

        try:
            response = await client.request(
                method, url, json=json, params=params, headers=self._headers(), **extra
            )
        except httpx.TimeoutException as e:
            raise ProviderError(
                f"{self.provider_name} timeout: {type(e).__name__}",
                reason_code="TIMEOUT",
                provider=self.provider_name,
                transient=True,
            ) from e
        except httpx.RequestError as e:
            raise ProviderError(
                f"{self.provider_name} request failed: {type(e).__name__}: {e}",
                reason_code="REQUEST_ERROR",
                provider=self.provider_name,
                transient=True,
            ) from e

        if response.status_code >= 400:
            raise ProviderError(
                f"{self.provider_name} API error {response.status_code}: {self._error_message(response)}",
                reason_code=f"HTTP_{response.status_code}",
                provider=self.provider_name,
                status_code=response.status_code,
                transient=_is_transient_status(response.status_code),
            )

        try:
            return response.json()
        except ValueError as e:
            raise ProviderError(
                f"{self.provider_name} returned a non-JSON body",
                reason_code="INVALID_BODY",
                provider=self.provider_name,
            ) from e

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text[:200]
        error = body.get("error") if isinstance(body, dict) else None
        if isinstance(error, dict):
            return error.get("message") or str(error)
        if isinstance(error, str):
            return error
        if isinstance(body, dict) and body.get("message"):
            return body["message"]
        return str(body)[:200]
