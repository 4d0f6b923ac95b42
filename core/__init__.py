"""
Tiger Core Components

Provides foundational infrastructure for the episode pipeline:
- Configuration loaded from the environment
- Circuit breaker for provider resilience and call timeouts
- Error taxonomy with machine-checkable reason codes
- Structured extraction of JSON from LLM output
- Request pacing for rate-limited providers
"""

from .circuit_breaker import BreakerPolicy, CircuitBreaker, CircuitBreakerOpen, CircuitState, build_provider_breaker
from .config import Config, get_config
from .pacing import RequestPacer

__all__ = [
    "BreakerPolicy",
    "CircuitBreaker",
    "CircuitBreakerOpen",
    "CircuitState",
    "build_provider_breaker",
    "Config",
    "get_config",
    "RequestPacer",
]
