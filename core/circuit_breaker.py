"""
Per-provider circuit breaker.

Each provider client (OpenAI text, OpenAI images, Anthropic, Runway) owns one
breaker. It does two jobs:

- bounds every call with the provider's configured timeout
- stops calling a provider that keeps failing, so a run fails fast with
  CIRCUIT_OPEN instead of waiting out a long series of timeouts

Only failures that say something about the provider's health trip the
breaker: timeouts, connection errors and transient HTTP statuses. A request
the provider rejected on its merits (content policy 400, bad payload) does not.

States:
- CLOSED: calls pass through
- OPEN: calls are refused until ``recovery_seconds`` have passed
- HALF_OPEN: a few trial calls decide between CLOSED and OPEN
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Optional, TypeVar

from .errors import ProviderError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CircuitState(Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


@dataclass
class BreakerPolicy:
    """Thresholds for one provider."""
    failure_threshold: int = 5  # consecutive health failures before opening
    recovery_seconds: float = 30.0
    trial_calls: int = 3  # calls allowed while half-open
    trial_successes: int = 2  # half-open successes needed to close
    call_timeout: float = 60.0


def trips_breaker(error: BaseException) -> bool:
    """Whether ``error`` counts against the provider's health."""
    if isinstance(error, ProviderError):
        return error.transient
    return True


class CircuitBreakerOpen(Exception):
    """Raised instead of calling a provider whose breaker is open."""

    def __init__(self, provider: str, retry_after: float):
        self.provider = provider
        self.retry_after = max(0.0, retry_after)
        super().__init__(
            f"{provider} is unavailable (circuit open); retry in {self.retry_after:.0f}s"
        )


class CircuitBreaker:
    """
    Usage:
        breaker = CircuitBreaker("runway", BreakerPolicy(call_timeout=30.0))
        task = await breaker.call(client.submit_task, payload)
    """

    def __init__(
        self,
        provider: str,
        policy: Optional[BreakerPolicy] = None,
        counts_as_failure: Callable[[BaseException], bool] = trips_breaker,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.provider = provider
        self.policy = policy or BreakerPolicy()
        self._counts_as_failure = counts_as_failure
        self._clock = clock
        self._lock = asyncio.Lock()

        self._state = CircuitState.CLOSED
        self._opened_at = 0.0
        self._consecutive_failures = 0
        self._trials_started = 0
        self._trial_successes = 0
        self._half_open_round = 0

        self.calls = 0
        self.failures = 0
        self.successes = 0
        self.rejected = 0
        self.last_error: Optional[str] = None

    @property
    def state(self) -> CircuitState:
        return self._state

    @property
    def is_closed(self) -> bool:
        return self._state == CircuitState.CLOSED

    @property
    def is_open(self) -> bool:
        return self._state == CircuitState.OPEN

    def _retry_after(self) -> float:
        return self.policy.recovery_seconds - (self._clock() - self._opened_at)

    def _set_state(self, state: CircuitState):
        if state == self._state:
            return
        logger.info(f"Circuit [{self.provider}]: {self._state.value} -> {state.value}")
        self._state = state
        if state == CircuitState.OPEN:
            self._opened_at = self._clock()
        elif state == CircuitState.HALF_OPEN:
            self._trials_started = 0
            self._trial_successes = 0
            self._half_open_round += 1
        else:
            self._consecutive_failures = 0

    async def _admit(self) -> Optional[int]:
        """Admit a call; returns the half-open round when the call is a trial."""
        async with self._lock:
            if self._state == CircuitState.OPEN:
                if self._retry_after() > 0:
                    self.rejected += 1
                    raise CircuitBreakerOpen(self.provider, self._retry_after())
                self._set_state(CircuitState.HALF_OPEN)

            trial_round = None
            if self._state == CircuitState.HALF_OPEN:
                if self._trials_started >= self.policy.trial_calls:
                    self.rejected += 1
                    raise CircuitBreakerOpen(self.provider, self.policy.recovery_seconds)
                self._trials_started += 1
                trial_round = self._half_open_round

            self.calls += 1
            return trial_round

    def _release_trial(self, trial_round: Optional[int]):
        # A trial call that ended without an answer frees its slot for the next caller
        if (
            trial_round is not None
            and self._state == CircuitState.HALF_OPEN
            and trial_round == self._half_open_round
            and self._trials_started > 0
        ):
            self._trials_started -= 1

    async def _record_provider_alive(self):
        """The provider answered: a success or a request it rejected on its merits."""
        async with self._lock:
            self._consecutive_failures = 0
            if self._state == CircuitState.HALF_OPEN:
                self._trial_successes += 1
                if self._trial_successes >= self.policy.trial_successes:
                    self._set_state(CircuitState.CLOSED)

    async def _record_success(self):
        self.successes += 1
        await self._record_provider_alive()

    async def _record_failure(self, error: BaseException):
        self.last_error = f"{type(error).__name__}: {error}"
        if not self._counts_as_failure(error):
            await self._record_provider_alive()
            return

        async with self._lock:
            self.failures += 1
            self._consecutive_failures += 1

            if self._state == CircuitState.HALF_OPEN:
                self._set_state(CircuitState.OPEN)
            elif self._consecutive_failures >= self.policy.failure_threshold:
                self._set_state(CircuitState.OPEN)

        logger.warning(
            f"Circuit [{self.provider}] failure {self._consecutive_failures}/"
            f"{self.policy.failure_threshold}: {self.last_error}"
        )

    async def call(
        self,
        func: Callable[..., Awaitable[T]],
        *args,
        timeout: Optional[float] = None,
        **kwargs,
    ) -> T:
        """
        Run ``func`` within the call timeout, if the circuit admits it.

        ``timeout`` overrides ``policy.call_timeout`` for this call only.

        Raises:
            CircuitBreakerOpen: The provider is currently considered down
            asyncio.TimeoutError: The call exceeded its timeout
        """
        trial_round = await self._admit()

        try:
            result = await asyncio.wait_for(
                func(*args, **kwargs),
                timeout=self.policy.call_timeout if timeout is None else timeout,
            )
        except asyncio.CancelledError:
            self._release_trial(trial_round)
            raise
        except Exception as e:
            await self._record_failure(e)
            raise

        await self._record_success()
        return result

    def force_open(self):
        self._set_state(CircuitState.OPEN)

    def reset(self):
        self._set_state(CircuitState.CLOSED)

    def get_status(self) -> dict:
        """Breaker state for the status endpoint."""
        status = {
            "provider": self.provider,
            "state": self._state.value,
            "consecutiveFailures": self._consecutive_failures,
            "calls": self.calls,
            "failures": self.failures,
            "successes": self.successes,
            "rejected": self.rejected,
            "lastError": self.last_error,
        }
        if self._state == CircuitState.OPEN:
            status["retryAfter"] = round(max(0.0, self._retry_after()), 1)
        return status


# Image and video endpoints are slower to recover and cost more per failed call
_PROVIDER_POLICIES = {
    "anthropic": {"failure_threshold": 5, "recovery_seconds": 30.0},
    "openai": {"failure_threshold": 5, "recovery_seconds": 30.0},
    "openai_images": {"failure_threshold": 3, "recovery_seconds": 60.0},
    "runway": {"failure_threshold": 3, "recovery_seconds": 60.0},
}


def build_provider_breaker(provider: str, timeout: float) -> CircuitBreaker:
    """Breaker for ``provider`` with its thresholds and a ``timeout``-second call ceiling."""
    policy = BreakerPolicy(call_timeout=timeout, **_PROVIDER_POLICIES.get(provider, {}))
    return CircuitBreaker(provider, policy)
