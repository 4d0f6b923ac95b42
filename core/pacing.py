"""
Request pacing for rate-limited providers.

A RequestPacer hands out one slot at a time and guarantees a minimum gap
between the end of one call and the start of the next.

Usage:
    pacer = RequestPacer(min_interval=1.0)

    async with pacer.slot():
        await provider.generate_image(prompt)

    # Or run a batch sequentially, collecting per-item failures
    outcomes = await pacer.run_sequential(segments, generate_portrait)
"""

import asyncio
import logging
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, Iterable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


@dataclass
class PacedOutcome(Generic[T, R]):
    """Result of one item in a paced batch."""
    item: T
    result: Optional[R] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class RequestPacer:
    """Serializes calls and spaces them at least ``min_interval`` seconds apart."""

    def __init__(
        self,
        min_interval: float,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        if min_interval < 0:
            raise ValueError("min_interval must be >= 0")
        self.min_interval = min_interval
        self._sleep = sleep
        self._clock = clock
        self._lock = asyncio.Lock()
        self._last_finished: Optional[float] = None
        self.calls = 0

    @asynccontextmanager
    async def slot(self):
        """Acquire the next slot, waiting out the remaining interval."""
        async with self._lock:
            if self._last_finished is not None:
                remaining = self.min_interval - (self._clock() - self._last_finished)
                if remaining > 0:
                    await self._sleep(remaining)
            self.calls += 1
            try:
                yield
            finally:
                self._last_finished = self._clock()

    async def run_sequential(
        self,
        items: Iterable[T],
        func: Callable[[T], Awaitable[R]],
        recoverable: tuple[type[BaseException], ...] = (Exception,),
    ) -> list[PacedOutcome[T, R]]:
        """
        Run ``func`` over ``items`` one at a time.

        Errors matching ``recoverable`` are recorded on the outcome and the
        batch continues; anything else propagates.
        """
        outcomes: list[PacedOutcome[T, R]] = []
        for item in items:
            async with self.slot():
                try:
                    result = await func(item)
                except recoverable as e:
                    outcomes.append(PacedOutcome(item=item, error=e))
                    continue
            outcomes.append(PacedOutcome(item=item, result=result))
        return outcomes
