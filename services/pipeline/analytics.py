"""
Analytics events emitted by the pipeline.

The sink is an external collaborator; emission must never fail a run.
"""

import asyncio
import logging
from collections import deque
from typing import Any, Protocol

logger = logging.getLogger(__name__)

RECENT_EVENTS_LIMIT = 100


class AnalyticsSink(Protocol):
    async def track(self, event: str, properties: dict[str, Any]) -> None:
        ...


class LoggingAnalyticsSink:
    """Default sink: writes events to the log and keeps the most recent ones."""

    def __init__(self, max_events: int = RECENT_EVENTS_LIMIT):
        self.events: deque[tuple[str, dict[str, Any]]] = deque(maxlen=max_events)

    async def track(self, event: str, properties: dict[str, Any]) -> None:
        self.events.append((event, properties))
        logger.info(f"Analytics: {event} {properties}")


async def emit_event(sink: AnalyticsSink, event: str, properties: dict[str, Any]) -> bool:
    """Send an event, logging (not raising) on failure. Returns True if delivered."""
    try:
        result = sink.track(event, properties)
        if asyncio.iscoroutine(result):
            await result
        return True
    except Exception as e:
        logger.warning(f"Analytics logging failed for {event}: {e}")
        return False
