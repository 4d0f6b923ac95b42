"""
Process-local registry of generated episodes.
"""

import logging
from collections import OrderedDict
from typing import Optional

from .state import EpisodeResult

logger = logging.getLogger(__name__)


class EpisodeRegistry:
    """Keeps the most recent ``max_entries`` episode results in memory."""

    def __init__(self, max_entries: int = 100):
        self.max_entries = max_entries
        self._episodes: "OrderedDict[str, EpisodeResult]" = OrderedDict()

    def add(self, result: EpisodeResult):
        self._episodes[result.episode_id] = result
        self._episodes.move_to_end(result.episode_id)
        while len(self._episodes) > self.max_entries:
            evicted, _ = self._episodes.popitem(last=False)
            logger.debug(f"Evicted episode {evicted} from registry")

    def get(self, episode_id: str) -> Optional[EpisodeResult]:
        return self._episodes.get(episode_id)

    def __len__(self) -> int:
        return len(self._episodes)

    def __contains__(self, episode_id: str) -> bool:
        return episode_id in self._episodes
