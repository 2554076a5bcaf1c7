"""In-process leaderboard cache with a fixed time-to-live."""

from __future__ import annotations

import logging
import time
from typing import Callable, Hashable

from cachetools import TTLCache

from squadboard.leaderboard.models import Leaderboard
from squadboard.leaderboard.pnl import Timeframe

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 30.0
DEFAULT_MAX_ENTRIES = 1024


class LeaderboardCache:
    """
    Leaderboards keyed by (squad, timeframe).

    Entries expire TTL seconds after they were written. Writes overwrite and
    restart the clock. There is no invalidation; staleness is bounded by the TTL.
    Each process keeps its own cache.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        timer: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self._cache: TTLCache = TTLCache(maxsize=max_entries, ttl=ttl_seconds, timer=timer)

    @staticmethod
    def key(squad_id: int, timeframe: Timeframe) -> Hashable:
        return (squad_id, Timeframe(timeframe).value)

    def get(self, squad_id: int, timeframe: Timeframe) -> Leaderboard | None:
        return self._cache.get(self.key(squad_id, timeframe))

    def set(self, squad_id: int, timeframe: Timeframe, leaderboard: Leaderboard) -> None:
        key = self.key(squad_id, timeframe)
        self._cache[key] = leaderboard
        logger.debug(f"Cached leaderboard {key} for {self.ttl_seconds}s")

    def __len__(self) -> int:
        return len(self._cache)
