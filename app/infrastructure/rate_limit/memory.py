from __future__ import annotations

import asyncio
import math
import time
from dataclasses import dataclass
from typing import Callable

from app.domain.entities import RateLimitDecision
from app.domain.ports.rate_limiter import RateLimiterPort


@dataclass
class _Window:
    count: int
    expires_at: float


class InMemoryRateLimiter(RateLimiterPort):
    """
    Fixed-window counter per key, held in process memory.

    Counters are lost on restart and are not shared between workers;
    use RedisRateLimiter for that.
    """

    def __init__(
        self,
        *,
        limit: int,
        window_seconds: int,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if limit < 1 or window_seconds < 1:
            raise ValueError("limit and window_seconds must be positive")
        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: dict[str, _Window] = {}
        self._lock = asyncio.Lock()

    def _prune(self, now: float) -> None:
        expired = [k for k, w in self._windows.items() if w.expires_at <= now]
        for k in expired:
            del self._windows[k]

    async def hit(self, key: str) -> RateLimitDecision:
        async with self._lock:
            now = self._clock()
            window = self._windows.get(key)
            if window is None or window.expires_at <= now:
                self._prune(now)
                window = _Window(count=0, expires_at=now + self.window_seconds)
                self._windows[key] = window
            window.count += 1

            return RateLimitDecision(
                allowed=window.count <= self.limit,
                limit=self.limit,
                remaining=max(0, self.limit - window.count),
                reset_after=max(1, math.ceil(window.expires_at - now)),
            )

    async def reset(self) -> None:
        async with self._lock:
            self._windows.clear()
