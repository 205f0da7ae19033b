from __future__ import annotations

from redis.asyncio import Redis

from app.domain.entities import RateLimitDecision
from app.domain.ports.rate_limiter import RateLimiterPort


def create_redis(url: str) -> Redis:
    """decode_responses=True -> counters and TTLs come back as str, not bytes."""
    return Redis.from_url(url, encoding="utf-8", decode_responses=True)


class RedisRateLimiter(RateLimiterPort):
    """Fixed-window counter shared by every worker through Redis."""

    def __init__(
        self,
        redis: Redis,
        *,
        limit: int,
        window_seconds: int,
        key_prefix: str = "rl:",
    ) -> None:
        if limit < 1 or window_seconds < 1:
            raise ValueError("limit and window_seconds must be positive")
        self._redis = redis
        self._prefix = key_prefix
        self.limit = limit
        self.window_seconds = window_seconds

    def _key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    async def hit(self, key: str) -> RateLimitDecision:
        redis_key = self._key(key)
        pipe = self._redis.pipeline(transaction=True)
        pipe.incr(redis_key)
        # only the first hit of a window sets the expiry
        pipe.expire(redis_key, self.window_seconds, nx=True)
        pipe.ttl(redis_key)
        count, _, ttl = await pipe.execute()

        count = int(count)
        ttl = int(ttl)
        return RateLimitDecision(
            allowed=count <= self.limit,
            limit=self.limit,
            remaining=max(0, self.limit - count),
            reset_after=ttl if ttl > 0 else self.window_seconds,
        )

    async def reset(self) -> None:
        async for redis_key in self._redis.scan_iter(match=f"{self._prefix}*"):
            await self._redis.delete(redis_key)
