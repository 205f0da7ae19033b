from typing import Protocol

from app.domain.entities import RateLimitDecision


class RateLimiterPort(Protocol):
    async def hit(self, key: str) -> RateLimitDecision:
        """Count one request for `key` and say whether it is allowed."""

    async def reset(self) -> None:
        """Forget every counter."""
