"""
Rate Limiter Service

Fixed-window request limiting per client identity.
Implements:
- In-process limiter (one RateWindow per identity)
- Redis limiter sharing windows across workers

A fixed window admits up to twice the threshold across a window
boundary. That is accepted for abuse mitigation.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

import redis.asyncio as redis

from webaudit.config import settings

logger = logging.getLogger(__name__)


@dataclass
class RateLimitResult:
    """Result of a rate limit check."""
    allowed: bool
    limit: int
    remaining: int
    reset_at: int  # Unix timestamp
    retry_after: Optional[int] = None  # Seconds until retry


@dataclass
class RateWindow:
    """Per-identity counter state."""
    count: int
    window_start_ms: int


def _now_ms() -> int:
    return int(time.time() * 1000)


class RateLimiter:
    """Base interface for rate limiters."""

    def __init__(
        self,
        max_requests: int = None,
        window_ms: int = None,
    ):
        self.max_requests = max_requests or settings.RATE_LIMIT_MAX_REQUESTS
        self.window_ms = window_ms or settings.RATE_LIMIT_WINDOW_MS

    async def check(self, identity: str) -> RateLimitResult:
        raise NotImplementedError

    async def close(self):
        """Release backend resources."""

    def _result(self, count: int, reset_at_ms: int, now_ms: int) -> RateLimitResult:
        allowed = count <= self.max_requests
        retry_after = None
        if not allowed:
            retry_after = max(1, -(-(reset_at_ms - now_ms) // 1000))
        return RateLimitResult(
            allowed=allowed,
            limit=self.max_requests,
            remaining=max(0, self.max_requests - count),
            reset_at=reset_at_ms // 1000,
            retry_after=retry_after,
        )


class MemoryRateLimiter(RateLimiter):
    """
    In-process fixed-window limiter.

    Windows are created on first sight of an identity and reset once the
    window length has elapsed. Stale windows are never swept; they are
    overwritten on the identity's next request.

    hit() never awaits, so each check-and-increment runs to completion on
    the event loop and identities never wait on each other.
    """

    def __init__(
        self,
        max_requests: int = None,
        window_ms: int = None,
        clock: Callable[[], int] = _now_ms,
    ):
        super().__init__(max_requests, window_ms)
        self._clock = clock
        self._windows: dict[str, RateWindow] = {}

    def hit(self, identity: str) -> RateLimitResult:
        """Count one request for `identity` and report whether it is allowed."""
        now = self._clock()
        window = self._windows.get(identity)

        if window is None or now - window.window_start_ms > self.window_ms:
            window = RateWindow(count=1, window_start_ms=now)
            self._windows[identity] = window
        else:
            window.count += 1

        return self._result(window.count, window.window_start_ms + self.window_ms, now)

    async def check(self, identity: str) -> RateLimitResult:
        return self.hit(identity)

    def get_window(self, identity: str) -> Optional[RateWindow]:
        window = self._windows.get(identity)
        return RateWindow(window.count, window.window_start_ms) if window else None


class RedisRateLimiter(RateLimiter):
    """
    Redis-based fixed-window limiter.

    The window starts when the key is created and ends when it expires.
    SET NX and INCR run in one MULTI/EXEC so concurrent workers never lose
    an increment.
    """

    def __init__(
        self,
        redis_url: str = None,
        max_requests: int = None,
        window_ms: int = None,
    ):
        super().__init__(max_requests, window_ms)
        self.redis_url = redis_url or settings.REDIS_URL
        self._redis: Optional[redis.Redis] = None

    async def get_redis(self) -> redis.Redis:
        """Get or create Redis connection."""
        if self._redis is None:
            self._redis = redis.from_url(
                self.redis_url,
                encoding="utf-8",
                decode_responses=True,
            )
        return self._redis

    async def close(self):
        """Close Redis connection."""
        if self._redis:
            await self._redis.close()
            self._redis = None

    def _rate_limit_key(self, identity: str) -> str:
        """Generate Redis key for rate limiting."""
        return f"ratelimit:{identity}"

    async def check(self, identity: str) -> RateLimitResult:
        r = await self.get_redis()
        key = self._rate_limit_key(identity)
        now = _now_ms()

        pipe = r.pipeline(transaction=True)
        pipe.set(key, 0, px=self.window_ms, nx=True)
        pipe.incr(key)
        pipe.pttl(key)
        results = await pipe.execute()

        count = int(results[1])
        ttl_ms = int(results[2])
        if ttl_ms < 0:
            ttl_ms = self.window_ms

        return self._result(count, now + ttl_ms, now)


def create_rate_limiter(backend: str = None) -> RateLimiter:
    """Build the limiter selected by configuration."""
    backend = backend or settings.RATE_LIMIT_BACKEND
    if backend == "redis":
        return RedisRateLimiter()
    if backend != "memory":
        logger.warning(f"Unknown rate limit backend '{backend}', using memory")
    return MemoryRateLimiter()
