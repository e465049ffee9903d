"""
Audit result cache.

Cache-aside store keyed by "audit:" + the exact target URL. No URL
normalization: "http://x.com" and "http://x.com/" are different keys.
Expiry is left to the backend. Cache failures never fail a request:
reads degrade to a miss, writes are dropped.
"""

import json
import logging
import time
from typing import Callable, Optional

import redis.asyncio as redis

from webaudit.config import settings
from webaudit.services.audit_engine import AuditResult

logger = logging.getLogger(__name__)


class AuditCache:
    """Base interface for audit caches."""

    def __init__(self, ttl_seconds: int = None, key_prefix: str = None):
        self.ttl_seconds = ttl_seconds or settings.CACHE_TTL_SECONDS
        self.key_prefix = key_prefix if key_prefix is not None else settings.CACHE_KEY_PREFIX

    def cache_key(self, url: str) -> str:
        return f"{self.key_prefix}{url}"

    async def get(self, url: str) -> Optional[AuditResult]:
        try:
            raw = await self._get(self.cache_key(url))
        except Exception as e:
            logger.warning(f"Cache read failed for {url}: {e}")
            return None

        if raw is None:
            return None

        try:
            return AuditResult.from_dict(json.loads(raw))
        except (ValueError, KeyError, TypeError) as e:
            logger.warning(f"Discarding unreadable cache entry for {url}: {e}")
            return None

    async def put(self, url: str, result: AuditResult, ttl_seconds: int = None) -> bool:
        """Store `result`. Returns False if the write failed."""
        ttl = ttl_seconds or self.ttl_seconds
        try:
            await self._set(self.cache_key(url), json.dumps(result.to_dict()), ttl)
        except Exception as e:
            logger.warning(f"Cache write failed for {url}: {e}")
            return False
        return True

    async def close(self):
        """Release backend resources."""

    async def _get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    async def _set(self, key: str, value: str, ttl_seconds: int):
        raise NotImplementedError


class RedisAuditCache(AuditCache):
    """Shared cache backed by Redis key expiry."""

    def __init__(self, redis_url: str = None, ttl_seconds: int = None, key_prefix: str = None):
        super().__init__(ttl_seconds, key_prefix)
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
        if self._redis:
            await self._redis.close()
            self._redis = None

    async def _get(self, key: str) -> Optional[str]:
        r = await self.get_redis()
        return await r.get(key)

    async def _set(self, key: str, value: str, ttl_seconds: int):
        r = await self.get_redis()
        await r.set(key, value, ex=ttl_seconds)


class MemoryAuditCache(AuditCache):
    """Per-process cache. Entries expire lazily on read."""

    def __init__(
        self,
        ttl_seconds: int = None,
        key_prefix: str = None,
        clock: Callable[[], float] = time.time,
    ):
        super().__init__(ttl_seconds, key_prefix)
        self._clock = clock
        self._entries: dict[str, tuple[str, float]] = {}

    async def _get(self, key: str) -> Optional[str]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    async def _set(self, key: str, value: str, ttl_seconds: int):
        self._entries[key] = (value, self._clock() + ttl_seconds)


def create_audit_cache(backend: str = None) -> AuditCache:
    """Build the cache selected by configuration."""
    backend = backend or settings.CACHE_BACKEND
    if backend == "memory":
        return MemoryAuditCache()
    if backend != "redis":
        logger.warning(f"Unknown cache backend '{backend}', using redis")
    return RedisAuditCache()
