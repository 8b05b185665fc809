"""
Redis-backed cache store.

Weather entries are stored as JSON under ``SET key value EX ttl``.
The quota counter uses a server-side script so INCR and the first-use EXPIRE
run as one atomic step, shared by every process pointed at the same Redis.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Optional

from weather_api.domain.entities import CacheEntry

logger = logging.getLogger(__name__)

# Arm the TTL only when the counter goes 0 -> 1
_INCREMENT_WITH_EXPIRY = """
local count = redis.call('INCR', KEYS[1])
if count == 1 then
    redis.call('EXPIRE', KEYS[1], ARGV[1])
end
return count
"""


class RedisCacheStore:
    """CacheStore over an async Redis client (``redis.asyncio`` compatible)."""

    backend = "redis"

    def __init__(self, redis: Any) -> None:
        self._redis = redis
        self._increment = redis.register_script(_INCREMENT_WITH_EXPIRY)

    async def get(self, key: str) -> Optional[CacheEntry]:
        raw = await self._redis.get(key)
        if raw is None:
            logger.debug("Cache miss: %s", key)
            return None
        try:
            return CacheEntry.from_dict(json.loads(raw))
        except (ValueError, KeyError, TypeError):
            logger.warning("Discarding unreadable cache entry: %s", key, exc_info=True)
            return None

    async def set(self, key: str, entry: CacheEntry, ttl_seconds: int) -> None:
        await self._redis.set(key, json.dumps(entry.to_dict()), ex=ttl_seconds)
        logger.debug("Cached: key=%s ttl=%ds", key, ttl_seconds)

    async def increment_with_expiry(self, key: str, ttl_seconds: int) -> int:
        count = await self._increment(keys=[key], args=[ttl_seconds])
        return int(count)

    async def ping(self) -> bool:
        try:
            return bool(await self._redis.ping())
        except Exception:
            logger.warning("Redis ping failed", exc_info=True)
            return False

    async def close(self) -> None:
        await self._redis.aclose()
