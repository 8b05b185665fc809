from __future__ import annotations

import threading
import time
from typing import Any, Callable, Dict, Optional, Tuple

from weather_api.domain.entities import CacheEntry


class InMemoryCacheStore:
    """Process-local TTL store emulating the Redis operations the service needs.

    Expired keys are dropped lazily on read. All mutations run under one lock,
    and none of them suspend, so ``increment_with_expiry`` hands out distinct
    values to concurrent callers.
    """

    backend = "memory"

    def __init__(self, time_func: Callable[[], float] = time.monotonic) -> None:
        self._time_func = time_func
        self._lock = threading.Lock()
        # key -> (expires_at or None, value)
        self._storage: Dict[str, Tuple[Optional[float], Any]] = {}

    def _live(self, key: str) -> Optional[Tuple[Optional[float], Any]]:
        item = self._storage.get(key)
        if item is None:
            return None
        expires_at, _ = item
        if expires_at is not None and expires_at <= self._time_func():
            self._storage.pop(key, None)
            return None
        return item

    async def get(self, key: str) -> Optional[CacheEntry]:
        with self._lock:
            item = self._live(key)
        if item is None:
            return None
        value = item[1]
        return value if isinstance(value, CacheEntry) else None

    async def set(self, key: str, entry: CacheEntry, ttl_seconds: int) -> None:
        with self._lock:
            self._storage[key] = (self._time_func() + ttl_seconds, entry)

    async def increment_with_expiry(self, key: str, ttl_seconds: int) -> int:
        with self._lock:
            item = self._live(key)
            if item is None:
                expires_at, count = None, 0
            else:
                expires_at, count = item
            count += 1
            if count == 1:
                expires_at = self._time_func() + ttl_seconds
            self._storage[key] = (expires_at, count)
            return count

    async def ping(self) -> bool:
        return True

    def counter(self, key: str) -> int:
        """Current value of a counter key, 0 when absent or expired."""
        with self._lock:
            item = self._live(key)
        return item[1] if item and isinstance(item[1], int) else 0

    def ttl_remaining(self, key: str) -> Optional[float]:
        with self._lock:
            item = self._live(key)
        if item is None or item[0] is None:
            return None
        return item[0] - self._time_func()

    def clear(self) -> None:
        with self._lock:
            self._storage.clear()
