"""Ports (collaborator contracts) consumed by the lookup orchestration."""
from __future__ import annotations

from typing import Any, Optional, Protocol

from weather_api.domain.entities import CacheEntry


class CacheStore(Protocol):
    """Key-value store with TTL-aware get/set and an atomic counter."""

    async def get(self, key: str) -> Optional[CacheEntry]:
        """Return the entry under ``key`` or ``None``. Never raises on a miss."""
        ...

    async def set(self, key: str, entry: CacheEntry, ttl_seconds: int) -> None:
        """Overwrite ``key`` unconditionally with a fresh TTL."""
        ...

    async def increment_with_expiry(self, key: str, ttl_seconds: int) -> int:
        """Atomically increment the counter at ``key`` and return the new value.

        The TTL is armed only when the returned value is 1; later increments
        leave it untouched.
        """
        ...

    async def ping(self) -> bool:
        """Return whether the store is reachable."""
        ...


class WeatherProvider(Protocol):
    """Upstream source of hourly weather for a city."""

    name: str

    async def fetch(self, city: str) -> Any:
        """Return the raw hourly payload for ``city``.

        Raises ProviderError on transport or upstream failure. The payload is
        shape-checked by the caller before it is trusted or cached.
        """
        ...
