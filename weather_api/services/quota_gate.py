"""
Shared quota for calls to the external weather provider.

Window strategy: one counter key per gate. The first consumption creates the
counter and arms its TTL for ``window_seconds``; when the TTL lapses the
counter disappears and the next consumption opens a new window. Windows are
therefore anchored to the first call, not to wall-clock hours.

Consumption happens before the provider is called. A unit spent on a call
that later fails or is cancelled is not refunded, which keeps retry storms
from reaching the provider.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from weather_api.domain.ports import CacheStore

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 100
DEFAULT_WINDOW_SECONDS = 3600


@dataclass(frozen=True)
class QuotaDecision:
    admitted: bool
    window_key: str
    count: int
    limit: int

    def __bool__(self) -> bool:
        return self.admitted


class QuotaGate:
    """Admit or reject one external call against the current window."""

    def __init__(
        self,
        store: CacheStore,
        limit: int = DEFAULT_LIMIT,
        window_seconds: int = DEFAULT_WINDOW_SECONDS,
        key: str = "external-api-usage",
    ) -> None:
        self._store = store
        self.limit = limit
        self.window_seconds = window_seconds
        self._key = key

    def window_key(self) -> str:
        return f"quota:{self._key}"

    async def check_and_consume(self) -> QuotaDecision:
        window_key = self.window_key()
        count = await self._store.increment_with_expiry(window_key, self.window_seconds)
        admitted = count <= self.limit
        if not admitted:
            logger.warning("Quota exceeded for %s: %d/%d", window_key, count, self.limit)
        return QuotaDecision(admitted=admitted, window_key=window_key, count=count, limit=self.limit)
