from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable

from weather_api.domain.entities import CacheEntry

DEFAULT_VALIDITY_WINDOW = timedelta(hours=1)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def is_fresh(entry: CacheEntry, now: datetime, validity_window: timedelta) -> bool:
    """An entry is fresh iff ``now - entry.timestamp < validity_window``."""
    return now - entry.timestamp < validity_window


class FreshnessPolicy:
    """Decide whether a cached entry is still usable as current data."""

    def __init__(
        self,
        validity_window: timedelta = DEFAULT_VALIDITY_WINDOW,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.validity_window = validity_window
        self._clock = clock

    def now(self) -> datetime:
        return self._clock()

    def is_fresh(self, entry: CacheEntry, now: datetime | None = None) -> bool:
        return is_fresh(entry, now or self._clock(), self.validity_window)
