from __future__ import annotations

from datetime import date
from typing import Optional

KEY_SEPARATOR = ":"


def cache_key(city: str, prefix: str = "weather", on_date: Optional[date] = None) -> str:
    """Build the cache key for a city, optionally scoped to a calendar date.

    'London'                   -> 'weather:london'
    'London', date(2024, 6, 1) -> 'weather:london:2024-06-01'

    The city is case-folded so 'PARIS' and 'paris' share one entry.
    """
    parts = [prefix, city.strip().casefold()]
    if on_date is not None:
        parts.append(on_date.isoformat())
    return KEY_SEPARATOR.join(parts)
