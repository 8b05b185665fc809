"""Internal domain entities shared by the cache, provider and orchestrator."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union


Temperature = Union[int, float, str]


class ResponseSource(str, Enum):
    """Where the data in a response came from."""
    CACHE = "cache"
    API = "api"
    STALE_CACHE = "stale-cache"


@dataclass(frozen=True)
class WeatherRecord:
    """One hour of weather. A day is 24 of these in ascending hour order."""
    hour: int
    temperature: Temperature
    condition: str

    def to_dict(self) -> Dict[str, Any]:
        return {"hour": self.hour, "temperature": self.temperature, "condition": self.condition}

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> WeatherRecord:
        return cls(hour=raw["hour"], temperature=raw["temperature"], condition=raw["condition"])


@dataclass(frozen=True)
class CacheEntry:
    """Cached provider result.

    ``timestamp`` is the instant the entry was written (timezone-aware UTC).
    It is set once per write and never backdated by the service. ``provider``
    names the source that produced ``data``.
    """
    data: Tuple[WeatherRecord, ...]
    timestamp: datetime
    provider: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "data": [record.to_dict() for record in self.data],
            "timestamp": self.timestamp.isoformat(),
            "provider": self.provider,
        }

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> CacheEntry:
        return cls(
            data=tuple(WeatherRecord.from_dict(item) for item in raw["data"]),
            timestamp=datetime.fromisoformat(raw["timestamp"]),
            provider=raw.get("provider"),
        )
