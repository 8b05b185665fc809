"""Explicit validation functions returning a ``Valid | Invalid`` result."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Mapping, Optional, Sequence, Tuple, TypeVar, Union

from weather_api.domain.entities import WeatherRecord

T = TypeVar("T")

HOURS_PER_DAY = 24


@dataclass(frozen=True)
class Valid(Generic[T]):
    value: T
    ok: bool = True


@dataclass(frozen=True)
class Invalid:
    message: str
    details: Optional[str] = None
    ok: bool = False


ValidationResult = Union[Valid[T], Invalid]


def validate_city_query(raw: Optional[str]) -> ValidationResult[str]:
    """Validate and normalize the ``city`` query parameter."""
    if raw is None or not raw.strip():
        return Invalid("City is required", details="city is required")
    return Valid(raw.strip())


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _check_record(position: int, item: Any) -> Optional[str]:
    if not isinstance(item, Mapping):
        return f"record {position} is not an object"
    hour = item.get("hour")
    if not _is_int(hour) or not 0 <= hour <= 23:
        return f"record {position} has invalid hour {hour!r}"
    if hour != position:
        return f"record {position} is out of order (hour {hour})"
    temperature = item.get("temperature")
    if isinstance(temperature, bool):
        return f"record {position} has invalid temperature"
    if isinstance(temperature, str):
        if not temperature.strip():
            return f"record {position} has empty temperature"
    elif not isinstance(temperature, (int, float)):
        return f"record {position} has invalid temperature"
    condition = item.get("condition")
    if not isinstance(condition, str) or not condition.strip():
        return f"record {position} has invalid condition"
    return None


def validate_weather_records(raw: Any) -> ValidationResult[Tuple[WeatherRecord, ...]]:
    """Check a provider payload is 24 well-formed hourly records.

    Records must be ordered by ascending hour starting at 0.
    """
    if isinstance(raw, (str, bytes)) or not isinstance(raw, Sequence):
        return Invalid("Malformed provider response", details="expected a list of hourly records")
    if len(raw) != HOURS_PER_DAY:
        return Invalid(
            "Malformed provider response",
            details=f"expected {HOURS_PER_DAY} hourly records, got {len(raw)}",
        )
    for position, item in enumerate(raw):
        problem = _check_record(position, item)
        if problem:
            return Invalid("Malformed provider response", details=problem)
    return Valid(tuple(
        WeatherRecord(hour=item["hour"], temperature=item["temperature"], condition=item["condition"])
        for item in raw
    ))
