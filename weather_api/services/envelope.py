"""Response envelope builder.

Maps cached or freshly fetched records into the wire shape. Records are
copied into new schema objects; the cache entry they came from is never
modified.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Callable, Iterable, Optional

from weather_api.domain.entities import ResponseSource, WeatherRecord
from weather_api.domain.errors import DomainError
from weather_api.schemas.api_schemas import (
    ErrorDetail,
    ErrorEnvelope,
    ResponseMeta,
    SuccessEnvelope,
    WeatherData,
    WeatherHour,
)
from weather_api.services.cache.freshness import utc_now

DEFAULT_UNITS = "metric"


class ResponseEnvelopeBuilder:
    """Build success and error envelopes."""

    def __init__(self, clock: Callable[[], datetime] = utc_now, units: str = DEFAULT_UNITS) -> None:
        self._clock = clock
        self._units = units

    def success(
        self,
        city: str,
        records: Iterable[WeatherRecord],
        source: ResponseSource,
        fetched_at: datetime,
        warning: Optional[str] = None,
        provider: Optional[str] = None,
    ) -> SuccessEnvelope:
        return SuccessEnvelope(
            data=WeatherData(
                city=city,
                date=fetched_at.date().isoformat(),
                weather=[
                    WeatherHour(hour=r.hour, temperature=r.temperature, condition=r.condition)
                    for r in records
                ],
            ),
            meta=ResponseMeta(
                source=source.value,
                stale=source is ResponseSource.STALE_CACHE,
                fetched_at=fetched_at,
                served_at=self._clock(),
                provider=provider,
                units=self._units,
                warning=warning,
            ),
        )

    def error(self, code: str, message: str, details: Any = None) -> ErrorEnvelope:
        return ErrorEnvelope(error=ErrorDetail(code=code, message=message, details=details))

    def from_error(self, exc: DomainError) -> ErrorEnvelope:
        return self.error(exc.code, exc.message, exc.details)
