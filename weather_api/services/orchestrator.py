"""
Weather lookup orchestration.

One lookup walks these states and always ends by responding:

    CHECK_CACHE        fresh entry            -> respond (cache)
                       missing or stale       -> CHECK_QUOTA (stale entry kept as fallback)
    CHECK_QUOTA        admitted               -> FETCH
                       rejected               -> FALLBACK_OR_REJECT
    FETCH              valid 24-hour payload  -> cache it, respond (api)
                       error / timeout / malformed -> FALLBACK_OR_REJECT
    FALLBACK_OR_REJECT fallback entry exists  -> respond (stale-cache, stale=true)
                       otherwise              -> error envelope (429 quota, 503 provider)

A fresh hit never touches the quota. There is at most one provider call per
lookup and no retry loop. Quota and provider failures, including any
exception raised by the provider, are converted here. Anything else (store
unavailable, bugs in this module) propagates to the app's handlers.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from weather_api.domain.entities import CacheEntry, ResponseSource, WeatherRecord
from weather_api.domain.errors import (
    DomainError,
    MalformedProviderResponse,
    ProviderError,
    ProviderTimeoutError,
    QuotaExceededError,
)
from weather_api.domain.events import (
    DomainEventPublisher,
    LookupRejected,
    ProviderFailed,
    QuotaExhausted,
    WeatherServed,
    event_publisher,
)
from weather_api.domain.ports import CacheStore, WeatherProvider
from weather_api.domain.validation import validate_weather_records
from weather_api.schemas.api_schemas import Envelope
from weather_api.services.cache.freshness import FreshnessPolicy
from weather_api.services.cache.keys import cache_key
from weather_api.services.envelope import ResponseEnvelopeBuilder
from weather_api.services.quota_gate import QuotaGate

logger = logging.getLogger(__name__)

STALE_WARNINGS = {
    QuotaExceededError.code: "Rate limit exceeded; serving stale cached data",
    ProviderError.code: "Weather provider unavailable; serving stale cached data",
}


@dataclass(frozen=True)
class LookupResult:
    status_code: int
    envelope: Envelope


class WeatherOrchestrator:
    """Decide, per lookup, between cache, quota, fresh fetch and stale fallback."""

    def __init__(
        self,
        store: CacheStore,
        quota: QuotaGate,
        provider: WeatherProvider,
        freshness: Optional[FreshnessPolicy] = None,
        envelopes: Optional[ResponseEnvelopeBuilder] = None,
        *,
        stale_retention_seconds: int = 86400,
        provider_timeout: float = 5.0,
        key_prefix: str = "weather",
        include_date_in_key: bool = False,
        publisher: DomainEventPublisher = event_publisher,
    ) -> None:
        self._store = store
        self._quota = quota
        self._provider = provider
        self._freshness = freshness or FreshnessPolicy()
        self._envelopes = envelopes or ResponseEnvelopeBuilder(self._freshness.now)
        self._stale_retention_seconds = stale_retention_seconds
        self._provider_timeout = provider_timeout
        self._key_prefix = key_prefix
        self._include_date_in_key = include_date_in_key
        self._publisher = publisher

    @property
    def cache_ttl_seconds(self) -> int:
        """Store TTL: the validity window plus the stale fallback retention."""
        validity = int(self._freshness.validity_window.total_seconds())
        return validity + self._stale_retention_seconds

    def cache_key(self, city: str) -> str:
        on_date = self._freshness.now().date() if self._include_date_in_key else None
        return cache_key(city, prefix=self._key_prefix, on_date=on_date)

    # --------------- Public API ---------------
    async def lookup(self, city: str) -> LookupResult:
        """Resolve one lookup for an already validated, trimmed city name."""
        key = self.cache_key(city)
        entry = await self._store.get(key)
        if entry is not None and self._freshness.is_fresh(entry):
            logger.debug("Cache hit: %s", key)
            return self._served(city, entry.data, ResponseSource.CACHE, entry)
        logger.debug("Cache %s: %s", "stale" if entry else "miss", key)

        try:
            await self._consume_quota()
            records = await self._fetch(city)
        except (QuotaExceededError, ProviderError) as exc:
            return self._fallback_or_reject(city, entry, exc)

        fresh = CacheEntry(data=records, timestamp=self._freshness.now(), provider=self._provider.name)
        await self._store.set(key, fresh, self.cache_ttl_seconds)
        return self._served(city, fresh.data, ResponseSource.API, fresh)

    # --------------- Internal helpers ---------------
    async def _consume_quota(self) -> None:
        decision = await self._quota.check_and_consume()
        if decision.admitted:
            return
        self._publisher.publish(QuotaExhausted(
            event_id="",
            timestamp=None,
            aggregate_id=decision.window_key,
            window_key=decision.window_key,
            count=decision.count,
            limit=decision.limit,
        ))
        raise QuotaExceededError(
            "Rate limit exceeded. Please try again later.",
            details={"limit": decision.limit, "windowSeconds": self._quota.window_seconds},
        )

    async def _fetch(self, city: str) -> Sequence[WeatherRecord]:
        try:
            raw = await asyncio.wait_for(self._provider.fetch(city), timeout=self._provider_timeout)
        except asyncio.TimeoutError as exc:
            raise ProviderTimeoutError(
                f"Weather provider did not respond within {self._provider_timeout:g}s"
            ) from exc
        except ProviderError:
            raise
        except Exception as exc:
            # Any provider failure takes the fallback path; CancelledError is not an Exception
            raise ProviderError("Weather provider request failed", details=repr(exc)) from exc
        result = validate_weather_records(raw)
        if not result.ok:
            raise MalformedProviderResponse(result.message, result.details)
        return result.value

    def _served(
        self,
        city: str,
        records: Sequence[WeatherRecord],
        source: ResponseSource,
        entry: CacheEntry,
        warning: Optional[str] = None,
    ) -> LookupResult:
        envelope = self._envelopes.success(
            city, records, source, entry.timestamp, warning, provider=entry.provider
        )
        self._publisher.publish(WeatherServed(
            event_id="",
            timestamp=None,
            aggregate_id=city.casefold(),
            city=city,
            source=source.value,
            stale=source is ResponseSource.STALE_CACHE,
        ))
        return LookupResult(status_code=200, envelope=envelope)

    def _fallback_or_reject(
        self, city: str, entry: Optional[CacheEntry], exc: DomainError
    ) -> LookupResult:
        if isinstance(exc, ProviderError):
            logger.warning("Provider failed for %r: %s (%s)", city, exc.message, exc.details)
            self._publisher.publish(ProviderFailed(
                event_id="",
                timestamp=None,
                aggregate_id=city.casefold(),
                city=city,
                reason=exc.message,
            ))

        if entry is not None:
            warning = STALE_WARNINGS[exc.code]
            logger.warning("Serving stale cache for %r: %s", city, warning)
            return self._served(city, entry.data, ResponseSource.STALE_CACHE, entry, warning)

        if isinstance(exc, QuotaExceededError):
            rejection: DomainError = QuotaExceededError(
                "Rate limit exceeded and no cached data is available", details=exc.details
            )
        else:
            rejection = ProviderError(
                "Weather provider unavailable and no cached data is available",
                details=exc.message if exc.details is None else f"{exc.message}: {exc.details}",
            )
        self._publisher.publish(LookupRejected(
            event_id="",
            timestamp=None,
            aggregate_id=city.casefold(),
            city=city,
            code=rejection.code,
        ))
        return LookupResult(status_code=rejection.status_code, envelope=self._envelopes.from_error(rejection))
