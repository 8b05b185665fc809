from __future__ import annotations

from datetime import timedelta
from functools import lru_cache

import redis.asyncio as aioredis

from weather_api.config import settings
from weather_api.domain.ports import CacheStore, WeatherProvider
from weather_api.services.cache.freshness import FreshnessPolicy
from weather_api.services.cache.memory_store import InMemoryCacheStore
from weather_api.services.cache.redis_store import RedisCacheStore
from weather_api.services.orchestrator import WeatherOrchestrator
from weather_api.services.providers.http_provider import HttpWeatherProvider
from weather_api.services.providers.mock_provider import MockWeatherProvider
from weather_api.services.quota_gate import QuotaGate


@lru_cache(maxsize=1)
def get_cache_store() -> CacheStore:
    """Process-wide cache store. Redis makes it shared across instances too."""
    if settings.CACHE_BACKEND.lower() == "redis":
        client = aioredis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
            socket_connect_timeout=5,
        )
        return RedisCacheStore(client)
    return InMemoryCacheStore()


@lru_cache(maxsize=1)
def get_weather_provider() -> WeatherProvider:
    if settings.PROVIDER_TYPE.lower() == "http":
        return HttpWeatherProvider(settings.PROVIDER_URL, timeout=settings.PROVIDER_TIMEOUT_SECONDS)
    return MockWeatherProvider(failure_rate=settings.PROVIDER_FAILURE_RATE)


def get_quota_gate() -> QuotaGate:
    return QuotaGate(
        get_cache_store(),
        limit=settings.QUOTA_LIMIT,
        window_seconds=settings.QUOTA_WINDOW_SECONDS,
        key=settings.QUOTA_KEY,
    )


def get_orchestrator() -> WeatherOrchestrator:
    return WeatherOrchestrator(
        store=get_cache_store(),
        quota=get_quota_gate(),
        provider=get_weather_provider(),
        freshness=FreshnessPolicy(timedelta(seconds=settings.CACHE_VALIDITY_SECONDS)),
        stale_retention_seconds=settings.CACHE_STALE_RETENTION_SECONDS,
        provider_timeout=settings.PROVIDER_TIMEOUT_SECONDS,
        key_prefix=settings.CACHE_KEY_PREFIX,
        include_date_in_key=settings.CACHE_KEY_INCLUDE_DATE,
    )
