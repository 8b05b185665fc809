"""
Test configuration and fixtures for weather-api tests.
"""
import asyncio
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from weather_api.main import app
from weather_api.dependencies import get_cache_store, get_orchestrator
from weather_api.domain.entities import CacheEntry, WeatherRecord
from weather_api.domain.errors import ProviderError
from weather_api.domain.events import event_publisher
from weather_api.services.cache.freshness import FreshnessPolicy
from weather_api.services.cache.memory_store import InMemoryCacheStore
from weather_api.services.envelope import ResponseEnvelopeBuilder
from weather_api.services.orchestrator import WeatherOrchestrator
from weather_api.services.quota_gate import QuotaGate


START = datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


def make_day(temperature="20°C", condition="Clear"):
    """24 well-formed hourly records as a provider would return them."""
    return [
        {"hour": hour, "temperature": temperature, "condition": condition}
        for hour in range(24)
    ]


def make_entry(timestamp, temperature="15°C", provider="cached-provider"):
    return CacheEntry(
        data=tuple(WeatherRecord(hour=h, temperature=temperature, condition="Cloudy") for h in range(24)),
        timestamp=timestamp,
        provider=provider,
    )


class FakeClock:
    """Controllable UTC wall clock."""

    def __init__(self, start=START):
        self.current = start

    def __call__(self):
        return self.current

    def advance(self, **kwargs):
        self.current += timedelta(**kwargs)


class FakeMonotonic:
    """Controllable monotonic time source for store TTLs."""

    def __init__(self, start=1000.0):
        self.current = start

    def __call__(self):
        return self.current

    def advance(self, seconds):
        self.current += seconds


class StubProvider:
    """Counts calls; returns ``payload`` or raises ``error``; optional delay."""

    name = "stub-provider"

    def __init__(self, payload=None, error=None, delay=0.0):
        self.payload = make_day() if payload is None else payload
        self.error = error
        self.delay = delay
        self.calls = []

    async def fetch(self, city):
        self.calls.append(city)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.payload


@pytest.fixture(autouse=True)
def clean_event_subscribers():
    """Keep subscribers from leaking between tests."""
    event_publisher.clear_subscribers()
    yield
    event_publisher.clear_subscribers()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def monotonic():
    return FakeMonotonic()


@pytest.fixture
def store(monotonic):
    return InMemoryCacheStore(time_func=monotonic)


@pytest.fixture
def provider():
    return StubProvider()


@pytest.fixture
def failing_provider():
    return StubProvider(error=ProviderError("External API failure"))


@pytest.fixture
def quota_gate(store):
    return QuotaGate(store, limit=100, window_seconds=3600)


def build_orchestrator(store, quota_gate, provider, clock, **kwargs):
    freshness = FreshnessPolicy(timedelta(hours=1), clock=clock)
    return WeatherOrchestrator(
        store=store,
        quota=quota_gate,
        provider=provider,
        freshness=freshness,
        envelopes=ResponseEnvelopeBuilder(clock),
        **kwargs,
    )


@pytest.fixture
def orchestrator(store, quota_gate, provider, clock):
    return build_orchestrator(store, quota_gate, provider, clock, provider_timeout=1.0)


@pytest.fixture
def client(orchestrator, store):
    """Create test client wired to the in-memory store and stub provider."""
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    app.dependency_overrides[get_cache_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()
