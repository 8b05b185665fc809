"""
Tests for the cache stores (in-memory and Redis).
"""
from __future__ import annotations

import asyncio
import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from weather_api.services.cache.memory_store import InMemoryCacheStore
from weather_api.services.cache.redis_store import RedisCacheStore
from tests.conftest import START, FakeMonotonic, make_entry


class TestInMemoryCacheStore:
    """Test the in-memory TTL store."""

    @pytest.mark.asyncio
    async def test_get_miss_returns_none(self, store):
        """A missing key is a miss, not an error."""
        assert await store.get("weather:nowhere") is None

    @pytest.mark.asyncio
    async def test_set_then_get(self, store):
        """Stored entries are returned as written."""
        entry = make_entry(START)
        await store.set("weather:london", entry, 60)
        assert await store.get("weather:london") == entry

    @pytest.mark.asyncio
    async def test_set_overwrites(self, store):
        """Last writer wins."""
        await store.set("weather:london", make_entry(START, "1°C"), 60)
        newer = make_entry(START, "2°C")
        await store.set("weather:london", newer, 60)
        assert await store.get("weather:london") == newer

    @pytest.mark.asyncio
    async def test_entry_expires_after_ttl(self, store, monotonic):
        """Entries vanish once their TTL lapses."""
        await store.set("weather:london", make_entry(START), 60)
        monotonic.advance(59)
        assert await store.get("weather:london") is not None
        monotonic.advance(1)
        assert await store.get("weather:london") is None

    @pytest.mark.asyncio
    async def test_increment_counts_from_one(self, store):
        """Counters start at 1 and increase by one."""
        assert await store.increment_with_expiry("quota:x", 3600) == 1
        assert await store.increment_with_expiry("quota:x", 3600) == 2
        assert await store.increment_with_expiry("quota:x", 3600) == 3

    @pytest.mark.asyncio
    async def test_ttl_armed_only_on_first_increment(self, store, monotonic):
        """Later increments do not push the window boundary back."""
        await store.increment_with_expiry("quota:x", 100)
        monotonic.advance(60)
        await store.increment_with_expiry("quota:x", 100)
        assert store.ttl_remaining("quota:x") == pytest.approx(40)

        monotonic.advance(40)
        assert store.counter("quota:x") == 0
        assert await store.increment_with_expiry("quota:x", 100) == 1

    @pytest.mark.asyncio
    async def test_concurrent_increments_are_distinct(self, store):
        """N concurrent increments yield exactly 1..N."""
        n = 250
        results = await asyncio.gather(
            *(store.increment_with_expiry("quota:x", 3600) for _ in range(n))
        )
        assert sorted(results) == list(range(1, n + 1))

    def test_increments_from_threads_are_distinct(self):
        """Counters stay consistent when several event loops share the store."""
        from concurrent.futures import ThreadPoolExecutor

        shared = InMemoryCacheStore(time_func=FakeMonotonic())

        def burst(_):
            async def run():
                return [await shared.increment_with_expiry("quota:x", 3600) for _ in range(50)]
            return asyncio.run(run())

        with ThreadPoolExecutor(max_workers=4) as pool:
            batches = list(pool.map(burst, range(4)))

        values = sorted(v for batch in batches for v in batch)
        assert values == list(range(1, 201))

    @pytest.mark.asyncio
    async def test_counter_key_is_not_a_cache_entry(self, store):
        """Reading a counter key through ``get`` is a miss."""
        await store.increment_with_expiry("quota:x", 3600)
        assert await store.get("quota:x") is None

    @pytest.mark.asyncio
    async def test_ping_and_clear(self, store):
        """The in-memory store is always reachable and can be emptied."""
        await store.set("weather:london", make_entry(START), 60)
        assert await store.ping() is True
        store.clear()
        assert await store.get("weather:london") is None


@pytest.fixture
def mock_redis():
    redis = MagicMock()
    redis.get = AsyncMock(return_value=None)
    redis.set = AsyncMock()
    redis.ping = AsyncMock(return_value=True)
    redis.aclose = AsyncMock()
    redis.script = AsyncMock(return_value=1)
    redis.register_script = MagicMock(return_value=redis.script)
    return redis


class TestRedisCacheStore:
    """Test the Redis-backed store against a mocked client."""

    @pytest.mark.asyncio
    async def test_get_miss_returns_none(self, mock_redis):
        """A missing key maps to None."""
        store = RedisCacheStore(mock_redis)
        assert await store.get("weather:london") is None
        mock_redis.get.assert_awaited_once_with("weather:london")

    @pytest.mark.asyncio
    async def test_set_serializes_with_ttl(self, mock_redis):
        """Entries are written as JSON with an EX ttl."""
        store = RedisCacheStore(mock_redis)
        entry = make_entry(START)

        await store.set("weather:london", entry, 90000)

        key, raw = mock_redis.set.call_args[0]
        assert key == "weather:london"
        assert mock_redis.set.call_args[1]["ex"] == 90000
        assert json.loads(raw)["timestamp"] == START.isoformat()
        assert len(json.loads(raw)["data"]) == 24
        assert json.loads(raw)["provider"] == "cached-provider"

    @pytest.mark.asyncio
    async def test_get_deserializes_entry(self, mock_redis):
        """Stored JSON comes back as an equal CacheEntry."""
        entry = make_entry(START)
        mock_redis.get = AsyncMock(return_value=json.dumps(entry.to_dict()))
        store = RedisCacheStore(mock_redis)

        assert await store.get("weather:london") == entry
        assert (await store.get("weather:london")).provider == "cached-provider"

    @pytest.mark.asyncio
    async def test_entry_without_provider_still_loads(self, mock_redis):
        """Payloads written before the provider was recorded remain readable."""
        raw = make_entry(START).to_dict()
        del raw["provider"]
        mock_redis.get = AsyncMock(return_value=json.dumps(raw))
        store = RedisCacheStore(mock_redis)

        entry = await store.get("weather:london")
        assert entry is not None
        assert entry.provider is None

    @pytest.mark.asyncio
    async def test_unreadable_entry_is_a_miss(self, mock_redis):
        """Corrupt payloads are discarded instead of crashing the lookup."""
        mock_redis.get = AsyncMock(return_value="{not json")
        store = RedisCacheStore(mock_redis)
        assert await store.get("weather:london") is None

    @pytest.mark.asyncio
    async def test_store_outage_propagates(self, mock_redis):
        """A Redis outage is not disguised as a cache miss."""
        mock_redis.get = AsyncMock(side_effect=ConnectionError("Redis down"))
        store = RedisCacheStore(mock_redis)
        with pytest.raises(ConnectionError):
            await store.get("weather:london")

    @pytest.mark.asyncio
    async def test_increment_runs_atomic_script(self, mock_redis):
        """INCR and first-use EXPIRE run in one server-side script."""
        mock_redis.script = AsyncMock(return_value=7)
        mock_redis.register_script = MagicMock(return_value=mock_redis.script)
        store = RedisCacheStore(mock_redis)

        assert await store.increment_with_expiry("quota:x", 3600) == 7
        mock_redis.script.assert_awaited_once_with(keys=["quota:x"], args=[3600])
        source = mock_redis.register_script.call_args[0][0]
        assert "INCR" in source
        assert "count == 1" in source

    @pytest.mark.asyncio
    async def test_ping_failure_reports_unreachable(self, mock_redis):
        """Ping errors are reported as unhealthy, not raised."""
        mock_redis.ping = AsyncMock(side_effect=ConnectionError("Redis down"))
        store = RedisCacheStore(mock_redis)
        assert await store.ping() is False

    @pytest.mark.asyncio
    async def test_close(self, mock_redis):
        """Closing the store closes the client."""
        store = RedisCacheStore(mock_redis)
        await store.close()
        mock_redis.aclose.assert_awaited_once()
