"""Cache service component package."""
from .freshness import FreshnessPolicy, is_fresh
from .keys import cache_key
from .memory_store import InMemoryCacheStore
from .redis_store import RedisCacheStore

__all__ = [
    "FreshnessPolicy",
    "is_fresh",
    "cache_key",
    "InMemoryCacheStore",
    "RedisCacheStore",
]
