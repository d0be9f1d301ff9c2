"""Report cache backends and invalidation."""

from balancebook.cache.base import Cache, NullCache
from balancebook.cache.memory import InMemoryCache, DEFAULT_TTL_SECONDS
from balancebook.cache.keys import CacheInvalidator


def create_cache(ttl_seconds: int = DEFAULT_TTL_SECONDS) -> Cache:
    """Create the cache backend for a TTL; zero disables caching."""
    if ttl_seconds <= 0:
        return NullCache()
    return InMemoryCache(default_ttl=ttl_seconds)


__all__ = [
    "Cache",
    "NullCache",
    "InMemoryCache",
    "CacheInvalidator",
    "DEFAULT_TTL_SECONDS",
    "create_cache",
]
