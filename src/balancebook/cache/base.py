"""Abstract cache interface."""

from abc import ABC, abstractmethod
from typing import Any, Optional


class Cache(ABC):
    """Key/value cache with time-to-live and glob-style invalidation.

    Keys are plain strings built by ``balancebook.cache.keys``. Values are
    the frozen result objects produced by the services, so they can be
    shared between callers without copying.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Return the cached value, or None when missing or expired."""
        pass

    @abstractmethod
    def set(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> None:
        """Store a value; ``ttl_seconds`` None uses the backend default."""
        pass

    @abstractmethod
    def invalidate_pattern(self, pattern: str) -> int:
        """Remove every key matching a glob pattern. Returns the number removed."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Remove every key."""
        pass


class NullCache(Cache):
    """Cache that stores nothing; every lookup is a miss."""

    def get(self, key: str) -> Optional[Any]:
        return None

    def set(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> None:
        pass

    def invalidate_pattern(self, pattern: str) -> int:
        return 0

    def clear(self) -> None:
        pass
