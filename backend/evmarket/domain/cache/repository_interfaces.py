"""
Cache Store Interface

Abstract key-value store consumed by the cache-aside service.
Values are stored as already-serialized strings.
"""

from abc import ABC, abstractmethod
from typing import List, Optional


class CacheStore(ABC):
    """Key-value store with per-key expiry."""

    async def initialize(self) -> None:
        """Open connections. Called once at application startup."""

    async def close(self) -> None:
        """Release connections. Called once at application shutdown."""

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Return the stored value or None if absent or expired."""
        pass

    @abstractmethod
    async def set(self, key: str, value: str, ttl_seconds: Optional[int] = None) -> None:
        """Store value, expiring after ttl_seconds when given."""
        pass

    @abstractmethod
    async def delete(self, *keys: str) -> int:
        """Remove keys. Returns the number of keys that existed."""
        pass

    @abstractmethod
    async def keys(self, pattern: str) -> List[str]:
        """Return live keys matching a glob-style pattern."""
        pass

    @abstractmethod
    async def exists(self, key: str) -> bool:
        pass

    @abstractmethod
    async def expire(self, key: str, ttl_seconds: int) -> bool:
        """Set a new expiry on an existing key. False if the key is absent."""
        pass

    @abstractmethod
    async def flush_all(self) -> None:
        pass
