"""In-memory cache store with per-key expiry."""

import fnmatch
import logging
import time
from typing import Callable, Dict, List, Optional, Tuple

from ...domain.cache.repository_interfaces import CacheStore

logger = logging.getLogger(__name__)


class InMemoryCacheStore(CacheStore):
    """
    Process-local cache store.

    Used for development and tests. Expired entries are dropped lazily
    on access.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        # key -> (value, expires_at or None)
        self._entries: Dict[str, Tuple[str, Optional[float]]] = {}

    def _live(self, key: str) -> Optional[Tuple[str, Optional[float]]]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at = entry[1]
        if expires_at is not None and self._clock() >= expires_at:
            del self._entries[key]
            return None
        return entry

    async def initialize(self) -> None:
        logger.info("In-memory cache store initialized")

    async def close(self) -> None:
        self._entries.clear()

    async def get(self, key: str) -> Optional[str]:
        entry = self._live(key)
        return entry[0] if entry else None

    async def set(self, key: str, value: str, ttl_seconds: Optional[int] = None) -> None:
        expires_at = self._clock() + ttl_seconds if ttl_seconds else None
        self._entries[key] = (value, expires_at)

    async def delete(self, *keys: str) -> int:
        removed = 0
        for key in keys:
            if self._live(key) is not None:
                del self._entries[key]
                removed += 1
        return removed

    async def keys(self, pattern: str) -> List[str]:
        return [
            key
            for key in list(self._entries)
            if fnmatch.fnmatchcase(key, pattern) and self._live(key) is not None
        ]

    async def exists(self, key: str) -> bool:
        return self._live(key) is not None

    async def expire(self, key: str, ttl_seconds: int) -> bool:
        entry = self._live(key)
        if entry is None:
            return False
        self._entries[key] = (entry[0], self._clock() + ttl_seconds)
        return True

    async def flush_all(self) -> None:
        self._entries.clear()

    def ttl_remaining(self, key: str) -> Optional[float]:
        """Seconds until expiry, or None for absent or non-expiring keys."""
        entry = self._live(key)
        if entry is None or entry[1] is None:
            return None
        return entry[1] - self._clock()
