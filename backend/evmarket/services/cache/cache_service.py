"""
Cache Service

Cache-aside access on top of a key-value cache store. Values are stored
as JSON. Every store failure is logged and absorbed here so that callers
always fall back to the source of truth.
"""

import asyncio
import json
import logging
from typing import Any, Awaitable, Callable, Optional, TypeVar, Union

from opentelemetry import trace

from ...domain.cache.repository_interfaces import CacheStore
from ...domain.cache.value_objects import CacheKey, TTL

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

T = TypeVar("T")

KeyLike = Union[str, CacheKey]


def _key(key: KeyLike) -> str:
    return key.value if isinstance(key, CacheKey) else CacheKey(key).value


class CacheService:
    """
    JSON cache over a ``CacheStore``.

    Reads and writes fail open: a broken store behaves like an empty one.
    """

    def __init__(self, store: CacheStore):
        self.store = store

    async def get(self, key: KeyLike) -> Optional[Any]:
        """
        Get a value from the cache.

        Returns:
            The deserialized value, or None on miss, store error or corrupt entry
        """
        cache_key = _key(key)
        try:
            data = await self.store.get(cache_key)
        except Exception as e:
            logger.error(f"Cache get error for key {cache_key}: {e}")
            return None

        if data is None:
            return None

        try:
            return json.loads(data)
        except (TypeError, ValueError) as e:
            logger.warning(f"Discarding corrupt cache entry {cache_key}: {e}")
            return None

    async def set(self, key: KeyLike, value: Any, ttl: Optional[int] = None) -> bool:
        """
        Store a value, optionally expiring after ``ttl`` seconds.

        Returns:
            True if stored, False if serialization or the store failed
        """
        cache_key = _key(key)
        ttl_seconds = TTL(ttl).seconds if ttl is not None else None

        try:
            serialized = json.dumps(value, default=str)
            await self.store.set(cache_key, serialized, ttl_seconds)
            return True
        except Exception as e:
            logger.error(f"Cache set error for key {cache_key}: {e}")
            return False

    async def delete(self, key: KeyLike) -> bool:
        """Delete a key. Returns False only when the store failed."""
        cache_key = _key(key)
        try:
            await self.store.delete(cache_key)
            return True
        except Exception as e:
            logger.error(f"Cache delete error for key {cache_key}: {e}")
            return False

    async def invalidate(self, *keys: KeyLike) -> int:
        """
        Delete several keys concurrently and wait for all of them.

        Returns:
            Number of keys whose delete reached the store
        """
        with tracer.start_as_current_span("cache.invalidate") as span:
            span.set_attribute("cache.key_count", len(keys))
            results = await asyncio.gather(*(self.delete(key) for key in keys))
            deleted = sum(1 for ok in results if ok)

            if deleted < len(keys):
                logger.warning(
                    f"Cache invalidation incomplete: {deleted}/{len(keys)} keys",
                    extra={"keys": [_key(key) for key in keys]},
                )
            return deleted

    async def delete_pattern(self, pattern: str) -> int:
        """Delete every key matching a glob pattern. Returns the count removed."""
        try:
            keys = await self.store.keys(pattern)
            if not keys:
                return 0
            return await self.store.delete(*keys)
        except Exception as e:
            logger.error(f"Cache delete pattern error for {pattern}: {e}")
            return 0

    async def exists(self, key: KeyLike) -> bool:
        cache_key = _key(key)
        try:
            return await self.store.exists(cache_key)
        except Exception as e:
            logger.error(f"Cache exists error for key {cache_key}: {e}")
            return False

    async def expire(self, key: KeyLike, ttl: int) -> bool:
        """Reset the expiry of an existing key."""
        cache_key = _key(key)
        try:
            return await self.store.expire(cache_key, TTL(ttl).seconds)
        except ValueError:
            raise
        except Exception as e:
            logger.error(f"Cache expire error for key {cache_key}: {e}")
            return False

    async def flush_all(self) -> bool:
        try:
            await self.store.flush_all()
            return True
        except Exception as e:
            logger.error(f"Cache flush error: {e}")
            return False

    async def get_or_set(
        self,
        key: KeyLike,
        producer: Callable[[], Awaitable[Optional[T]]],
        ttl: int,
    ) -> Optional[T]:
        """
        Return the cached value for ``key`` or compute and cache it.

        On a miss ``producer`` is awaited once. A ``None`` result is returned
        without being cached, so missing records are looked up again on the
        next call. Concurrent misses may each call the producer; the last
        write wins.

        Args:
            key: Cache key
            producer: Zero-argument coroutine function producing the value
            ttl: Time to live in seconds for a produced value

        Returns:
            Cached or freshly produced value, or None

        Raises:
            ValueError: If key or ttl is invalid
        """
        cache_key = _key(key)
        ttl_seconds = TTL(ttl).seconds

        with tracer.start_as_current_span("cache.get_or_set") as span:
            span.set_attribute("cache.key", cache_key)

            cached = await self.get(cache_key)
            if cached is not None:
                span.set_attribute("cache.hit", True)
                return cached

            span.set_attribute("cache.hit", False)
            value = await producer()

            if value is not None:
                await self.set(cache_key, value, ttl_seconds)

            return value
