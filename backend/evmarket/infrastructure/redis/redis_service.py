"""
Redis Service

Redis-backed implementation of the cache store. Translates driver errors
into ``RedisException`` subclasses; it never swallows them.
"""

import asyncio
import logging
from typing import Any, Awaitable, List, Optional

from redis.asyncio import Redis
from redis.exceptions import (
    ConnectionError as RedisConnectionError,
    TimeoutError as RedisTimeoutError,
    RedisError,
)

from ...core.config import Settings, get_settings
from ...domain.cache.repository_interfaces import CacheStore
from .connection_factory import RedisConnectionFactory
from .exceptions import (
    RedisException,
    RedisConnectionException,
    RedisOperationTimeoutException,
)

logger = logging.getLogger(__name__)


class RedisService(CacheStore):
    """
    Cache store over a shared ``redis.asyncio`` client.

    The client is created by ``initialize()`` at application startup,
    or injected directly.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[Redis] = None,
    ):
        self.settings = settings or get_settings()
        self._factory = RedisConnectionFactory(self.settings)
        self._client: Optional[Redis] = client
        self._lock = asyncio.Lock()

    @property
    def initialized(self) -> bool:
        return self._client is not None

    async def initialize(self) -> None:
        """Connect to Redis. Safe to call more than once."""
        if self._client is not None:
            return

        async with self._lock:
            if self._client is not None:
                return

            self._client = await self._factory.create_client()
            logger.info("Redis service initialized successfully")

    async def close(self) -> None:
        """Close the client and its pool."""
        async with self._lock:
            if self._client is not None:
                await self._client.aclose()
                self._client = None
            await self._factory.close()

        logger.info("Redis service closed")

    async def _execute(
        self, operation: str, awaitable: Awaitable[Any], key: Optional[str] = None
    ) -> Any:
        try:
            return await awaitable
        except RedisTimeoutError as e:
            raise RedisOperationTimeoutException(
                operation=operation,
                timeout_seconds=self.settings.REDIS_OPERATION_TIMEOUT,
                key=key,
                original_error=e,
            )
        except RedisConnectionError as e:
            raise RedisConnectionException(
                message=f"Redis connection failed during {operation}",
                original_error=e,
            )
        except RedisError as e:
            raise RedisException(
                message=f"Redis operation failed: {operation}",
                operation=operation,
                key=key,
                original_error=e,
            )

    def _require_client(self) -> Redis:
        if self._client is None:
            raise RedisConnectionException(message="Redis service is not initialized")
        return self._client

    async def get(self, key: str) -> Optional[str]:
        client = self._require_client()
        return await self._execute("get", client.get(key), key)

    async def set(self, key: str, value: str, ttl_seconds: Optional[int] = None) -> None:
        client = self._require_client()
        if ttl_seconds:
            await self._execute("setex", client.setex(key, ttl_seconds, value), key)
        else:
            await self._execute("set", client.set(key, value), key)

    async def delete(self, *keys: str) -> int:
        if not keys:
            return 0
        client = self._require_client()
        return int(await self._execute("delete", client.delete(*keys), keys[0]))

    async def keys(self, pattern: str) -> List[str]:
        client = self._require_client()

        async def _scan() -> List[str]:
            return [key async for key in client.scan_iter(match=pattern)]

        return await self._execute("scan", _scan(), pattern)

    async def exists(self, key: str) -> bool:
        client = self._require_client()
        return await self._execute("exists", client.exists(key), key) == 1

    async def expire(self, key: str, ttl_seconds: int) -> bool:
        client = self._require_client()
        return bool(await self._execute("expire", client.expire(key, ttl_seconds), key))

    async def flush_all(self) -> None:
        client = self._require_client()
        await self._execute("flushdb", client.flushdb())
