"""
Redis Connection Factory

Builds the process-wide Redis connection pool from settings and verifies
connectivity at startup.
"""

import logging
from typing import Optional
from urllib.parse import urlparse

from redis.asyncio import ConnectionPool, Redis
from redis.asyncio.connection import SSLConnection
from redis.exceptions import (
    AuthenticationError as RedisAuthError,
    RedisError,
)

from ...core.config import Settings, get_settings
from .exceptions import RedisConfigurationException, RedisConnectionException

logger = logging.getLogger(__name__)


class RedisConnectionFactory:
    """
    Factory for the shared Redis connection pool.

    One pool per process, created by ``create_client()`` and released by
    ``close()``. ``rediss://`` URLs get TLS connections.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self._pool: Optional[ConnectionPool] = None

    def _database_index(self) -> int:
        parsed_url = urlparse(self.settings.REDIS_URL)
        if parsed_url.scheme not in ("redis", "rediss"):
            raise RedisConfigurationException(
                message="REDIS_URL must use the redis:// or rediss:// scheme",
                config_key="REDIS_URL",
            )

        db = parsed_url.path.lstrip("/")
        if not db:
            return 0
        if not db.isdigit():
            raise RedisConfigurationException(
                message=f"REDIS_URL database must be a non-negative integer, got {db!r}",
                config_key="REDIS_URL",
            )
        return int(db)

    def _create_pool(self) -> ConnectionPool:
        """
        Build the pool from REDIS_URL.

        Raises:
            RedisConfigurationException: If REDIS_URL is invalid
        """
        db = self._database_index()
        try:
            return ConnectionPool.from_url(
                self.settings.REDIS_URL,
                db=db,
                encoding="utf-8",
                decode_responses=True,
                socket_connect_timeout=self.settings.REDIS_CONNECTION_TIMEOUT,
                socket_timeout=self.settings.REDIS_OPERATION_TIMEOUT,
                retry_on_timeout=True,
                max_connections=self.settings.REDIS_MAX_CONNECTIONS,
            )
        except ValueError as e:
            raise RedisConfigurationException(
                message="REDIS_URL could not be parsed",
                config_key="REDIS_URL",
                original_error=e,
            )

    async def create_client(self) -> Redis:
        """
        Create the connection pool and return a verified client.

        Raises:
            RedisConfigurationException: If REDIS_URL is invalid
            RedisConnectionException: If the server cannot be reached
        """
        self._pool = self._create_pool()
        client = Redis(connection_pool=self._pool)
        host = self._pool.connection_kwargs.get("host")
        port = self._pool.connection_kwargs.get("port")

        try:
            await client.ping()
        except RedisAuthError as e:
            await self.close()
            raise RedisConnectionException(
                message="Redis authentication failed",
                host=host,
                port=port,
                original_error=e,
            )
        except (RedisError, OSError) as e:
            await self.close()
            raise RedisConnectionException(
                message="Redis connection test failed",
                host=host,
                port=port,
                original_error=e,
            )

        logger.info(
            "Redis connection pool created",
            extra={
                "host": host,
                "port": port,
                "tls": issubclass(self._pool.connection_class, SSLConnection),
                "max_connections": self.settings.REDIS_MAX_CONNECTIONS,
            },
        )
        return client

    async def close(self) -> None:
        """Disconnect every pooled connection."""
        if self._pool is not None:
            await self._pool.disconnect()
            self._pool = None
