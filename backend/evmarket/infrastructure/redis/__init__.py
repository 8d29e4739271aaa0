"""
Redis Infrastructure Module

Redis-backed cache store with a shared connection pool and
explicit exception translation.

This module provides:
- RedisService: cache store implementation over redis.asyncio
- RedisConnectionFactory: pool creation and startup connectivity check
- Exception hierarchy for Redis failures
"""

from .redis_service import RedisService
from .connection_factory import RedisConnectionFactory
from .exceptions import (
    RedisException,
    RedisConnectionException,
    RedisOperationTimeoutException,
    RedisConfigurationException,
)

__all__ = [
    "RedisService",
    "RedisConnectionFactory",
    "RedisException",
    "RedisConnectionException",
    "RedisOperationTimeoutException",
    "RedisConfigurationException",
]
