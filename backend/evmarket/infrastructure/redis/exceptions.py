"""
Redis Infrastructure Exceptions

Raised by the Redis cache store. ``CacheService`` catches them at its
boundary so cache outages never reach record operations.
"""

from typing import Any, Optional


class RedisException(Exception):
    """Base exception for Redis store failures.

    Context such as the operation and key is kept in ``details``; the
    driver error is chained as ``__cause__``.
    """

    error_code = "REDIS_ERROR"

    def __init__(
        self,
        message: str,
        original_error: Optional[Exception] = None,
        **details: Any,
    ):
        super().__init__(message)
        self.message = message
        self.details = {name: value for name, value in details.items() if value is not None}
        if original_error is not None:
            self.details["original_error_type"] = type(original_error).__name__
            self.__cause__ = original_error


class RedisConnectionException(RedisException):
    """Server unreachable, connection lost, or client not initialized."""

    error_code = "REDIS_CONNECTION_ERROR"

    def __init__(self, message: str = "Redis connection failed", **kwargs: Any):
        super().__init__(message, **kwargs)


class RedisOperationTimeoutException(RedisException):
    """A single command exceeded the operation timeout."""

    error_code = "REDIS_TIMEOUT_ERROR"

    def __init__(
        self,
        operation: str,
        timeout_seconds: float,
        key: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(
            f"Redis '{operation}' timed out after {timeout_seconds}s",
            original_error=original_error,
            operation=operation,
            key=key,
        )


class RedisConfigurationException(RedisException):
    """REDIS_URL or pool settings cannot be used."""

    error_code = "REDIS_CONFIGURATION_ERROR"
