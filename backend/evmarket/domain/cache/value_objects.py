"""
Cache Value Objects

Immutable value objects for the cache domain.
Provides type safety for key naming and expiration settings.
"""

from dataclasses import dataclass
from typing import Union
from uuid import UUID

from ...constants import (
    MAX_CACHE_KEY_LENGTH,
    RECORD_KEY_PREFIX,
    RECORDS_BY_SELLER_PREFIX,
    RECORDS_COLLECTION_KEY,
)


@dataclass(frozen=True)
class CacheKey:
    """
    Immutable cache key value object.

    Enforces key naming conventions and provides validation.
    """

    value: str

    def __post_init__(self) -> None:
        """Validate cache key format."""
        if not isinstance(self.value, str) or not self.value:
            raise ValueError("Cache key cannot be empty")

        if len(self.value) > MAX_CACHE_KEY_LENGTH:
            raise ValueError(
                f"Cache key too long (max {MAX_CACHE_KEY_LENGTH} characters)"
            )

        if any(char.isspace() for char in self.value):
            raise ValueError("Cache key cannot contain whitespace")

    @classmethod
    def record(cls, record_id: Union[str, UUID]) -> "CacheKey":
        """Per-record key."""
        return cls(f"{RECORD_KEY_PREFIX}{record_id}")

    @classmethod
    def records_by_seller(cls, seller_id: Union[str, UUID]) -> "CacheKey":
        """Collection key for all records owned by one seller."""
        return cls(f"{RECORDS_BY_SELLER_PREFIX}{seller_id}")

    @classmethod
    def all_records(cls) -> "CacheKey":
        """Global collection key."""
        return cls(RECORDS_COLLECTION_KEY)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class TTL:
    """
    Time To Live value object for cache expiration.

    Provides type-safe TTL configuration with validation.
    """

    seconds: int

    def __post_init__(self) -> None:
        """Validate TTL value."""
        if isinstance(self.seconds, bool) or not isinstance(self.seconds, int):
            raise ValueError("TTL must be an integer number of seconds")
        if self.seconds <= 0:
            raise ValueError("TTL must be positive")
        if self.seconds > 86400 * 365:  # Max 1 year
            raise ValueError("TTL too large (max 1 year)")
