"""
Cache Domain

Value objects and the store interface for the cache-aside layer.
"""

from .repository_interfaces import CacheStore
from .value_objects import CacheKey, TTL

__all__ = ["CacheStore", "CacheKey", "TTL"]
