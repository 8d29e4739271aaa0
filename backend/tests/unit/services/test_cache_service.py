"""
Unit tests for the cache-aside Cache Service.
"""

import json

import pytest
from unittest.mock import AsyncMock

from evmarket.domain.cache.value_objects import CacheKey
from evmarket.infrastructure.redis.exceptions import RedisConnectionException
from evmarket.services.cache.cache_service import CacheService


@pytest.fixture
def broken_store():
    """Cache store whose every operation fails as if Redis were down."""
    store = AsyncMock()
    error = RedisConnectionException(message="Redis connection failed")
    for name in ("get", "set", "delete", "keys", "exists", "expire", "flush_all"):
        getattr(store, name).side_effect = error
    return store


class TestGetOrSet:
    """Test the cache-aside accessor."""

    @pytest.mark.asyncio
    async def test_miss_invokes_producer_once(self, cache_service, memory_store):
        record = {"id": "42", "seller_id": "7"}
        producer = AsyncMock(return_value=record)

        result = await cache_service.get_or_set("record_42", producer, 3600)

        assert result == record
        producer.assert_awaited_once()
        assert json.loads(await memory_store.get("record_42")) == record
        assert memory_store.ttl_remaining("record_42") == pytest.approx(3600)

    @pytest.mark.asyncio
    async def test_hit_skips_producer(self, cache_service):
        await cache_service.set("record_42", {"id": "42", "cached": True}, 3600)
        producer = AsyncMock(return_value={"id": "42", "cached": False})

        result = await cache_service.get_or_set("record_42", producer, 3600)

        assert result == {"id": "42", "cached": True}
        producer.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_none_is_never_cached(self, cache_service, memory_store):
        producer = AsyncMock(return_value=None)

        assert await cache_service.get_or_set("record_404", producer, 3600) is None
        assert await memory_store.get("record_404") is None

        assert await cache_service.get_or_set("record_404", producer, 3600) is None
        assert producer.await_count == 2

    @pytest.mark.asyncio
    async def test_empty_collection_is_cached(self, cache_service):
        producer = AsyncMock(return_value=[])

        await cache_service.get_or_set("records", producer, 3600)
        assert await cache_service.get_or_set("records", producer, 3600) == []

        producer.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_expired_entry_is_recomputed(self, cache_service, clock):
        producer = AsyncMock(side_effect=[["first"], ["second"]])

        assert await cache_service.get_or_set("records", producer, 60) == ["first"]
        clock.advance(61)
        assert await cache_service.get_or_set("records", producer, 60) == ["second"]

    @pytest.mark.asyncio
    async def test_accepts_cache_key_objects(self, cache_service, memory_store):
        await cache_service.get_or_set(
            CacheKey.all_records(), AsyncMock(return_value=[1]), 3600
        )
        assert await memory_store.get("records") == "[1]"

    @pytest.mark.asyncio
    async def test_store_failure_falls_back_to_producer(self, broken_store):
        cache = CacheService(broken_store)
        producer = AsyncMock(return_value={"id": "42"})

        result = await cache.get_or_set("record_42", producer, 3600)

        assert result == {"id": "42"}
        producer.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_producer_errors_propagate(self, cache_service):
        producer = AsyncMock(side_effect=RuntimeError("database down"))

        with pytest.raises(RuntimeError, match="database down"):
            await cache_service.get_or_set("record_42", producer, 3600)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("ttl", [0, -5])
    async def test_invalid_ttl(self, cache_service, ttl):
        with pytest.raises(ValueError):
            await cache_service.get_or_set("record_42", AsyncMock(), ttl)

    @pytest.mark.asyncio
    async def test_invalid_key(self, cache_service):
        producer = AsyncMock()
        with pytest.raises(ValueError):
            await cache_service.get_or_set("", producer, 3600)
        producer.assert_not_awaited()


class TestCacheOperations:
    """Test the remaining cache operations."""

    @pytest.mark.asyncio
    async def test_set_and_get_round_trip(self, cache_service):
        assert await cache_service.set("record_1", {"parts": ["pump"]}, 60)
        assert await cache_service.get("record_1") == {"parts": ["pump"]}

    @pytest.mark.asyncio
    async def test_corrupt_entry_reads_as_miss(self, cache_service, memory_store):
        await memory_store.set("record_1", "{not json")
        assert await cache_service.get("record_1") is None

    @pytest.mark.asyncio
    async def test_invalidate_deletes_all_keys(self, cache_service, memory_store):
        for key in ("record_1", "records_seller_7", "records"):
            await cache_service.set(key, {"k": key}, 3600)

        deleted = await cache_service.invalidate(
            "record_1", "records_seller_7", CacheKey.all_records()
        )

        assert deleted == 3
        assert await memory_store.keys("*") == []

    @pytest.mark.asyncio
    async def test_delete_pattern(self, cache_service, memory_store):
        await cache_service.set("records_seller_1", [], 60)
        await cache_service.set("records_seller_2", [], 60)
        await cache_service.set("records", [], 60)

        assert await cache_service.delete_pattern("records_seller_*") == 2
        assert await memory_store.keys("*") == ["records"]

    @pytest.mark.asyncio
    async def test_exists_expire_flush(self, cache_service, clock):
        await cache_service.set("record_1", {"id": 1}, 10)

        assert await cache_service.exists("record_1")
        assert await cache_service.expire("record_1", 100)
        clock.advance(50)
        assert await cache_service.exists("record_1")

        assert await cache_service.flush_all()
        assert not await cache_service.exists("record_1")

    @pytest.mark.asyncio
    async def test_failures_are_absorbed(self, broken_store):
        cache = CacheService(broken_store)

        assert await cache.get("record_1") is None
        assert await cache.set("record_1", {"id": 1}, 60) is False
        assert await cache.delete("record_1") is False
        assert await cache.invalidate("record_1", "records") == 0
        assert await cache.delete_pattern("record_*") == 0
        assert await cache.exists("record_1") is False
        assert await cache.expire("record_1", 60) is False
        assert await cache.flush_all() is False
