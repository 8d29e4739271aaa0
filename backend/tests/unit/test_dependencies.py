"""
Unit tests for application wiring.
"""

import pytest
from unittest.mock import AsyncMock

from evmarket.core.config import Settings
from evmarket.dependencies import (
    AppContainer,
    application,
    build_container,
    create_cache_store,
)
from evmarket.infrastructure.cache import InMemoryCacheStore
from evmarket.infrastructure.redis import RedisService
from evmarket.repositories import MaintenanceRecordRepository, SellerRepository
from evmarket.services.maintenance_record import MaintenanceRecordService


class TestCreateCacheStore:
    def test_memory_backend(self, test_settings):
        assert isinstance(create_cache_store(test_settings), InMemoryCacheStore)

    def test_redis_backend(self, test_settings):
        settings = test_settings.model_copy(update={"CACHE_BACKEND": "redis"})
        store = create_cache_store(settings)

        assert isinstance(store, RedisService)
        assert not store.initialized


class TestBuildContainer:
    def test_wires_shared_cache(self, test_settings, memory_store):
        container = build_container(test_settings, memory_store)

        assert isinstance(container, AppContainer)
        assert container.cache_store is memory_store
        assert container.cache.store is memory_store
        assert container.database.settings is test_settings
        assert container.database.engine is None

    @pytest.mark.asyncio
    async def test_service_factory(self, test_settings, database, db_session):
        settings = test_settings.model_copy(update={"CACHE_DEFAULT_TTL": 60})
        container = build_container(settings)
        container.database = database

        service = container.maintenance_record_service(db_session)

        assert isinstance(service, MaintenanceRecordService)
        assert isinstance(service.repository, MaintenanceRecordRepository)
        assert isinstance(service.seller_repository, SellerRepository)
        assert service.repository.session is db_session
        assert service.cache is container.cache
        assert service.ttl == 60


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_application_starts_and_stops(self, test_settings):
        store = AsyncMock(spec=InMemoryCacheStore)

        async with application(test_settings, store) as container:
            assert container.database.engine is not None
            store.initialize.assert_awaited_once()

        store.close.assert_awaited_once()
        assert container.database.engine is None

    @pytest.mark.asyncio
    async def test_shutdown_closes_store_when_database_close_fails(self, test_settings):
        store = AsyncMock(spec=InMemoryCacheStore)
        container = build_container(test_settings, store)
        container.database.close = AsyncMock(side_effect=RuntimeError("dispose failed"))

        with pytest.raises(RuntimeError):
            await container.shutdown()

        store.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_scope_commits(self, test_settings, memory_store):
        async with application(test_settings, memory_store) as container:
            await container.database.create_tables()

            async with container.maintenance_record_scope() as service:
                result = await service.get_all_records()

            assert result.success
            assert result.data == []


def test_settings_reject_sync_database_driver():
    with pytest.raises(ValueError, match="async driver|postgresql\\+asyncpg"):
        Settings(DATABASE_URL="postgresql://localhost/evmarket")


def test_settings_normalize_cache_backend():
    assert Settings(CACHE_BACKEND="MEMORY").CACHE_BACKEND == "memory"
