"""
Application Wiring

Builds the process-wide collaborators once at startup and hands them to
services through their constructors. The cache client and database
manager are the only long-lived resources; both are opened by
``startup()`` and released by ``shutdown()``.
"""

from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from .core.config import Settings, get_settings
from .core.database import DatabaseManager
from .core.logging import configure_logging
from .domain.cache.repository_interfaces import CacheStore
from .infrastructure.cache.memory_store import InMemoryCacheStore
from .infrastructure.redis.redis_service import RedisService
from .repositories.maintenance_record import MaintenanceRecordRepository
from .repositories.seller import SellerRepository
from .services.cache.cache_service import CacheService
from .services.maintenance_record import MaintenanceRecordService

logger = structlog.get_logger()


def create_cache_store(settings: Settings) -> CacheStore:
    """Select the cache store implementation named by CACHE_BACKEND."""
    if settings.CACHE_BACKEND == "memory":
        return InMemoryCacheStore()
    return RedisService(settings)


@dataclass
class AppContainer:
    """Typed holder for application-scoped collaborators."""

    settings: Settings
    cache_store: CacheStore
    cache: CacheService
    database: DatabaseManager

    async def startup(self) -> None:
        """Open the cache store and database connections."""
        await self.cache_store.initialize()
        await self.database.initialize()
        logger.info(
            "Application services started",
            environment=self.settings.ENVIRONMENT,
            cache_backend=self.settings.CACHE_BACKEND,
        )

    async def shutdown(self) -> None:
        """Release connections, database first."""
        try:
            await self.database.close()
        finally:
            await self.cache_store.close()
        logger.info("Application services stopped")

    def maintenance_record_service(
        self, session: AsyncSession
    ) -> MaintenanceRecordService:
        """Build a record service bound to one database session."""
        return MaintenanceRecordService(
            repository=MaintenanceRecordRepository(session),
            seller_repository=SellerRepository(session),
            cache=self.cache,
            ttl=self.settings.CACHE_DEFAULT_TTL,
        )

    @asynccontextmanager
    async def maintenance_record_scope(self) -> AsyncIterator[MaintenanceRecordService]:
        """Record service inside a transactional session."""
        async with self.database.session() as session:
            yield self.maintenance_record_service(session)


def build_container(
    settings: Optional[Settings] = None,
    cache_store: Optional[CacheStore] = None,
) -> AppContainer:
    """Wire the application from settings. Nothing is connected yet."""
    settings = settings or get_settings()
    store = cache_store or create_cache_store(settings)

    return AppContainer(
        settings=settings,
        cache_store=store,
        cache=CacheService(store),
        database=DatabaseManager(settings),
    )


@asynccontextmanager
async def application(
    settings: Optional[Settings] = None,
    cache_store: Optional[CacheStore] = None,
) -> AsyncIterator[AppContainer]:
    """Application lifecycle: wire, start, yield, then shut down."""
    container = build_container(settings, cache_store)
    configure_logging(container.settings)
    await container.startup()
    try:
        yield container
    finally:
        await container.shutdown()
