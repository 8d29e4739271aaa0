"""
EV Marketplace Database Configuration

Async database connection management with:
- Engine creation from settings (PostgreSQL via asyncpg, SQLite via aiosqlite)
- Connection verification with exponential backoff retry
- Session factory with commit/rollback handling
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import structlog
from sqlalchemy import text
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)

from .config import Settings, get_settings

logger = structlog.get_logger()


class DatabaseManager:
    """
    Database connection manager.

    Owns the async engine and session factory for the process lifetime.
    ``initialize()`` at startup, ``close()`` at shutdown.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.engine: Optional[AsyncEngine] = None
        self.session_factory: Optional[async_sessionmaker] = None

    def _create_engine(self) -> AsyncEngine:
        url = self.settings.DATABASE_URL

        if self.settings.uses_sqlite:
            # In-memory SQLite needs a single shared connection
            kwargs = {}
            if ":memory:" in url:
                kwargs = {
                    "poolclass": StaticPool,
                    "connect_args": {"check_same_thread": False},
                }
            return create_async_engine(url, echo=self.settings.DATABASE_ECHO, **kwargs)

        return create_async_engine(
            url,
            pool_size=self.settings.DATABASE_POOL_SIZE,
            max_overflow=self.settings.DATABASE_POOL_SIZE,
            pool_pre_ping=True,
            pool_recycle=3600,
            echo=self.settings.DATABASE_ECHO,
        )

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception_type((OperationalError, ConnectionError, OSError)),
        before_sleep=lambda retry_state: logger.warning(
            "Database connection retry",
            attempt=retry_state.attempt_number,
            wait_time=retry_state.next_action.sleep,
        ),
        reraise=True,
    )
    async def _verify_connection(self) -> None:
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def initialize(self) -> None:
        """Create the engine and session factory and verify connectivity."""
        if self.engine is not None:
            return

        self.engine = self._create_engine()
        self.session_factory = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

        try:
            await self._verify_connection()
        except Exception as e:
            logger.error("Failed to connect to database", error=str(e))
            await self.close()
            raise

        logger.info(
            "Database manager initialized",
            dialect=self.engine.dialect.name,
        )

    async def create_tables(self) -> None:
        """Create all tables for the registered models."""
        from ..models import Base

        if self.engine is None:
            raise RuntimeError("Database manager is not initialized")

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        logger.info("Database tables created")

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Provide a transactional session.

        Commits when the block exits cleanly, rolls back on error.
        """
        if self.session_factory is None:
            raise RuntimeError("Database manager is not initialized")

        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def close(self) -> None:
        """Dispose of the engine and its connection pool."""
        if self.engine is not None:
            await self.engine.dispose()
            logger.info("Database connections closed")
        self.engine = None
        self.session_factory = None
