"""
Main pytest configuration for backend tests.

Fixtures for the in-memory cache store, an in-memory SQLite database and
sample maintenance record data.
"""

import os
from datetime import datetime, timezone
from uuid import uuid4

import pytest

# Set test environment variables before importing app modules
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["CACHE_BACKEND"] = "memory"
os.environ["LOG_LEVEL"] = "DEBUG"

from evmarket.core.config import Settings
from evmarket.core.database import DatabaseManager
from evmarket.infrastructure.cache.memory_store import InMemoryCacheStore
from evmarket.models import Seller
from evmarket.repositories.seller import SellerRepository
from evmarket.services.cache.cache_service import CacheService


class FakeClock:
    """Manually advanced monotonic clock for expiry tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def test_settings():
    """Settings for an isolated in-memory environment."""
    return Settings(
        ENVIRONMENT="test",
        DATABASE_URL="sqlite+aiosqlite:///:memory:",
        CACHE_BACKEND="memory",
        CACHE_DEFAULT_TTL=3600,
        LOG_LEVEL="DEBUG",
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def memory_store(clock):
    """In-memory cache store driven by the fake clock."""
    return InMemoryCacheStore(clock=clock)


@pytest.fixture
def cache_service(memory_store):
    return CacheService(memory_store)


@pytest.fixture
async def database(test_settings):
    """Initialized database manager with all tables created."""
    manager = DatabaseManager(test_settings)
    await manager.initialize()
    await manager.create_tables()
    yield manager
    await manager.close()


@pytest.fixture
async def db_session(database):
    async with database.session_factory() as session:
        yield session


@pytest.fixture
async def seller(db_session):
    """Persisted seller."""
    repository = SellerRepository(db_session)
    return await repository.create(
        Seller(business_name="Volt Motors", email=f"{uuid4().hex}@volt.example")
    )


@pytest.fixture
def record_payload():
    """Valid create payload without seller_id."""
    return {
        "service_type": "Battery Check",
        "service_date": datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc).isoformat(),
        "description": "Full battery health diagnostic",
        "parts_replaced": ["coolant pump"],
        "location": "Colombo service bay 2",
    }
