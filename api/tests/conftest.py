"""Pytest configuration and shared fixtures.

This module provides:
- A throwaway SQLite database per test (file-backed, foreign keys on)
- Async session fixtures for repository/service tests
- A TripShareApp wired to the test database
- A fast password hasher (low bcrypt cost)
"""

# Set environment variables BEFORE any imports that trigger Settings validation
import os

os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test_trip_share.db")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from collections.abc import AsyncGenerator, Generator
from pathlib import Path

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from bootstrap import TripShareApp
from core.config import Settings, clear_settings_cache
from core.database import (
    create_engine,
    create_session_maker,
    create_tables,
    dispose_engine,
)
from core.security import PasswordHasher

# Lowest cost bcrypt accepts; hashing stays correct, just fast
TEST_BCRYPT_ROUNDS = 4

# =============================================================================
# Test Settings
# =============================================================================


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """Settings pointing at a SQLite file unique to this test."""
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'trip_share.db'}",
        debug=True,
        bcrypt_rounds=TEST_BCRYPT_ROUNDS,
    )


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest_asyncio.fixture
async def test_engine(test_settings: Settings) -> AsyncGenerator[AsyncEngine]:
    """Engine with every table created. The database file dies with tmp_path."""
    engine = create_engine(test_settings)
    await create_tables(engine)

    yield engine

    await dispose_engine(engine)


@pytest.fixture
def session_maker(test_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return create_session_maker(test_engine)


@pytest_asyncio.fixture
async def db_session(
    session_maker: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession]:
    """A session for arranging and inspecting data directly.

    Nothing is committed unless the test does so itself.
    """
    session = session_maker()
    try:
        yield session
    finally:
        await session.rollback()
        await session.close()


# =============================================================================
# Application Fixtures
# =============================================================================


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(bcrypt_rounds=TEST_BCRYPT_ROUNDS)


@pytest.fixture
def trip_app(
    session_maker: async_sessionmaker[AsyncSession], hasher: PasswordHasher
) -> TripShareApp:
    """TripShareApp bound to the per-test database."""
    return TripShareApp(session_maker, hasher)


# =============================================================================
# Utility Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None]:
    """Reset settings cache before each test."""
    clear_settings_cache()
    yield
    clear_settings_cache()
