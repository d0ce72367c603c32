"""
Core pytest configuration for the entire test suite.

Only the essentials live here: logging setup, the database engine and session
fixtures. Domain fixtures (the Widget test model, repositories, services, the
HTTP client) are in tests/test_fixtures/ and re-exported at the bottom.

Every test gets its own in-memory SQLite database (aiosqlite + StaticPool),
so tests are isolated without savepoint tricks and commits are allowed.
"""

from __future__ import annotations

# -------------------------------
# Standard library imports
# -------------------------------
import sys
import logging
from pathlib import Path
from typing import AsyncGenerator

# -------------------------------
# Early logging tuning
# -------------------------------
# Keep this block above the project imports so collection stays quiet.
NOISY_LOGGERS = (
    "sqlalchemy",
    "sqlalchemy.engine",
    "sqlalchemy.engine.Engine",
    "aiosqlite",
    "asyncio",
    "httpx",
)
for _name in NOISY_LOGGERS:
    logging.getLogger(_name).setLevel(logging.WARNING)

# ------------------------------------------------------------------------------------------------
# PATH PATCHING
# ------------------------------------------------------------------------------------------------

# Ensure 'src' on sys.path so `import crudkit...` works without an editable install
SRC = Path(__file__).resolve().parents[2]
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

# -------------------------------
# Third-party / project imports
# -------------------------------
import pytest
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from crudkit.config.settings import Settings
from crudkit.core.logging.builder import setup_logging
from crudkit.database.base import Base

TEST_DATABASE_URL = "sqlite+aiosqlite://"


# ------------------------------------------------------------------------------------------------
# SETTINGS & LOGGING
# ------------------------------------------------------------------------------------------------


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Settings isolated from any local .env file."""
    return Settings(
        _env_file=None,
        ENV="testing",
        TESTING=True,
        LOG_FORMAT="json",
        LOG_LEVEL="DEBUG",
        LOG_TO_STDOUT=True,
    )


@pytest.fixture(scope="session", autouse=True)
def configure_logging(test_settings: Settings):
    """Install the application's dictConfig once for the session."""
    setup_logging(test_settings)
    yield


# ------------------------------------------------------------------------------------------------
# DATABASE FIXTURES
# ------------------------------------------------------------------------------------------------


@pytest.fixture()
async def async_engine() -> AsyncGenerator[AsyncEngine, None]:
    """
    A fresh in-memory database per test.

    StaticPool keeps a single connection, so every session created from this
    engine sees the same in-memory database.
    """
    # Registers the Widget table on Base.metadata
    from .test_fixtures import models  # noqa: F401

    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture()
def session_maker(async_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=async_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture()
async def db_session(session_maker: async_sessionmaker[AsyncSession]) -> AsyncGenerator[AsyncSession, None]:
    async with session_maker() as session:
        yield session
        await session.rollback()


# Domain fixtures
from .test_fixtures.repository_fixtures import (  # noqa: E402,F401
    widget_repository,
    sample_widget_data,
    make_widget,
    create_widget,
    created_widget,
    multiple_widgets,
)
from .test_fixtures.service_fixtures import (  # noqa: E402,F401
    widget_service,
    in_memory_repository,
    in_memory_service,
    gadget_service,
)
from .test_fixtures.api_fixtures import (  # noqa: E402,F401
    widget_controller,
    app,
    client,
)
