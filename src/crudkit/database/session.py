from typing import AsyncGenerator
from functools import lru_cache

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    create_async_engine,
    async_sessionmaker,
    AsyncSession,
)

from crudkit.config import get_settings


@lru_cache()
def get_engine() -> AsyncEngine:
    """
    Build the AsyncEngine once, on first use.

    Created lazily so importing this module never opens a connection pool
    (tests override the session dependency and never touch this engine).
    """
    settings = get_settings()
    return create_async_engine(
        settings.DATABASE_URL,
        echo=settings.SQLALCHEMY_ECHO,   # Keep False in production
        pool_pre_ping=True,              # Connection health checks
    )


@lru_cache()
def get_sessionmaker() -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False: entities stay readable after commit, which the
    # response envelope needs once the request transaction is finished.
    return async_sessionmaker(
        bind=get_engine(),
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency. Yields a session and closes it after the request.

    The transaction is committed when the request finishes without raising
    and rolled back otherwise. Repositories only flush.

    Usage:
        async def endpoint(db: AsyncSession = Depends(get_async_session)):
            await db.execute(...)
    """
    async with get_sessionmaker()() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def create_all(engine: AsyncEngine | None = None) -> None:
    """Create every table registered on `Base.metadata` (no migrations)."""
    from crudkit.database.base import Base

    engine = engine or get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
