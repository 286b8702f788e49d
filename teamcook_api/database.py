"""
Team Cook API: Database Engine Management
===========================================

What:  Async SQLAlchemy engine and session factory for the cache store.
How:   `create_engine_from_url()` builds an async engine, `create_session_factory()`
       wraps it, and `create_schema()` creates the cache table if it is missing.
Who:   The lifespan in main.py builds one engine per process and hands the
       session factory to CacheService. Tests build their own against a
       temporary SQLite file.
When:  Engine is created on startup; a session is opened per cache operation.

Supported backends:
    sqlite+aiosqlite:///./cache.sqlite     (default, single file next to the server)
    postgresql+asyncpg://user:pw@host/db   (shared cache for several instances)
"""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares a single metadata object between `create_schema()` and Alembic.
    """
    pass


def create_engine_from_url(database_url: str, echo: bool = False) -> AsyncEngine:
    """
    What:  Creates the async engine for the cache store.
    How:   SQLite gets `check_same_thread=False` because aiosqlite runs the
           connection on its own worker thread.
    """
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False

    return create_async_engine(
        database_url,
        connect_args=connect_args,
        pool_pre_ping=True,
        echo=echo,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Creates AsyncSession instances with consistent configuration.

    expire_on_commit=False: cached values are read after the session commits.
    """
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def create_schema(engine: AsyncEngine) -> None:
    """
    What:  Creates all tables registered on Base.metadata that do not exist yet.
    When:  Called once in the lifespan, after the engine is built.
    How:   `create_all` is idempotent (CREATE TABLE IF NOT EXISTS semantics),
           so a fresh SQLite file works without running Alembic first.
    """
    # Registers the cache table on Base.metadata
    from teamcook_api.models import cache_entry  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine(engine: AsyncEngine) -> None:
    """
    What:  Gracefully closes all connections in the pool.
    When:  Called during application shutdown (lifespan handler).
    """
    await engine.dispose()
