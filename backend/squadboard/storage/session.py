"""
Async database engine and session management.

Provides a lazily created engine and session factory, plus a context
manager that rolls back on error.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from squadboard.storage.base import Base

logger = logging.getLogger(__name__)

_async_engine: Optional[AsyncEngine] = None
_async_session_factory: Optional[async_sessionmaker] = None


def init_engine(database_url: str, **engine_kwargs) -> AsyncEngine:
    """Create the async engine and session factory for the given URL."""
    global _async_engine, _async_session_factory

    if not database_url.startswith("sqlite"):
        engine_kwargs.setdefault("pool_size", 5)
        engine_kwargs.setdefault("max_overflow", 10)
        engine_kwargs.setdefault("pool_recycle", 3600)
    engine_kwargs.setdefault("pool_pre_ping", True)

    _async_engine = create_async_engine(database_url, **engine_kwargs)
    _async_session_factory = async_sessionmaker(
        bind=_async_engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )
    logger.info(f"Database engine initialized ({_async_engine.url.render_as_string(hide_password=True)})")
    return _async_engine


def get_engine() -> AsyncEngine:
    if _async_engine is None:
        raise RuntimeError("Database not initialized. Call init_engine() first.")
    return _async_engine


def get_session_factory() -> async_sessionmaker:
    if _async_session_factory is None:
        raise RuntimeError("Database not initialized. Call init_engine() first.")
    return _async_session_factory


async def create_all() -> None:
    """Create all tables that do not exist yet."""
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine() -> None:
    """Close all pooled connections."""
    global _async_engine, _async_session_factory
    if _async_engine is not None:
        await _async_engine.dispose()
        _async_engine = None
        _async_session_factory = None


@asynccontextmanager
async def get_session(
    factory: Optional[async_sessionmaker] = None,
) -> AsyncGenerator[AsyncSession, None]:
    """
    Async context manager for database sessions.

    Usage:
        async with get_session() as db:
            result = await db.execute(select(User))
            await db.commit()
    """
    session = (factory or get_session_factory())()
    try:
        yield session
    except Exception:
        await session.rollback()
        raise
    finally:
        await session.close()
