"""Database session configuration with connection pooling."""

import logging
from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.core.config import settings

logger = logging.getLogger(__name__)

pool_size = settings.DATABASE_POOL_SIZE
max_overflow = settings.DATABASE_MAX_OVERFLOW


def engine_options(url: str) -> dict[str, Any]:
    """Build engine keyword arguments for the given database URL.

    SQLite engines use SQLAlchemy's default single-connection pools, which
    reject the sizing arguments used for server databases.
    """
    options: dict[str, Any] = {"echo": settings.DEBUG}
    if url.startswith("sqlite"):
        return options

    options.update(
        pool_size=pool_size,  # Number of connections to maintain
        max_overflow=max_overflow,  # Additional connections allowed beyond pool_size
        pool_timeout=30,  # Seconds to wait before giving up on getting a connection
        pool_recycle=3600,  # Recycle connections after 1 hour
        pool_pre_ping=True,  # Verify connections before using them
    )
    return options


engine = create_async_engine(settings.DATABASE_URL, **engine_options(settings.DATABASE_URL))

async_session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_maker() as session:
        try:
            yield session
        finally:
            await session.close()


@asynccontextmanager
async def unit_of_work(session: AsyncSession) -> AsyncIterator[AsyncSession]:
    """
    Scope a group of writes to a single commit.

    Commits when the block exits normally. Any exception rolls back every
    write issued inside the block and is re-raised to the caller.

    Usage:
        async with unit_of_work(db):
            await store.delete_matching(key)
    """
    try:
        yield session
    except Exception:
        logger.warning("Rolling back unit of work")
        await session.rollback()
        raise
    else:
        await session.commit()
