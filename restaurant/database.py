"""
Database Connection Module
Builds the SQLAlchemy async engine and session factory behind the order store.

SQLite (through aiosqlite) is the default embedded medium; any other async
URL such as postgresql+psycopg://... works unchanged.
"""

import logging
from pathlib import Path

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)


# Base class for all our models
class Base(DeclarativeBase):
    pass


def is_memory_database(database_url: str) -> bool:
    """Check if the URL points at a private in-memory SQLite database."""
    url = make_url(database_url)
    return url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:")


def build_engine(
    database_url: str,
    echo: bool = False,
    pool_size: int = 5,
    max_overflow: int = 10,
) -> AsyncEngine:
    """
    Create the async engine for the given URL.

    In-memory SQLite gets a single shared connection so that every session
    sees the same database.
    """
    url = make_url(database_url)

    if is_memory_database(database_url):
        logger.debug("Using shared in-memory SQLite connection")
        return create_async_engine(
            url,
            echo=echo,
            poolclass=StaticPool,
        )

    return create_async_engine(
        url,
        echo=echo,
        pool_size=pool_size,  # Connection pool size
        max_overflow=max_overflow,  # Extra connections when pool is full
        pool_pre_ping=True,
    )


def build_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory - creates new database sessions."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False  # Objects remain accessible after commit
    )


async def init_db(engine: AsyncEngine) -> None:
    """
    Create all tables and indexes in the database.
    Safe to call on every startup. File based SQLite gets its parent
    directory created first.
    """
    # Register models on Base.metadata
    from restaurant import models  # noqa: F401

    url = engine.url
    if url.get_backend_name() == "sqlite" and url.database not in (None, "", ":memory:"):
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables created")
