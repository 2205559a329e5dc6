"""
MediaShare Backend — Async SQLAlchemy Engine & Sessions
=========================================================

What:  Async SQLAlchemy engine factory, session factory and declarative base.
Why:   Backs the SQL rendition of the metadata store (METADATA_BACKEND=sql),
       used for local development and the test suite.
How:   create_engine_for() builds an engine per store instance (no
       module-level engine, so tests can point each store at its own file).
Who:   Used by SqlMetadataStore.

Connection Pooling Strategy:
    Server databases (PostgreSQL via asyncpg):
        pool_size / max_overflow from settings, pool_pre_ping to catch stale
        connections, pool_recycle=3600 to retire long-lived ones.
    SQLite (aiosqlite):
        SQLAlchemy picks the pool itself; size arguments are not passed.
"""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from mediashare.config import Settings


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    The metadata is created with create_all() on first use; there are no
    migrations for this schema.
    """
    pass


def create_engine_for(settings: Settings) -> AsyncEngine:
    """
    Create the async engine for settings.database_url.

    Echoes SQL in DEBUG mode for development visibility.
    """
    url = settings.database_url
    kwargs = {}
    if not url.startswith("sqlite"):
        kwargs.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=True,
            pool_recycle=3600,
        )
    return create_async_engine(url, echo=settings.log_level == "DEBUG", **kwargs)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    """
    Session factory bound to `engine`.

    expire_on_commit=False: rows stay readable after commit without a new query.
    """
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
