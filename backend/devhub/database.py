"""
DevHub Backend — Database Engine & Session Factory
====================================================

What:  Async SQLAlchemy engine and session factory for the document store.
Why:   Centralizes all database connection logic in one place.
How:   `create_engine_from_settings()` builds an async engine with connection
       pooling; `create_session_factory()` wraps it. The application factory
       calls both once and hands the result to SqlDocumentStore.
Who:   Used by devhub.main (wiring), devhub.stores.sql and Alembic.

Connection Pooling Strategy:
    pool_size / max_overflow:  from settings (PostgreSQL default max_connections = 100)
    pool_pre_ping:             validates connections before use
    pool_recycle=3600:         recycles connections every hour
    SQLite URLs (tests, local hacking) skip the pool arguments.
"""

from typing import Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from devhub.config import settings


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares a single metadata object, which Alembic reads for migrations.
    """
    pass


def create_engine_from_settings(database_url: Optional[str] = None) -> AsyncEngine:
    """
    Create the async engine for the configured database.

    Args:
        database_url: Override the configured URL (used in tests).
    """
    url = database_url or settings.database_url
    kwargs = {"echo": settings.log_level == "DEBUG"}

    if not url.startswith("sqlite"):
        kwargs.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )

    return create_async_engine(url, **kwargs)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Session factory bound to `engine`.

    expire_on_commit=False: rows stay readable after the unit of work commits.
    """
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
