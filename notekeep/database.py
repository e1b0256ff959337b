"""
Notekeep Backend: Database Engine Helpers
==========================================

What:  Async SQLAlchemy declarative base, engine and session-factory builders.
How:   SqlNoteStore calls build_engine()/build_session_factory() with the URL
       it was constructed with; nothing here runs at import time, so tests
       can point a store at sqlite+aiosqlite without touching PostgreSQL.
Who:   Used by SqlNoteStore and by Alembic (Base.metadata).

Connection Pooling (asyncpg):
    pool_size / max_overflow come from settings; pool_pre_ping validates a
    pooled connection before use; pool_recycle=3600 retires hour-old
    connections. SQLite URLs skip the pool arguments.
"""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from notekeep.config import settings


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares a single metadata object with Alembic for migrations.
    """
    pass


def build_engine(database_url: str) -> AsyncEngine:
    """
    Create the async engine for `database_url`.

    SQL echo is enabled when LOG_LEVEL is DEBUG.
    """
    options = {"echo": settings.log_level == "DEBUG"}
    if not database_url.startswith("sqlite"):
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return create_async_engine(database_url, **options)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Session factory bound to `engine`.

    expire_on_commit=False keeps loaded attributes readable after commit.
    """
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
