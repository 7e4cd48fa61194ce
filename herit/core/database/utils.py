"""
Engine and session helpers.

Postgres URLs are rewritten to the asyncpg driver; SQLite URLs (local
development and tests) go through aiosqlite unchanged.
"""

from __future__ import annotations

import re

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from .base import Base

_POSTGRES_SCHEME = re.compile(r"^postgres(?:ql)?(?:\+[a-z0-9_]+)?://")


def normalize_url(db_url: str) -> str:
    """``postgres://`` / ``postgresql+psycopg://`` and friends become ``postgresql+asyncpg://``."""
    return _POSTGRES_SCHEME.sub("postgresql+asyncpg://", db_url, count=1)


def create_engine(db_url: str) -> AsyncEngine:
    """
    Build the async engine for ``db_url``.

    Args:
        db_url: Connection URL from ``DATABASE_URL``

    Returns:
        AsyncEngine; SQLite engines allow use across threads, Postgres
        engines pre-ping pooled connections.
    """
    url = normalize_url(db_url)
    if url.startswith("sqlite"):
        return create_async_engine(url, connect_args={"check_same_thread": False})
    return create_async_engine(url, pool_pre_ping=True)


def create_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # Entities stay readable after commit; responses are built from them
    return async_sessionmaker(engine, expire_on_commit=False)


async def create_all(engine: AsyncEngine) -> None:
    """
    Create every Herit table that does not exist yet.

    Used by tests and by ``DATABASE_AUTO_CREATE`` in development; deployed
    databases are migrated with Alembic.
    """
    from . import entities  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
