"""
Six Cities Backend — Database Session Management
==================================================

What:  Async SQLAlchemy engine, session factory, transactional session scope
       and the identifier generator shared by all tables.
How:   Creates an async engine with connection pooling. Services receive the
       session factory at startup and open one `session_scope()` per
       operation: commit on success, rollback on error.
When:  Engine is created at module import; sessions are created per call.

Identifiers:
    Every row is keyed by a 24-character lowercase hex token (12 random bytes).
    The ValidateIdentifier middleware accepts exactly this shape, so a
    malformed id is rejected before any query runs.
"""

import secrets
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from sixcities.config import settings

IDENTIFIER_BYTES = 12
IDENTIFIER_LENGTH = IDENTIFIER_BYTES * 2


def generate_identifier() -> str:
    """Return a new 24-hex-character primary key."""
    return secrets.token_hex(IDENTIFIER_BYTES)


def create_engine_from_settings(database_url: str) -> AsyncEngine:
    """
    Build the async engine for `database_url`.

    SQLite (used by local experiments) does not accept queue-pool sizing
    arguments, so those are only passed to server databases.
    """
    kwargs: Dict[str, Any] = {"echo": settings.log_level == "DEBUG"}
    if not database_url.startswith("sqlite"):
        kwargs.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return create_async_engine(database_url, **kwargs)


# ── Engine Configuration ──────────────────────────────────────────────────
engine = create_engine_from_settings(settings.database_url)

# ── Session Factory ───────────────────────────────────────────────────────
# expire_on_commit=False: returned ORM objects stay readable after commit,
# which the controllers need to build response bodies
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models (shared metadata for Alembic)."""
    pass


@asynccontextmanager
async def session_scope(
    session_factory: async_sessionmaker,
) -> AsyncGenerator[AsyncSession, None]:
    """
    Provide one transactional session.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the service method
        3. On success: commits the transaction
        4. On error: rolls back and re-raises, so the error mapper answers
        5. Always: closes the session (returns connection to pool)

    Example:
        async with session_scope(self._session_factory) as db:
            result = await db.execute(select(User).where(User.email == email))
    """
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def dispose_engine() -> None:
    """Close all pooled connections (application shutdown)."""
    await engine.dispose()
