"""
Storage for the win statistics table.

The game itself keeps no state in the database; only finished-match win
counts are persisted. SQLite (aiosqlite) is the default backend, and a
PostgreSQL URL switches to asyncpg with a connection pool.
"""

from typing import Any

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from frontline_backend.config import Settings, get_settings


class Base(DeclarativeBase):
    """Declarative base for persisted models."""
    pass


def engine_options(settings: Settings) -> dict[str, Any]:
    """Keyword arguments for create_async_engine for the configured backend."""
    options: dict[str, Any] = {"echo": settings.debug_mode}
    if settings.database_url.startswith("sqlite"):
        # No pool sizing for SQLite
        options["connect_args"] = {"check_same_thread": False}
    else:
        options["pool_size"] = settings.db_pool_size
        options["max_overflow"] = settings.db_max_overflow
    return options


def build_engine(settings: Settings) -> AsyncEngine:
    return create_async_engine(settings.database_url, **engine_options(settings))


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind, class_=AsyncSession, expire_on_commit=False)


engine = build_engine(get_settings())
async_session_factory = build_session_factory(engine)


async def init_db(bind: AsyncEngine | None = None) -> None:
    """Create the stats table if it does not exist yet."""
    from frontline_backend.models import stats  # noqa: F401

    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    await engine.dispose()
