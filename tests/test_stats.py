"""
Tests for the win statistics store.
"""
import os
import tempfile

import pytest
from sqlalchemy.ext.asyncio import create_async_engine

from frontline_backend.config import Settings
from frontline_backend.database import build_session_factory, engine_options
from frontline_backend.game.world import Faction
from frontline_backend.stats import StatsStore, default_stats


@pytest.mark.asyncio
async def test_defaults_when_empty(stats_store):
    assert await stats_store.fetch_stats() == {"KIN": 0, "TAK": 0}


@pytest.mark.asyncio
async def test_record_win(stats_store):
    assert await stats_store.record_win(Faction.TAK)
    assert await stats_store.record_win(Faction.TAK)
    assert await stats_store.record_win(Faction.KIN)
    assert await stats_store.fetch_stats() == {"KIN": 1, "TAK": 2}


@pytest.mark.asyncio
async def test_missing_table_falls_back_to_defaults():
    """A database without the stats table reads as zero wins."""
    handle, path = tempfile.mkstemp(suffix=".db")
    os.close(handle)
    engine = create_async_engine(f"sqlite+aiosqlite:///{path}")
    store = StatsStore(build_session_factory(engine))
    try:
        assert await store.fetch_stats() == default_stats()
        assert not await store.record_win(Faction.KIN)
    finally:
        await engine.dispose()
        os.unlink(path)


class TestEngineOptions:
    """Tests for backend-specific engine arguments."""

    def test_sqlite_has_no_pool_sizing(self):
        options = engine_options(Settings(database_url="sqlite+aiosqlite:///./x.db"))
        assert "pool_size" not in options
        assert options["connect_args"] == {"check_same_thread": False}

    def test_postgres_uses_pool(self):
        settings = Settings(database_url="postgresql+asyncpg://u:p@db/frontline", db_pool_size=3)
        options = engine_options(settings)
        assert options["pool_size"] == 3
        assert options["max_overflow"] == settings.db_max_overflow
