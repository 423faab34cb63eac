"""
Pytest fixtures for Frontline Backend tests.
"""

import os
import random
import tempfile
from typing import AsyncGenerator
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

# Create a temp file for SQLite test database
_test_db_file = tempfile.NamedTemporaryFile(suffix=".db", delete=False)
_test_db_path = _test_db_file.name
_test_db_file.close()

# Set test environment - using SQLite
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_test_db_path}"
os.environ["DEBUG_MODE"] = "true"
os.environ["TICK_RATE_MS"] = "50"  # Faster ticks for testing
os.environ["STATIC_DIR"] = _test_db_path + "_no_static"  # Keep static mount off

from frontline_backend.config import Settings, get_settings
from frontline_backend.database import Base, build_session_factory, init_db
from frontline_backend.game.authority import Player
from frontline_backend.game.match import new_match
from frontline_backend.game.roles import Role
from frontline_backend.game.world import Faction
from frontline_backend.main import app
from frontline_backend.stats import StatsStore, set_stats_store
from frontline_backend.tick_engine import TickEngine, set_tick_engine
from frontline_backend.websocket.manager import ConnectionManager, set_connection_manager


@pytest.fixture
def settings() -> Settings:
    """Settings with an empty map and the AI fallback switched off."""
    return Settings(initial_units_per_faction=0, ai_move_chance=0.0)


@pytest.fixture
def match(settings):
    """A fresh match with a fixed random seed."""
    return new_match(settings, random.Random(7))


@pytest.fixture
def make_player():
    """Factory for joined players."""

    def _make(faction: Faction = Faction.KIN, role: Role = Role.SUPREME, name: str = "tester") -> Player:
        return Player(session_id=uuid4(), name=name, faction=faction, role=role)

    return _make


@pytest_asyncio.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Session factory bound to a clean test database."""
    test_engine = create_async_engine(os.environ["DATABASE_URL"], echo=False)

    await init_db(test_engine)

    yield build_session_factory(test_engine)

    # Clean up tables
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await test_engine.dispose()


@pytest_asyncio.fixture
async def stats_store(session_factory) -> StatsStore:
    return StatsStore(session_factory)


@pytest_asyncio.fixture
async def tick_engine(settings) -> AsyncGenerator[TickEngine, None]:
    """A paused, unstarted tick engine registered as the global instance."""
    engine = TickEngine(tick_rate_ms=50, settings=settings, rng=random.Random(3))
    engine.pause()
    set_tick_engine(engine)
    yield engine
    set_tick_engine(None)


@pytest_asyncio.fixture
async def client(stats_store, tick_engine) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client with the server globals wired up."""
    set_stats_store(stats_store)
    set_connection_manager(ConnectionManager())

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    app.dependency_overrides.clear()
    set_stats_store(None)
    set_connection_manager(None)


@pytest.fixture
def no_debug():
    """Turn debug mode off for the duration of a test."""
    app.dependency_overrides[get_settings] = lambda: Settings(debug_mode=False)
    yield
    app.dependency_overrides.pop(get_settings, None)
