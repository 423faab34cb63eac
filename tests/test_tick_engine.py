"""
Tests for the tick engine.
"""
import asyncio
import logging
import random
from uuid import uuid4

import pytest

from frontline_backend.config import Settings
from frontline_backend.game.protocol import JoinCommand, LeaveCommand, MoveCommand
from frontline_backend.game.roles import Role
from frontline_backend.game.world import Faction
from frontline_backend.tick_engine import TickEngine
from frontline_backend.websocket.manager import set_connection_manager


class FakeManager:
    """Records outbound messages instead of sending them."""

    def __init__(self):
        self.direct = []
        self.broadcasts = []

    async def send_to_connection_nowait(self, session_id, message):
        self.direct.append((session_id, message))
        return True

    async def broadcast(self, message):
        self.broadcasts.append(message)


@pytest.fixture
def fake_manager():
    manager = FakeManager()
    set_connection_manager(manager)
    yield manager
    set_connection_manager(None)


def join_command(faction=Faction.KIN, role=Role.SUPREME):
    return JoinCommand(name="tester", faction=faction, role=role)


class TestMatchLifecycle:
    """Tests for match creation and roster changes through intents."""

    @pytest.mark.asyncio
    async def test_no_match_before_first_join(self, tick_engine):
        await tick_engine.queue_intent(uuid4(), MoveCommand((0,), 4, 4))
        await tick_engine.step()
        assert tick_engine.match is None
        assert tick_engine.tick_number == 1

    @pytest.mark.asyncio
    async def test_join_starts_match(self, tick_engine):
        session_id = uuid4()
        await tick_engine.queue_intent(session_id, join_command())
        await tick_engine.step()
        match = tick_engine.match
        assert match is not None
        assert session_id in match.players
        assert match.tick == 1

    @pytest.mark.asyncio
    async def test_second_join_reuses_match(self, tick_engine):
        await tick_engine.queue_intent(uuid4(), join_command())
        await tick_engine.step()
        match = tick_engine.match
        await tick_engine.queue_intent(uuid4(), join_command(Faction.TAK))
        await tick_engine.step()
        assert tick_engine.match is match
        assert len(match.players) == 2

    @pytest.mark.asyncio
    async def test_leave_removes_player(self, tick_engine):
        session_id = uuid4()
        await tick_engine.queue_intent(session_id, join_command())
        await tick_engine.step()
        await tick_engine.queue_intent(session_id, LeaveCommand())
        await tick_engine.step()
        assert tick_engine.match.players == {}

    @pytest.mark.asyncio
    async def test_end_match(self, tick_engine):
        await tick_engine.queue_intent(uuid4(), join_command())
        await tick_engine.step()
        tick_engine.end_match()
        assert tick_engine.match is None
        await tick_engine.step()
        assert tick_engine.match is None

    @pytest.mark.asyncio
    async def test_unit_ids_continue_into_next_match(self):
        engine = TickEngine(tick_rate_ms=50, settings=Settings(ai_move_chance=0.0), rng=random.Random(1))
        engine.pause()
        await engine.queue_intent(uuid4(), join_command())
        await engine.step()
        first_ids = {u.id for u in engine.match.units}
        assert first_ids == set(range(12))

        engine.end_match()
        await engine.queue_intent(uuid4(), join_command())
        await engine.step()
        second = list(engine.match.units)
        assert [u.id for u in second] == list(range(12, 24))
        assert second[0].division is Role.MARSHAL_1


class TestIntentProcessing:
    """Tests for applying intents at the tick boundary."""

    @pytest.mark.asyncio
    async def test_orders_apply_before_simulation(self):
        engine = TickEngine(tick_rate_ms=50, settings=Settings(ai_move_chance=0.0), rng=random.Random(1))
        engine.pause()
        session_id = uuid4()
        await engine.queue_intent(session_id, join_command())
        await engine.queue_intent(session_id, MoveCommand((0,), 4, 2))
        await engine.step()

        unit = engine.match.units.get(0)
        assert unit.coords == (2, 2)
        assert unit.path[-1].coords == (4, 2)
        assert unit.progress == pytest.approx(0.2)

    @pytest.mark.asyncio
    async def test_failing_command_is_logged_and_skipped(self, tick_engine, monkeypatch, caplog):
        session_id = uuid4()
        await tick_engine.queue_intent(session_id, join_command())
        await tick_engine.step()

        def explode(ctx, session_id, command):
            raise RuntimeError("boom")

        monkeypatch.setattr("frontline_backend.tick_engine.engine.apply_command", explode)
        await tick_engine.queue_intent(session_id, MoveCommand((0,), 4, 4))
        with caplog.at_level(logging.WARNING):
            await tick_engine.step()

        assert "boom" in caplog.text
        assert tick_engine.match.tick == 2

    @pytest.mark.asyncio
    async def test_queue_is_drained_each_tick(self, tick_engine):
        await tick_engine.queue_intent(uuid4(), join_command())
        await tick_engine.queue_intent(uuid4(), join_command(Faction.TAK))
        await tick_engine.step()
        assert tick_engine.get_recent_stats()[-1].intents_processed == 2
        await tick_engine.step()
        assert tick_engine.get_recent_stats()[-1].intents_processed == 0


class TestBroadcast:
    """Tests for outbound tick messages."""

    @pytest.mark.asyncio
    async def test_join_gets_game_started_and_state(self, tick_engine, fake_manager):
        session_id = uuid4()
        await tick_engine.queue_intent(session_id, join_command())
        await tick_engine.step()
        assert fake_manager.direct == [(session_id, {"type": "gameStarted"})]
        assert fake_manager.broadcasts[-1]["type"] == "stateUpdate"
        assert fake_manager.broadcasts[-1]["tick_number"] == 1

    @pytest.mark.asyncio
    async def test_no_broadcast_without_match(self, tick_engine, fake_manager):
        await tick_engine.step()
        assert fake_manager.broadcasts == []

    @pytest.mark.asyncio
    async def test_state_every_tick(self, tick_engine, fake_manager):
        await tick_engine.queue_intent(uuid4(), join_command())
        for _ in range(3):
            await tick_engine.step()
        assert [m["tick_number"] for m in fake_manager.broadcasts] == [1, 2, 3]
        assert len(fake_manager.direct) == 1


class TestEngineControl:
    """Tests for start, stop, pause and step."""

    @pytest.mark.asyncio
    async def test_step_requires_pause(self, settings):
        engine = TickEngine(tick_rate_ms=50, settings=settings)
        await engine.step()
        assert engine.tick_number == 0

    @pytest.mark.asyncio
    async def test_run_loop_ticks(self, settings):
        engine = TickEngine(tick_rate_ms=10, settings=settings)
        await engine.start()
        assert engine.is_running
        await asyncio.sleep(0.1)
        await engine.stop()
        assert engine.tick_number > 0
        assert not engine.is_running

    @pytest.mark.asyncio
    async def test_paused_loop_does_not_tick(self, settings):
        engine = TickEngine(tick_rate_ms=10, settings=settings)
        engine.pause()
        await engine.start()
        await asyncio.sleep(0.05)
        await engine.stop()
        assert engine.tick_number == 0
