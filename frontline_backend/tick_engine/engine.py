"""
Fixed-rate match clock.

The engine owns the single active match. Every tick it drains the intent
queue, applies commands, steps the simulation and pushes the new state to
all connections. Nothing else mutates the match.
"""

import asyncio
import logging
import random
import time
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID

from frontline_backend.config import Settings
from frontline_backend.game import MatchContext, advance, apply_command, build_state, new_match
from frontline_backend.game.protocol import GAME_STARTED, Command, JoinCommand

logger = logging.getLogger(__name__)

STATS_HISTORY = 100

_engine: "TickEngine | None" = None


def get_tick_engine() -> "TickEngine | None":
    return _engine


def set_tick_engine(engine: "TickEngine | None") -> None:
    global _engine
    _engine = engine


@dataclass
class Intent:
    """A parsed command waiting for the next tick boundary."""

    session_id: UUID
    command: Command
    timestamp: datetime = field(default_factory=datetime.utcnow)


@dataclass
class TickStats:
    tick_number: int
    duration_ms: float
    intents_processed: int
    units_alive: int


class TickEngine:
    """
    Runs the match on a fixed interval.

    Handlers only call queue_intent; commands take effect at the start of
    the following tick, in arrival order.
    """

    def __init__(
        self,
        tick_rate_ms: int,
        settings: Settings,
        rng: random.Random | None = None,
    ) -> None:
        self._tick_rate_ms = tick_rate_ms
        self._settings = settings
        self._rng = rng or random.Random()

        self._match: MatchContext | None = None
        # Unit ids stay unique across matches
        self._next_unit_id = 0
        self._tick_number = 0
        self._paused = False
        self._task: asyncio.Task | None = None
        self._stop_event = asyncio.Event()

        self._pending: list[Intent] = []
        self._pending_lock = asyncio.Lock()
        self._history: deque[TickStats] = deque(maxlen=STATS_HISTORY)

    @property
    def tick_number(self) -> int:
        return self._tick_number

    @property
    def is_running(self) -> bool:
        """True while the loop task is alive and not paused."""
        return self._task is not None and not self._paused

    @property
    def is_paused(self) -> bool:
        return self._paused

    @property
    def match(self) -> MatchContext | None:
        return self._match

    async def start(self) -> None:
        if self._task is not None:
            return
        self._stop_event.clear()
        self._task = asyncio.create_task(self._run_loop())
        logger.info(f"Tick engine started (rate: {self._tick_rate_ms}ms)")

    async def stop(self) -> None:
        if self._task is None:
            return

        self._stop_event.set()
        task, self._task = self._task, None
        try:
            await asyncio.wait_for(task, timeout=5.0)
        except asyncio.TimeoutError:
            logger.warning("Tick loop did not stop in time, cancelling")
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        logger.info(f"Tick engine stopped at tick {self._tick_number}")

    def pause(self) -> None:
        self._paused = True
        logger.info(f"Tick engine paused at tick {self._tick_number}")

    def resume(self) -> None:
        self._paused = False
        logger.info(f"Tick engine resumed at tick {self._tick_number}")

    async def step(self) -> None:
        """Run exactly one tick. Only allowed while paused."""
        if not self._paused:
            return
        await self._process_tick()
        logger.info(f"Manual tick step executed: {self._tick_number}")

    def end_match(self) -> None:
        """Drop the current match; the next join starts a fresh one."""
        if self._match is None:
            return
        self._next_unit_id = self._match.units.spawn_count
        self._match = None
        logger.info(f"Match ended at tick {self._tick_number}")

    async def queue_intent(self, session_id: UUID, command: Command) -> None:
        async with self._pending_lock:
            self._pending.append(Intent(session_id=session_id, command=command))

    def get_recent_stats(self) -> list[TickStats]:
        return list(self._history)

    async def _run_loop(self) -> None:
        """
        Tick until stopped. Each wait is shortened by the time the tick took.
        Errors outside command application propagate and end the loop.
        """
        interval = self._tick_rate_ms / 1000
        while not self._stop_event.is_set():
            started = time.perf_counter()
            if not self._paused:
                await self._process_tick()

            remaining = interval - (time.perf_counter() - started)
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=max(0.0, remaining))
            except asyncio.TimeoutError:
                continue

    async def _drain(self) -> list[Intent]:
        async with self._pending_lock:
            intents, self._pending = self._pending, []
        intents.sort(key=lambda i: i.timestamp)
        return intents

    async def _process_tick(self) -> None:
        started = time.perf_counter()
        self._tick_number += 1

        intents = await self._drain()
        joined = [i.session_id for i in intents if self._apply_intent(i)]

        if self._match is not None:
            advance(self._match)
            await self._notify_started(joined)
            await self._broadcast_state(build_state(self._match))

        duration_ms = (time.perf_counter() - started) * 1000
        self._history.append(TickStats(
            tick_number=self._tick_number,
            duration_ms=duration_ms,
            intents_processed=len(intents),
            units_alive=len(self._match.units) if self._match else 0,
        ))
        if duration_ms > self._tick_rate_ms:
            logger.warning(
                f"Tick {self._tick_number} took {duration_ms:.1f}ms "
                f"(target: {self._tick_rate_ms}ms)"
            )

    def _apply_intent(self, intent: Intent) -> bool:
        """
        Apply one intent, starting a match for the first join.
        Returns True for an applied join. A failing command is logged and
        skipped so the rest of the tick still runs.
        """
        is_join = isinstance(intent.command, JoinCommand)
        if self._match is None:
            if not is_join:
                return False
            self._match = new_match(self._settings, self._rng, first_unit_id=self._next_unit_id)

        try:
            apply_command(self._match, intent.session_id, intent.command)
        except Exception as e:
            logger.warning(
                f"Error applying {type(intent.command).__name__} "
                f"from {intent.session_id}: {e}"
            )
            return False
        return is_join

    async def _notify_started(self, session_ids: list[UUID]) -> None:
        from frontline_backend.websocket import get_connection_manager

        manager = get_connection_manager()
        if manager is None:
            return
        for session_id in session_ids:
            await manager.send_to_connection_nowait(session_id, {"type": GAME_STARTED})

    async def _broadcast_state(self, state: dict[str, Any]) -> None:
        from frontline_backend.websocket import get_connection_manager

        manager = get_connection_manager()
        if manager is not None:
            await manager.broadcast(state)
