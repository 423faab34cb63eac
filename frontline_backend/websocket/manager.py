"""
WebSocket connection manager for Frontline Backend.
Handles client connections and message broadcasting.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any
from uuid import UUID, uuid4

from fastapi import WebSocket

from frontline_backend.game.protocol import JoinCommand, LeaveCommand

logger = logging.getLogger(__name__)

# Global connection manager instance
_manager: "ConnectionManager | None" = None


def get_connection_manager() -> "ConnectionManager | None":
    """Get the global connection manager instance."""
    return _manager


def set_connection_manager(manager: "ConnectionManager | None") -> None:
    """Set the global connection manager instance."""
    global _manager
    _manager = manager


@dataclass
class ConnectionInfo:
    """Information about a connected client."""

    websocket: WebSocket
    session_id: UUID = field(default_factory=uuid4)
    player: JoinCommand | None = None

    @property
    def display_name(self) -> str:
        if self.player is None:
            return str(self.session_id)
        return self.player.name


class ConnectionManager:
    """
    Manages WebSocket connections.
    Every connection receives broadcasts, whether or not it has joined.
    """

    def __init__(self, send_timeout: float = 5.0) -> None:
        # Map of session_id -> ConnectionInfo
        self._connections: dict[UUID, ConnectionInfo] = {}
        self._send_timeout = send_timeout
        # Lock for thread-safe operations
        self._lock = asyncio.Lock()
        # Keep references so pending sends are not garbage collected
        self._send_tasks: set[asyncio.Task] = set()

    async def connect(self, info: ConnectionInfo) -> None:
        """Register a new connection."""
        async with self._lock:
            self._connections[info.session_id] = info
            logger.info(f"Client connected [session={info.session_id}]")

    async def disconnect(self, session_id: UUID) -> None:
        """
        Unregister a connection.
        Queues a synthetic leave so the player drops out of the match roster
        at the next tick.
        """
        async with self._lock:
            info = self._connections.pop(session_id, None)

        if info is None:
            return

        if info.player is not None:
            from frontline_backend.tick_engine import get_tick_engine

            engine = get_tick_engine()
            if engine is not None:
                await engine.queue_intent(session_id, LeaveCommand())
                logger.info(f"Queued leave intent for {info.display_name} [session={session_id}]")

        logger.info(f"Client {info.display_name} disconnected [session={session_id}]")

    async def broadcast(self, message: dict[str, Any]) -> None:
        """
        Broadcast a message to every connection.
        Non-blocking: slow clients won't block the broadcast.
        """
        async with self._lock:
            connections = list(self._connections.values())

        for info in connections:
            self._spawn_send(info, message)

    async def send_to_connection_nowait(self, session_id: UUID, message: dict[str, Any]) -> bool:
        """Schedule a send to one connection without waiting for it."""
        async with self._lock:
            info = self._connections.get(session_id)

        if info is None:
            return False
        self._spawn_send(info, message)
        return True

    async def send_to(self, session_id: UUID, message: dict[str, Any]) -> bool:
        """Send a message to a specific connection and wait for it."""
        async with self._lock:
            info = self._connections.get(session_id)

        if info is None:
            return False

        try:
            await info.websocket.send_json(message)
            return True
        except Exception as e:
            logger.warning(f"Error sending to session {session_id}: {e}")
            return False

    def _spawn_send(self, info: ConnectionInfo, message: dict[str, Any]) -> None:
        task = asyncio.create_task(self._send_to_connection(info, message))
        self._send_tasks.add(task)
        task.add_done_callback(self._send_tasks.discard)

    async def _send_to_connection(
        self,
        info: ConnectionInfo,
        message: dict[str, Any],
    ) -> None:
        """Send a message to a specific connection."""
        try:
            await asyncio.wait_for(
                info.websocket.send_json(message),
                timeout=self._send_timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(f"Timeout sending to session {info.session_id}")
        except Exception as e:
            logger.warning(f"Error sending to session {info.session_id}: {e}")
            # Don't disconnect here - let the main handler handle it

    def get_all_connections(self) -> dict[UUID, ConnectionInfo]:
        """Get all current connections."""
        return dict(self._connections)

    @property
    def connection_count(self) -> int:
        """Number of active connections."""
        return len(self._connections)
