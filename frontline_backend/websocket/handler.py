"""
WebSocket message handler for Frontline Backend.
"""

import asyncio
import json
import logging
from typing import Any

from fastapi import WebSocketDisconnect

from frontline_backend.game.protocol import (
    CHAT,
    CHAT_MESSAGE,
    ERROR,
    JOIN,
    ORDER_PARSERS,
    parse_chat_text,
    parse_join,
)
from frontline_backend.websocket.manager import ConnectionInfo, ConnectionManager

logger = logging.getLogger(__name__)


class WebSocketHandler:
    """
    Handles WebSocket messages for a connected client.

    Orders are parsed here and queued on the tick engine; nothing in this
    class touches world state directly.
    """

    def __init__(
        self,
        manager: ConnectionManager,
        info: ConnectionInfo,
    ) -> None:
        self.manager = manager
        self.info = info

    async def handle_connection(self) -> None:
        """
        Main message loop for a WebSocket connection.

        Expected (non-fatal) errors:
        - WebSocketDisconnect: client disconnected
        - asyncio.TimeoutError: send timeout
        - ConnectionResetError, BrokenPipeError: connection lost
        - json.JSONDecodeError: invalid JSON -> close with 1007

        All other errors propagate (fail-fast).
        """
        try:
            while True:
                try:
                    raw = await self.info.websocket.receive_text()
                    message = json.loads(raw)
                except json.JSONDecodeError:
                    # Invalid JSON - close immediately with protocol error code
                    logger.warning(f"Invalid JSON from session {self.info.session_id}, closing")
                    await self.info.websocket.close(code=1007)  # Invalid frame payload
                    return
                if not isinstance(message, dict):
                    await self._send_error("Message must be a JSON object")
                    continue
                await self._handle_message(message)
        except WebSocketDisconnect:
            # Expected: client disconnected normally
            logger.info(f"Session {self.info.session_id} disconnected")
        except asyncio.TimeoutError:
            # Expected: send timeout
            logger.warning(f"Timeout for session {self.info.session_id}")
        except (ConnectionResetError, BrokenPipeError, OSError) as e:
            # Expected: connection lost
            logger.info(f"Connection lost for session {self.info.session_id}: {e}")
        finally:
            await self.manager.disconnect(self.info.session_id)

    async def _handle_message(self, message: dict[str, Any]) -> None:
        """Route incoming messages to appropriate handlers."""
        msg_type = message.get("type")

        if not isinstance(msg_type, str):
            await self._send_error("Missing message type")
            return

        if msg_type == JOIN:
            await self._handle_join(message)
        elif msg_type == CHAT:
            await self._handle_chat(message)
        elif msg_type in ORDER_PARSERS:
            await self._handle_order(msg_type, message)
        else:
            await self._send_error(f"Unknown message type: {msg_type}")

    async def _handle_join(self, message: dict[str, Any]) -> None:
        """Validate a join request and queue it for the next tick."""
        command = parse_join(message)
        if command is None:
            await self._send_error("Invalid join: name, faction and role are required")
            return

        engine = self._get_engine()
        if engine is None:
            await self._send_error("Tick engine not available")
            return

        self.info.player = command
        await engine.queue_intent(self.info.session_id, command)
        logger.info(
            f"Session {self.info.session_id} joining as {command.name} "
            f"({command.faction.value}/{command.role.value})"
        )

    async def _handle_chat(self, message: dict[str, Any]) -> None:
        """Relay chat from a joined player to every client."""
        player = self.info.player
        text = parse_chat_text(message)
        if player is None or text is None:
            return

        await self.manager.broadcast({
            "type": CHAT_MESSAGE,
            "user": f"[{player.role.value}] {player.name}",
            "text": text,
            "color": player.faction.color,
        })

    async def _handle_order(self, msg_type: str, message: dict[str, Any]) -> None:
        """
        Parse an order and queue it.
        Malformed orders are dropped without a reply.
        """
        command = ORDER_PARSERS[msg_type](message)
        if command is None:
            logger.debug(f"Dropping malformed {msg_type} from session {self.info.session_id}")
            return

        engine = self._get_engine()
        if engine is None:
            return

        await engine.queue_intent(self.info.session_id, command)

    def _get_engine(self):
        from frontline_backend.tick_engine import get_tick_engine

        return get_tick_engine()

    async def _send_error(self, message: str) -> None:
        """Reply with an error; a failed send is logged by the manager."""
        await self.manager.send_to(self.info.session_id, {"type": ERROR, "message": message})
