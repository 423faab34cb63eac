"""
Wire protocol for game clients: message type names, command types and
payload parsing.

Inbound messages are parsed into command objects at the WebSocket edge.
A payload that fails validation parses to None and is never queued.
"""

from dataclasses import dataclass
from typing import Any

from frontline_backend.game.roles import Role
from frontline_backend.game.world import Faction

# Message types - Client -> Server
JOIN = "join"
CHAT = "chat"
RECRUIT = "recruit"
ORDER_MOVE = "orderMove"
ORDER_FRONTLINE = "orderFrontline"

# Message types - Server -> Client
GAME_STARTED = "gameStarted"
STATE_UPDATE = "stateUpdate"
INIT_STATS = "initStats"
CHAT_MESSAGE = "chatMessage"
ERROR = "error"

MAX_NAME_LENGTH = 50
MAX_CHAT_LENGTH = 500


@dataclass(frozen=True)
class JoinCommand:
    name: str
    faction: Faction
    role: Role


@dataclass(frozen=True)
class LeaveCommand:
    """Synthetic command queued by the server when a connection closes."""


@dataclass(frozen=True)
class RecruitCommand:
    unit_type: str


@dataclass(frozen=True)
class MoveCommand:
    unit_ids: tuple[int, ...]
    target_q: int
    target_r: int


@dataclass(frozen=True)
class FrontlineCommand:
    unit_ids: tuple[int, ...]
    cell_ids: tuple[int, ...]


Command = JoinCommand | LeaveCommand | RecruitCommand | MoveCommand | FrontlineCommand


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _int_tuple(value: Any) -> tuple[int, ...] | None:
    if not isinstance(value, list):
        return None
    if not all(_is_int(v) for v in value):
        return None
    return tuple(value)


def parse_join(message: dict[str, Any]) -> JoinCommand | None:
    name = message.get("name")
    if not isinstance(name, str):
        return None
    name = name.strip()
    if not name or len(name) > MAX_NAME_LENGTH:
        return None

    try:
        faction = Faction(message.get("faction"))
        role = Role(message.get("role"))
    except ValueError:
        return None

    return JoinCommand(name=name, faction=faction, role=role)


def parse_recruit(message: dict[str, Any]) -> RecruitCommand | None:
    unit_type = message.get("unit_type")
    if not isinstance(unit_type, str) or not unit_type:
        return None
    return RecruitCommand(unit_type=unit_type)


def parse_order_move(message: dict[str, Any]) -> MoveCommand | None:
    unit_ids = _int_tuple(message.get("unit_ids"))
    target_q = message.get("target_q")
    target_r = message.get("target_r")
    if unit_ids is None or not _is_int(target_q) or not _is_int(target_r):
        return None
    return MoveCommand(unit_ids=unit_ids, target_q=target_q, target_r=target_r)


def parse_order_frontline(message: dict[str, Any]) -> FrontlineCommand | None:
    unit_ids = _int_tuple(message.get("unit_ids"))
    cell_ids = _int_tuple(message.get("cell_ids"))
    if unit_ids is None or cell_ids is None:
        return None
    return FrontlineCommand(unit_ids=unit_ids, cell_ids=cell_ids)


ORDER_PARSERS = {
    RECRUIT: parse_recruit,
    ORDER_MOVE: parse_order_move,
    ORDER_FRONTLINE: parse_order_frontline,
}


def parse_chat_text(message: dict[str, Any]) -> str | None:
    text = message.get("text")
    if not isinstance(text, str) or not text.strip():
        return None
    return text[:MAX_CHAT_LENGTH]
