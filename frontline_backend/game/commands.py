"""
Apply parsed player commands to the match at a tick boundary.

Denied or impossible orders are no-ops: nothing is reported back to the
issuer, and other units in the same batch still process.
"""

import logging
from uuid import UUID

from frontline_backend.game.authority import Player, can_recruit, commandable_units
from frontline_backend.game.match import MatchContext
from frontline_backend.game.protocol import (
    Command,
    FrontlineCommand,
    JoinCommand,
    LeaveCommand,
    MoveCommand,
    RecruitCommand,
)

logger = logging.getLogger(__name__)


def apply_command(ctx: MatchContext, session_id: UUID, command: Command) -> int:
    """
    Apply a single command for the given session.
    Returns the number of units or players affected (0 for a no-op).
    """
    if isinstance(command, JoinCommand):
        ctx.join(Player(
            session_id=session_id,
            name=command.name,
            faction=command.faction,
            role=command.role,
        ))
        return 1

    if isinstance(command, LeaveCommand):
        return 1 if ctx.leave(session_id) is not None else 0

    player = ctx.players.get(session_id)
    if player is None:
        logger.debug(f"Dropping {type(command).__name__} from unjoined session {session_id}")
        return 0

    if isinstance(command, RecruitCommand):
        return _recruit(ctx, player, command)
    if isinstance(command, MoveCommand):
        return _order_move(ctx, player, command)
    if isinstance(command, FrontlineCommand):
        return _order_frontline(ctx, player, command)

    logger.warning(f"Unhandled command type: {type(command).__name__}")
    return 0


def _recruit(ctx: MatchContext, player: Player, command: RecruitCommand) -> int:
    if not can_recruit(player):
        return 0
    unit = ctx.recruit(player.faction, command.unit_type)
    if unit is None:
        return 0
    logger.info(
        f"{player.label} recruited {command.unit_type} #{unit.id} "
        f"({unit.division.value}) at ({unit.q}, {unit.r})"
    )
    return 1


def _order_move(ctx: MatchContext, player: Player, command: MoveCommand) -> int:
    target = ctx.world.cell(command.target_q, command.target_r)
    if target is None:
        return 0

    moved = 0
    for unit in commandable_units(player, ctx.units, command.unit_ids):
        path = ctx.route(unit, target)
        if path is None:
            continue
        unit.assign_path(path)
        moved += 1
    return moved


def _order_frontline(ctx: MatchContext, player: Player, command: FrontlineCommand) -> int:
    """Spread the units round-robin over the target cells."""
    targets = [
        cell for cell in (ctx.world.cell_by_id(cid) for cid in command.cell_ids)
        if cell is not None
    ]
    if not targets:
        return 0

    moved = 0
    for index, unit in enumerate(commandable_units(player, ctx.units, command.unit_ids)):
        target = targets[index % len(targets)]
        path = ctx.route(unit, target)
        if path is None:
            continue
        unit.assign_path(path)
        moved += 1
    return moved
