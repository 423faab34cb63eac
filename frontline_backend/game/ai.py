"""
Fallback AI for divisions nobody is commanding.
"""

import logging
from typing import TYPE_CHECKING

from frontline_backend.game.roles import DIVISIONS, Role
from frontline_backend.game.units import UnitState
from frontline_backend.game.world import Faction

if TYPE_CHECKING:
    from frontline_backend.game.match import MatchContext

logger = logging.getLogger(__name__)


def staffed_divisions(ctx: "MatchContext") -> set[tuple[Faction, Role]]:
    """(faction, division) pairs with a joined player able to command them."""
    staffed: set[tuple[Faction, Role]] = set()
    for player in ctx.players.values():
        if player.role is Role.SUPREME:
            staffed.update((player.faction, division) for division in DIVISIONS)
        elif player.role.is_division:
            staffed.add((player.faction, player.role))
    return staffed


def run_fallback(ctx: "MatchContext") -> int:
    """
    Give unattended idle units a chance to advance on enemy territory.
    Targets a random row of the enemy's home column. Returns orders issued.
    """
    staffed = staffed_divisions(ctx)
    chance = ctx.settings.ai_move_chance
    issued = 0

    for unit in ctx.units:
        if unit.state is not UnitState.IDLE or not unit.alive:
            continue
        if (unit.faction, unit.division) in staffed:
            continue
        if ctx.rng.random() >= chance:
            continue

        target_q = ctx.world.home_column(
            unit.faction.opponent, ctx.settings.recruit_column_offset
        )
        target_r = ctx.rng.randrange(ctx.world.height)
        goal = ctx.world.cell(target_q, target_r)
        if goal is None:
            continue

        path = ctx.route(unit, goal)
        if path:
            unit.assign_path(path)
            issued += 1

    if issued:
        logger.debug(f"AI fallback issued {issued} move orders")
    return issued
