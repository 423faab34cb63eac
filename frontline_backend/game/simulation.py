"""
One simulation step for a match.

Pipeline per tick:
1. Resource accrual
2. AI fallback for unattended divisions
3. Movement and combat for every moving or fighting unit
4. Cleanup of dead units and release of finished engagements
"""

import logging
from dataclasses import dataclass, field

from frontline_backend.game.ai import run_fallback
from frontline_backend.game.combat import Engagement, resolve_engagement
from frontline_backend.game.match import MatchContext
from frontline_backend.game.units import Unit, UnitState

logger = logging.getLogger(__name__)


@dataclass
class StepReport:
    """What happened during one step."""

    tick: int
    ai_orders: int = 0
    moves_committed: int = 0
    cells_conquered: int = 0
    engagements: list[Engagement] = field(default_factory=list)
    destroyed: list[int] = field(default_factory=list)


def advance(ctx: MatchContext) -> StepReport:
    """Run a full tick against the match context."""
    ctx.tick += 1
    report = StepReport(tick=ctx.tick)

    ctx.economy.accrue()
    report.ai_orders = run_fallback(ctx)

    for unit in ctx.units:
        _advance_unit(ctx, unit, report)

    report.destroyed = [u.id for u in ctx.units.remove_dead()]
    _release_engagements(ctx)
    return report


def _advance_unit(ctx: MatchContext, unit: Unit, report: StepReport) -> None:
    """Fight the enemy on the next cell, or make progress toward it."""
    if unit.state is UnitState.IDLE or not unit.alive:
        return

    next_cell = unit.next_cell
    if next_cell is None:
        unit.state = UnitState.IDLE
        return

    enemy = ctx.units.enemy_at(next_cell, unit.faction)
    if enemy is not None:
        unit.state = UnitState.FIGHTING
        report.engagements.append(resolve_engagement(unit, enemy))
        return

    unit.state = UnitState.MOVING
    unit.progress += unit.stats.speed
    if unit.progress < 1.0:
        return

    # One committed cell per tick at most
    cell = unit.commit_step()
    report.moves_committed += 1
    if ctx.world.conquer(cell, unit.faction):
        report.cells_conquered += 1


def _release_engagements(ctx: MatchContext) -> None:
    """Fighting units whose blocker is gone go back to moving."""
    for unit in ctx.units:
        if unit.state is not UnitState.FIGHTING:
            continue
        next_cell = unit.next_cell
        if next_cell is None:
            unit.state = UnitState.IDLE
        elif ctx.units.enemy_at(next_cell, unit.faction) is None:
            unit.state = UnitState.MOVING
