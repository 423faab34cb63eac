"""
Match context: every piece of mutable world state for one running match.

The tick engine owns a single MatchContext and passes it to each simulation
step and command. Nothing else holds references to world state.
"""

import logging
import random
from dataclasses import dataclass, field
from uuid import UUID

from frontline_backend.config import Settings
from frontline_backend.game.authority import Player
from frontline_backend.game.economy import Economy
from frontline_backend.game.pathfinding import find_path
from frontline_backend.game.units import Unit, UnitRegistry
from frontline_backend.game.world import Cell, Faction, GridWorld

logger = logging.getLogger(__name__)


@dataclass
class MatchContext:
    """World, units, economy and roster of the active match."""

    settings: Settings
    world: GridWorld
    units: UnitRegistry
    economy: Economy
    rng: random.Random
    players: dict[UUID, Player] = field(default_factory=dict)
    tick: int = 0

    def spawn_unit(self, faction: Faction, q: int, r: int, type_key: str) -> Unit | None:
        """Spawn a unit of a configured type; unknown types spawn nothing."""
        unit_type = self.settings.unit_types.get(type_key)
        if unit_type is None:
            return None
        return self.units.spawn(faction, q, r, type_key, unit_type)

    def recruit(self, faction: Faction, type_key: str) -> Unit | None:
        """
        Pay for and spawn a unit on a random row of the faction's recruit column.
        Returns None (with no state change) for unknown types, short funds or a
        recruit column outside the map.
        """
        unit_type = self.settings.unit_types.get(type_key)
        if unit_type is None:
            return None

        q = self.world.home_column(faction, self.settings.recruit_column_offset)
        r = self.rng.randrange(self.world.height)
        if self.world.cell(q, r) is None:
            logger.warning(f"Recruit column {q} is off the map for {faction.value}")
            return None

        counters = self.economy[faction]
        if not counters.debit(self.settings.recruit_manpower_cost, unit_type.cost):
            return None
        return self.units.spawn(faction, q, r, type_key, unit_type)

    def route(self, unit: Unit, goal: Cell) -> list[Cell] | None:
        """Shortest route for a unit from its current cell, within the length cap."""
        start = self.world.cell(unit.q, unit.r)
        return find_path(self.world, start, goal, self.settings.max_path_length)

    def join(self, player: Player) -> None:
        self.players[player.session_id] = player
        logger.info(
            f"Player {player.name} joined {player.faction.value} as {player.role.value}"
        )

    def leave(self, session_id: UUID) -> Player | None:
        player = self.players.pop(session_id, None)
        if player is not None:
            logger.info(f"Player {player.name} left {player.faction.value}")
        return player


def new_match(
    settings: Settings,
    rng: random.Random | None = None,
    first_unit_id: int = 0,
) -> MatchContext:
    """
    Build a fresh map, seed each faction's starting line and reset the economy.
    Unit ids (and so division rotation) continue from first_unit_id.
    """
    world = GridWorld(settings.grid_width, settings.grid_height)
    ctx = MatchContext(
        settings=settings,
        world=world,
        units=UnitRegistry(world, first_id=first_unit_id),
        economy=Economy(settings),
        rng=rng or random.Random(),
    )

    for faction in Faction:
        q = world.home_column(faction, settings.initial_column_offset)
        for i in range(settings.initial_units_per_faction):
            ctx.spawn_unit(faction, q, settings.initial_row_start + i, settings.initial_unit_type)

    logger.info(
        f"New match on {world.width}x{world.height} grid with {len(ctx.units)} units"
    )
    return ctx
