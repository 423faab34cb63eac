"""
Units and the live unit registry.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator

from frontline_backend.config import UnitType
from frontline_backend.game.roles import Role, division_for_spawn
from frontline_backend.game.world import Cell, Faction, GridWorld

logger = logging.getLogger(__name__)


class UnitState(str, Enum):
    """Movement state machine states."""

    IDLE = "idle"
    MOVING = "moving"
    FIGHTING = "fighting"


@dataclass(frozen=True)
class UnitStats:
    """Stat snapshot copied from the unit type table at spawn time."""

    name: str
    hp: float
    attack: float
    defense: float
    speed: float
    cost: int

    @classmethod
    def from_type(cls, unit_type: UnitType) -> "UnitStats":
        return cls(
            name=unit_type.name,
            hp=unit_type.hp,
            attack=unit_type.attack,
            defense=unit_type.defense,
            speed=unit_type.speed,
            cost=unit_type.cost,
        )


@dataclass
class Unit:
    """A single unit on the map."""

    id: int
    faction: Faction
    type_key: str
    stats: UnitStats
    division: Role
    q: int
    r: int
    hp: float | None = None
    path: list[Cell] = field(default_factory=list)
    progress: float = 0.0
    state: UnitState = UnitState.IDLE

    def __post_init__(self) -> None:
        if self.hp is None:
            self.hp = self.stats.hp

    @property
    def coords(self) -> tuple[int, int]:
        return (self.q, self.r)

    @property
    def max_hp(self) -> float:
        return self.stats.hp

    @property
    def alive(self) -> bool:
        return self.hp > 0

    @property
    def next_cell(self) -> Cell | None:
        return self.path[0] if self.path else None

    def assign_path(self, path: list[Cell]) -> None:
        """
        Replace the current route. Progress restarts for the new route.
        An empty route leaves the unit idle.
        """
        self.path = list(path)
        self.progress = 0.0
        self.state = UnitState.MOVING if self.path else UnitState.IDLE

    def commit_step(self) -> Cell:
        """Move onto the next cell of the path and return it."""
        cell = self.path.pop(0)
        self.q, self.r = cell.q, cell.r
        self.progress = 0.0
        if not self.path:
            self.state = UnitState.IDLE
        return cell


class UnitRegistry:
    """
    Owns the live set of units.
    Unit ids and division assignment both come from the spawn counter.
    """

    def __init__(self, world: GridWorld, first_id: int = 0):
        self._world = world
        self._units: dict[int, Unit] = {}
        self._spawn_count = first_id

    def __iter__(self) -> Iterator[Unit]:
        return iter(list(self._units.values()))

    def __len__(self) -> int:
        return len(self._units)

    def __contains__(self, unit_id: object) -> bool:
        return unit_id in self._units

    @property
    def spawn_count(self) -> int:
        return self._spawn_count

    def get(self, unit_id: int) -> Unit | None:
        return self._units.get(unit_id)

    def spawn(
        self,
        faction: Faction,
        q: int,
        r: int,
        type_key: str,
        unit_type: UnitType,
    ) -> Unit | None:
        """
        Create a unit at (q, r).
        Returns None without consuming a spawn slot if the cell does not exist.
        """
        if self._world.cell(q, r) is None:
            return None

        index = self._spawn_count
        self._spawn_count += 1
        unit = Unit(
            id=index,
            faction=faction,
            type_key=type_key,
            stats=UnitStats.from_type(unit_type),
            division=division_for_spawn(index),
            q=q,
            r=r,
        )
        self._units[unit.id] = unit
        return unit

    def enemy_at(self, cell: Cell, faction: Faction) -> Unit | None:
        """First unit of another faction standing on the cell, if any."""
        for unit in self._units.values():
            if unit.faction != faction and unit.q == cell.q and unit.r == cell.r:
                return unit
        return None

    def remove_dead(self) -> list[Unit]:
        """Drop every unit with hp <= 0 and return them."""
        dead = [u for u in self._units.values() if not u.alive]
        for unit in dead:
            del self._units[unit.id]
            logger.debug(f"Unit {unit.id} ({unit.faction.value}) destroyed")
        return dead
