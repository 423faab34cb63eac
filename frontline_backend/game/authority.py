"""
Role-based command authority.

A player may steer a unit when the unit belongs to the player's faction and
the player is either Supreme or the Marshal of the unit's division.
Recruitment is reserved for Supreme and Production.
"""

from dataclasses import dataclass
from typing import Iterable
from uuid import UUID

from frontline_backend.game.roles import Role
from frontline_backend.game.units import Unit
from frontline_backend.game.world import Faction

RECRUITING_ROLES = frozenset({Role.SUPREME, Role.PRODUCTION})


@dataclass
class Player:
    """A joined player session."""

    session_id: UUID
    name: str
    faction: Faction
    role: Role

    @property
    def label(self) -> str:
        return f"[{self.role.value}] {self.name}"


def can_command(player: Player, unit: Unit) -> bool:
    if unit.faction != player.faction:
        return False
    return player.role is Role.SUPREME or player.role is unit.division


def can_recruit(player: Player) -> bool:
    return player.role in RECRUITING_ROLES


def commandable_units(player: Player, units: Iterable[Unit], unit_ids: Iterable[int]) -> list[Unit]:
    """
    Filter units down to those named in unit_ids that the player may command.
    Keeps registry order; anything unauthorized is dropped silently.
    """
    wanted = set(unit_ids)
    return [u for u in units if u.id in wanted and can_command(player, u)]
