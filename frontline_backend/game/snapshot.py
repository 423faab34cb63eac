"""
Full-state serialization for broadcast.

Every tick sends the whole map, unit list and economies. Delta encoding
would cut bandwidth but is not needed at current player and unit counts.
"""

from typing import Any

from frontline_backend.game.economy import FactionEconomy
from frontline_backend.game.match import MatchContext
from frontline_backend.game.protocol import STATE_UPDATE
from frontline_backend.game.units import Unit
from frontline_backend.game.world import Cell, Faction


def serialize_cell(cell: Cell) -> dict[str, Any]:
    return {"id": cell.id, "q": cell.q, "r": cell.r, "owner": cell.owner.value}


def serialize_unit(unit: Unit) -> dict[str, Any]:
    return {
        "id": unit.id,
        "faction": unit.faction.value,
        "type": unit.type_key,
        "stats": {
            "name": unit.stats.name,
            "hp": unit.stats.hp,
            "attack": unit.stats.attack,
            "defense": unit.stats.defense,
            "speed": unit.stats.speed,
            "cost": unit.stats.cost,
        },
        "hp": unit.hp,
        "max_hp": unit.max_hp,
        "q": unit.q,
        "r": unit.r,
        "path": [serialize_cell(c) for c in unit.path],
        "progress": unit.progress,
        "state": unit.state.value,
        "assignment": unit.division.value,
    }


def serialize_economy(faction: Faction, counters: FactionEconomy) -> dict[str, Any]:
    return {
        "pp": counters.political_points,
        "mp": counters.manpower,
        "eq": counters.equipment,
        "color": faction.color,
    }


def build_state(ctx: MatchContext) -> dict[str, Any]:
    """Snapshot of the match in stateUpdate shape."""
    return {
        "type": STATE_UPDATE,
        "tick_number": ctx.tick,
        "cells": [serialize_cell(c) for c in ctx.world],
        "units": [serialize_unit(u) for u in ctx.units],
        "economies": {
            faction.value: serialize_economy(faction, counters)
            for faction, counters in ctx.economy.factions.items()
        },
    }
