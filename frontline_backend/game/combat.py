"""
Combat resolution between a moving unit and the enemy blocking its path.
"""

from dataclasses import dataclass

from frontline_backend.game.units import Unit

# The mover strikes harder than the defender answers.
ATTACKER_MULTIPLIER = 0.5
DEFENDER_MULTIPLIER = 0.2


@dataclass
class Engagement:
    """Damage exchanged in one tick of contact."""

    attacker_id: int
    defender_id: int
    damage_dealt: float
    damage_taken: float


def resolve_engagement(attacker: Unit, defender: Unit) -> Engagement:
    """
    Exchange damage between a mover and the enemy holding its next cell.
    Dead units are left in place; cleanup removes them at the end of the tick.
    """
    dealt = attacker.stats.attack * ATTACKER_MULTIPLIER
    taken = defender.stats.attack * DEFENDER_MULTIPLIER
    defender.hp -= dealt
    attacker.hp -= taken
    return Engagement(
        attacker_id=attacker.id,
        defender_id=defender.id,
        damage_dealt=dealt,
        damage_taken=taken,
    )
