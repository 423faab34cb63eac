"""Per-faction resource counters."""

from dataclasses import dataclass

from frontline_backend.config import Settings
from frontline_backend.game.world import Faction


@dataclass
class FactionEconomy:
    """Political points, manpower and equipment of one faction."""

    political_points: float
    manpower: float
    equipment: float

    def can_afford(self, manpower: float, equipment: float) -> bool:
        return self.manpower >= manpower and self.equipment >= equipment

    def debit(self, manpower: float, equipment: float) -> bool:
        """Subtract a cost. Leaves the counters untouched and returns False if short."""
        if not self.can_afford(manpower, equipment):
            return False
        self.manpower -= manpower
        self.equipment -= equipment
        return True


class Economy:
    """Resource counters for every faction, with per-tick accrual."""

    def __init__(self, settings: Settings):
        self._pp_rate = settings.political_points_per_tick
        self._mp_rate = settings.manpower_per_tick
        self._eq_rate = settings.equipment_per_tick
        self.factions: dict[Faction, FactionEconomy] = {
            faction: FactionEconomy(
                political_points=settings.starting_political_points,
                manpower=settings.starting_manpower,
                equipment=settings.starting_equipment,
            )
            for faction in Faction
        }

    def __getitem__(self, faction: Faction) -> FactionEconomy:
        return self.factions[faction]

    def accrue(self) -> None:
        for counters in self.factions.values():
            counters.political_points += self._pp_rate
            counters.manpower += self._mp_rate
            counters.equipment += self._eq_rate
