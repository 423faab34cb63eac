"""
Grid world for the frontline simulation.
NO NETWORK DEPENDENCIES.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator


class Faction(str, Enum):
    """The two contesting factions."""

    KIN = "KIN"
    TAK = "TAK"

    @property
    def opponent(self) -> "Faction":
        return Faction.TAK if self is Faction.KIN else Faction.KIN

    @property
    def color(self) -> str:
        return FACTION_COLORS[self]


FACTION_COLORS = {
    Faction.KIN: "#e67e22",
    Faction.TAK: "#27ae60",
}


@dataclass
class Cell:
    """A single grid location. Only the owner changes during a match."""

    id: int
    q: int
    r: int
    owner: Faction

    @property
    def coords(self) -> tuple[int, int]:
        return (self.q, self.r)


class GridWorld:
    """
    Rectangular map of cells with odd-row hex-style adjacency.

    Coordinate system:
    - (0, 0) is top-left
    - q increases to the right (column)
    - r increases downward (row)
    - odd rows are shifted right, so diagonal neighbours depend on row parity
    """

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        self._cells: dict[tuple[int, int], Cell] = {}
        self._cells_by_id: dict[int, Cell] = {}

        # Column-major ids; left half belongs to KIN, right half to TAK
        next_id = 0
        for q in range(width):
            owner = Faction.KIN if q < width / 2 else Faction.TAK
            for r in range(height):
                cell = Cell(id=next_id, q=q, r=r, owner=owner)
                self._cells[(q, r)] = cell
                self._cells_by_id[next_id] = cell
                next_id += 1

    def __iter__(self) -> Iterator[Cell]:
        return iter(self._cells_by_id.values())

    def __len__(self) -> int:
        return len(self._cells_by_id)

    def in_bounds(self, q: int, r: int) -> bool:
        """Check if coordinates are within grid bounds."""
        return 0 <= q < self.width and 0 <= r < self.height

    def cell(self, q: int, r: int) -> Cell | None:
        """Get cell at coordinates, or None if out of bounds."""
        return self._cells.get((q, r))

    def cell_by_id(self, cell_id: int) -> Cell | None:
        return self._cells_by_id.get(cell_id)

    def neighbors(self, cell: Cell) -> list[Cell]:
        """
        Return the in-bounds neighbours of a cell.
        Horizontal neighbours first, then straight up/down, then the
        parity-dependent diagonal pair.
        """
        q, r = cell.q, cell.r
        shift = 1 if r % 2 else -1
        candidates = (
            (q + 1, r),
            (q - 1, r),
            (q, r + 1),
            (q, r - 1),
            (q + shift, r + 1),
            (q + shift, r - 1),
        )
        result = []
        for cq, cr in candidates:
            neighbor = self._cells.get((cq, cr))
            if neighbor is not None:
                result.append(neighbor)
        return result

    def conquer(self, cell: Cell, faction: Faction) -> bool:
        """
        Hand a cell to the faction that just moved into it.
        Returns True if the owner changed.
        """
        if cell.owner == faction:
            return False
        cell.owner = faction
        return True

    def home_column(self, faction: Faction, offset: int) -> int:
        """Column `offset` steps in from the faction's own map edge."""
        if faction is Faction.KIN:
            return offset
        return self.width - 1 - offset

    def owned_by(self, faction: Faction) -> list[Cell]:
        return [c for c in self._cells_by_id.values() if c.owner == faction]
