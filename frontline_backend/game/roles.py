"""Player roles and unit divisions."""

from enum import Enum

DIVISION_COUNT = 6


class Role(str, Enum):
    """
    Closed set of roles a player can hold within a faction.
    The Marshal roles double as unit division tags.
    """

    SUPREME = "Supreme"
    PRODUCTION = "Production"
    MARSHAL_1 = "Marshal_1"
    MARSHAL_2 = "Marshal_2"
    MARSHAL_3 = "Marshal_3"
    MARSHAL_4 = "Marshal_4"
    MARSHAL_5 = "Marshal_5"
    MARSHAL_6 = "Marshal_6"

    @classmethod
    def marshal(cls, number: int) -> "Role":
        """Division role for a 1-based division number."""
        return cls(f"Marshal_{number}")

    @property
    def is_division(self) -> bool:
        return self in DIVISIONS


DIVISIONS: tuple[Role, ...] = tuple(Role.marshal(n) for n in range(1, DIVISION_COUNT + 1))


def division_for_spawn(spawn_index: int) -> Role:
    """Round-robin division for the Nth unit spawned (0-indexed)."""
    return DIVISIONS[spawn_index % DIVISION_COUNT]
