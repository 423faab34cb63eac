"""
Tests for the fallback AI.
"""
import random

import pytest

from frontline_backend.config import Settings
from frontline_backend.game.ai import run_fallback, staffed_divisions
from frontline_backend.game.match import new_match
from frontline_backend.game.roles import DIVISIONS, Role
from frontline_backend.game.units import UnitState
from frontline_backend.game.world import Faction


@pytest.fixture
def small_match():
    """A map small enough that every cell is within routing range."""
    settings = Settings(
        grid_width=10,
        grid_height=6,
        initial_units_per_faction=0,
        ai_move_chance=1.0,
    )
    return new_match(settings, random.Random(5))


class TestStaffedDivisions:
    """Tests for staffed_divisions."""

    def test_empty_roster(self, small_match):
        assert staffed_divisions(small_match) == set()

    def test_supreme_staffs_all_divisions(self, small_match, make_player):
        small_match.join(make_player(Faction.KIN, Role.SUPREME))
        assert staffed_divisions(small_match) == {(Faction.KIN, d) for d in DIVISIONS}

    def test_marshal_staffs_one_division(self, small_match, make_player):
        small_match.join(make_player(Faction.TAK, Role.MARSHAL_4))
        assert staffed_divisions(small_match) == {(Faction.TAK, Role.MARSHAL_4)}

    def test_production_staffs_nothing(self, small_match, make_player):
        small_match.join(make_player(Faction.KIN, Role.PRODUCTION))
        assert staffed_divisions(small_match) == set()


class TestRunFallback:
    """Tests for run_fallback."""

    def test_unattended_units_advance_on_enemy_home_column(self, small_match):
        kin = small_match.spawn_unit(Faction.KIN, 2, 2, "inf")
        tak = small_match.spawn_unit(Faction.TAK, 7, 3, "inf")
        assert run_fallback(small_match) == 2
        assert kin.state is UnitState.MOVING
        assert kin.path[-1].q == 8
        assert tak.path[-1].q == 1

    def test_zero_chance_issues_nothing(self, make_player):
        settings = Settings(grid_width=10, grid_height=6, initial_units_per_faction=0, ai_move_chance=0.0)
        match = new_match(settings, random.Random(5))
        unit = match.spawn_unit(Faction.KIN, 2, 2, "inf")
        assert run_fallback(match) == 0
        assert unit.state is UnitState.IDLE

    def test_supreme_suppresses_own_faction_only(self, small_match, make_player):
        small_match.join(make_player(Faction.KIN, Role.SUPREME))
        kin = small_match.spawn_unit(Faction.KIN, 2, 2, "inf")
        tak = small_match.spawn_unit(Faction.TAK, 7, 3, "inf")
        assert run_fallback(small_match) == 1
        assert kin.state is UnitState.IDLE
        assert tak.state is UnitState.MOVING

    def test_marshal_suppresses_own_division_only(self, small_match, make_player):
        small_match.join(make_player(Faction.KIN, Role.MARSHAL_1))
        first = small_match.spawn_unit(Faction.KIN, 2, 2, "inf")
        second = small_match.spawn_unit(Faction.KIN, 2, 3, "inf")
        assert run_fallback(small_match) == 1
        assert first.state is UnitState.IDLE
        assert second.state is UnitState.MOVING

    def test_busy_units_keep_their_orders(self, small_match):
        unit = small_match.spawn_unit(Faction.KIN, 2, 2, "inf")
        unit.assign_path([small_match.world.cell(3, 2)])
        assert run_fallback(small_match) == 0
        assert [c.coords for c in unit.path] == [(3, 2)]

    def test_unreachable_target_leaves_unit_idle(self):
        """Home column 18 is more than 16 steps from column 0."""
        settings = Settings(initial_units_per_faction=0, ai_move_chance=1.0)
        match = new_match(settings, random.Random(5))
        unit = match.spawn_unit(Faction.KIN, 0, 0, "inf")
        assert run_fallback(match) == 0
        assert unit.state is UnitState.IDLE
