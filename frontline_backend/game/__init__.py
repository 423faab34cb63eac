"""
Simulation core for Frontline Backend.
"""

from frontline_backend.game.commands import apply_command
from frontline_backend.game.match import MatchContext, new_match
from frontline_backend.game.simulation import StepReport, advance
from frontline_backend.game.snapshot import build_state

__all__ = [
    "MatchContext",
    "StepReport",
    "advance",
    "apply_command",
    "build_state",
    "new_match",
]
