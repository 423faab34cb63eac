"""
Tick engine for Frontline Backend.
"""

from frontline_backend.tick_engine.engine import TickEngine, get_tick_engine, set_tick_engine

__all__ = ["TickEngine", "get_tick_engine", "set_tick_engine"]
