"""
WebSocket handling for Frontline Backend.
"""

from frontline_backend.websocket.manager import ConnectionManager, get_connection_manager

__all__ = ["ConnectionManager", "get_connection_manager"]
