"""
SQLAlchemy models for Frontline Backend.
"""

from frontline_backend.models.stats import FactionStats

__all__ = ["FactionStats"]
