"""
Frontline Backend - authoritative server for a two-faction real-time strategy contest.
"""

__version__ = "0.1.0"
