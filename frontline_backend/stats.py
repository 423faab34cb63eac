"""
Win statistics store.

The simulation never depends on this store: every read failure falls back
to zero wins for each faction and is only logged.
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from frontline_backend.game.world import Faction
from frontline_backend.models.stats import FactionStats

logger = logging.getLogger(__name__)


def default_stats() -> dict[str, int]:
    return {faction.value: 0 for faction in Faction}


class StatsStore:
    """Reads and updates per-faction win counts."""

    def __init__(self, db_session_factory) -> None:
        self._db_session_factory = db_session_factory

    async def fetch_stats(self) -> dict[str, int]:
        """Win count per faction; zeros if the database is unavailable."""
        stats = default_stats()
        try:
            async with self._db_session_factory() as db:
                result = await db.execute(select(FactionStats))
                for row in result.scalars().all():
                    if row.faction in stats:
                        stats[row.faction] = row.wins
        except (SQLAlchemyError, OSError) as e:
            logger.warning(f"Stats store unavailable, using defaults: {e}")
            return default_stats()
        return stats

    async def record_win(self, faction: Faction) -> bool:
        """Increment a faction's win count. Returns False if the write failed."""
        try:
            async with self._db_session_factory() as db:
                row = await db.get(FactionStats, faction.value)
                if row is None:
                    row = FactionStats(faction=faction.value, wins=0)
                    db.add(row)
                row.wins += 1
                await db.commit()
        except (SQLAlchemyError, OSError) as e:
            logger.warning(f"Failed to record win for {faction.value}: {e}")
            return False

        logger.info(f"Recorded win for {faction.value}")
        return True


# Global stats store instance
_store: StatsStore | None = None


def get_stats_store() -> StatsStore | None:
    """Get the global stats store instance."""
    return _store


def set_stats_store(store: StatsStore | None) -> None:
    """Set the global stats store instance."""
    global _store
    _store = store
