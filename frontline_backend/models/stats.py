"""
Win statistics model for Frontline Backend.
"""

from datetime import datetime

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from frontline_backend.database import Base


class FactionStats(Base):
    """
    Persisted win count for one faction.
    One row per faction, created on the first recorded win.
    """

    __tablename__ = "faction_stats"

    faction: Mapped[str] = mapped_column(
        String(16),
        primary_key=True,
    )
    wins: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<FactionStats(faction={self.faction}, wins={self.wins})>"
