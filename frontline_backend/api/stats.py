"""
Win statistics API routes for Frontline Backend.
"""

from fastapi import APIRouter
from pydantic import BaseModel

from frontline_backend.stats import default_stats, get_stats_store

router = APIRouter()


class StatsResponse(BaseModel):
    """Response schema for persisted win counts."""

    wins: dict[str, int]


@router.get("", response_model=StatsResponse)
async def get_stats() -> StatsResponse:
    """
    Get win counts per faction.
    Falls back to zeros when the stats store is unavailable.
    """
    store = get_stats_store()
    if store is None:
        return StatsResponse(wins=default_stats())
    return StatsResponse(wins=await store.fetch_stats())
