"""
Debug API routes for Frontline Backend.
All endpoints require DEBUG_MODE to be enabled.
"""

from typing import Annotated, Any
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from frontline_backend.config import Settings, get_settings
from frontline_backend.game import build_state
from frontline_backend.game.world import Faction
from frontline_backend.stats import get_stats_store
from frontline_backend.tick_engine import TickEngine, get_tick_engine

router = APIRouter()


async def require_debug_mode(
    settings: Annotated[Settings, Depends(get_settings)],
) -> None:
    """Reject debug requests unless debug mode is on."""
    if not settings.debug_mode:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Debug mode is disabled",
        )


def _require_engine() -> TickEngine:
    engine = get_tick_engine()
    if engine is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Tick engine not initialized",
        )
    return engine


# Response schemas
class TickStatusResponse(BaseModel):
    """Response schema for tick engine status."""

    tick_number: int
    is_running: bool
    is_paused: bool
    tick_rate_ms: int
    match_active: bool
    last_tick_ms: float | None


class ConnectionEntry(BaseModel):
    """Info about a connected client."""

    session_id: UUID
    name: str | None
    faction: str | None
    role: str | None


class ConnectionsResponse(BaseModel):
    """Response schema for connected clients list."""

    connections: list[ConnectionEntry]


class EndMatchRequest(BaseModel):
    """Request schema for ending the current match."""

    winner: Faction


# Routes
@router.get("/tick/status", response_model=TickStatusResponse, dependencies=[Depends(require_debug_mode)])
async def get_tick_status(
    settings: Annotated[Settings, Depends(get_settings)],
) -> TickStatusResponse:
    """
    Get the current tick engine status.
    """
    engine = get_tick_engine()

    if engine is None:
        return TickStatusResponse(
            tick_number=0,
            is_running=False,
            is_paused=False,
            tick_rate_ms=settings.tick_rate_ms,
            match_active=False,
            last_tick_ms=None,
        )

    recent = engine.get_recent_stats()
    return TickStatusResponse(
        tick_number=engine.tick_number,
        is_running=engine.is_running,
        is_paused=engine.is_paused,
        tick_rate_ms=settings.tick_rate_ms,
        match_active=engine.match is not None,
        last_tick_ms=recent[-1].duration_ms if recent else None,
    )


@router.post("/tick/pause", dependencies=[Depends(require_debug_mode)])
async def pause_tick_engine() -> dict[str, Any]:
    """
    Pause the tick engine.
    """
    engine = _require_engine()
    engine.pause()
    return {"message": "Tick engine paused", "tick_number": engine.tick_number}


@router.post("/tick/resume", dependencies=[Depends(require_debug_mode)])
async def resume_tick_engine() -> dict[str, Any]:
    """
    Resume the tick engine.
    """
    engine = _require_engine()
    engine.resume()
    return {"message": "Tick engine resumed", "tick_number": engine.tick_number}


@router.post("/tick/step", dependencies=[Depends(require_debug_mode)])
async def step_tick_engine() -> dict[str, Any]:
    """
    Execute a single tick while paused.
    """
    engine = _require_engine()

    if not engine.is_paused:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Tick engine must be paused to step manually",
        )

    await engine.step()
    return {"message": "Tick executed", "tick_number": engine.tick_number}


@router.get("/state", dependencies=[Depends(require_debug_mode)])
async def get_match_state() -> dict[str, Any]:
    """
    Inspect the full state of the active match.
    """
    engine = _require_engine()
    if engine.match is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No active match",
        )
    return build_state(engine.match)


@router.post("/match/end", dependencies=[Depends(require_debug_mode)])
async def end_match(request: EndMatchRequest) -> dict[str, Any]:
    """
    Record a win for a faction and clear the match.
    The next join starts a new one.
    """
    engine = _require_engine()
    if engine.match is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No active match",
        )

    store = get_stats_store()
    recorded = store is not None and await store.record_win(request.winner)
    engine.end_match()
    return {"winner": request.winner.value, "recorded": recorded}


@router.get("/connections", response_model=ConnectionsResponse, dependencies=[Depends(require_debug_mode)])
async def get_connections() -> ConnectionsResponse:
    """
    List all connected clients and the player they joined as.
    """
    from frontline_backend.websocket import get_connection_manager

    manager = get_connection_manager()
    if manager is None:
        return ConnectionsResponse(connections=[])

    connections = []
    for session_id, info in manager.get_all_connections().items():
        player = info.player
        connections.append(
            ConnectionEntry(
                session_id=session_id,
                name=player.name if player else None,
                faction=player.faction.value if player else None,
                role=player.role.value if player else None,
            )
        )

    return ConnectionsResponse(connections=connections)
