"""
Frontline Backend application: REST routes, the /ws game socket and the
static client, wired to one tick engine per process.
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, WebSocket, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError

from frontline_backend import __version__
from frontline_backend.api import api_router
from frontline_backend.config import Settings, get_settings
from frontline_backend.database import async_session_factory, close_db, init_db
from frontline_backend.game.protocol import INIT_STATS
from frontline_backend.stats import StatsStore, default_stats, get_stats_store, set_stats_store
from frontline_backend.tick_engine import TickEngine, get_tick_engine, set_tick_engine
from frontline_backend.websocket.handler import WebSocketHandler
from frontline_backend.websocket.manager import (
    ConnectionInfo,
    ConnectionManager,
    get_connection_manager,
    set_connection_manager,
)

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


async def _open_stats_store() -> None:
    """Set up the win stats store. A database failure here is not fatal."""
    try:
        await init_db()
    except (SQLAlchemyError, OSError) as e:
        logger.warning(f"Stats database unavailable, win counts default to zero: {e}")
    set_stats_store(StatsStore(async_session_factory))


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = get_settings()

    await _open_stats_store()
    set_connection_manager(ConnectionManager(send_timeout=settings.send_timeout_seconds))

    tick_engine = TickEngine(tick_rate_ms=settings.tick_rate_ms, settings=settings)
    set_tick_engine(tick_engine)
    await tick_engine.start()
    logger.info(
        f"Frontline Backend ready on a {settings.grid_width}x{settings.grid_height} grid"
    )

    yield

    logger.info("Shutting down...")
    await tick_engine.stop()
    for reset in (set_tick_engine, set_connection_manager, set_stats_store):
        reset(None)
    await close_db()
    logger.info("Frontline Backend stopped.")


app = FastAPI(
    title="Frontline Backend",
    description="Authoritative tick-based server for a two-faction real-time strategy contest",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(api_router, prefix="/api")


@app.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    """
    Game socket. Every client gets initStats right away and then receives
    each tick's stateUpdate, joined or not.
    """
    manager = get_connection_manager()
    if manager is None:
        await websocket.close(code=status.WS_1011_INTERNAL_ERROR)
        return

    await websocket.accept()

    # initStats goes out before the socket is registered for broadcasts
    store = get_stats_store()
    wins = default_stats() if store is None else await store.fetch_stats()
    await websocket.send_json({"type": INIT_STATS, "wins": wins})

    info = ConnectionInfo(websocket=websocket)
    await manager.connect(info)
    await WebSocketHandler(manager=manager, info=info).handle_connection()


@app.get("/health")
async def health_check():
    engine = get_tick_engine()
    return {
        "status": "healthy",
        "tick_engine_running": bool(engine and engine.is_running),
        "tick_number": engine.tick_number if engine else 0,
        "match_active": bool(engine and engine.match is not None),
    }


# Mounted last so /api, /ws and /health win over static paths
_static_dir = get_settings().static_dir
if os.path.isdir(_static_dir):
    app.mount("/", StaticFiles(directory=_static_dir, html=True), name="static")


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run("frontline_backend.main:app", host=settings.host, port=settings.port)
