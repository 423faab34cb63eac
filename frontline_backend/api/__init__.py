"""
REST API routes for Frontline Backend.
"""

from fastapi import APIRouter

from frontline_backend.api.debug import router as debug_router
from frontline_backend.api.stats import router as stats_router

api_router = APIRouter()

api_router.include_router(stats_router, prefix="/stats", tags=["stats"])
api_router.include_router(debug_router, prefix="/debug", tags=["debug"])

__all__ = ["api_router"]
