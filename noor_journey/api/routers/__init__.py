"""Aggregate API routers."""

from fastapi import APIRouter

from .admin import router as admin_router
from .analytics import router as analytics_router
from .events import router as events_router
from .leaderboard import router as leaderboard_router
from .members import router as members_router
from .progress import router as progress_router
from .system import router as system_router

ALL_ROUTERS: tuple[APIRouter, ...] = (
    system_router,
    members_router,
    progress_router,
    leaderboard_router,
    analytics_router,
    admin_router,
    events_router,
)

__all__ = ["ALL_ROUTERS"]
