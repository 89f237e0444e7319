"""Analytics and activity status endpoints."""

from __future__ import annotations

from typing import Callable

from fastapi import APIRouter, Depends

from ...services.activity import analytics_view, status_view, summarize
from ...services.progress_store import ProgressStore
from ..deps import get_clock, get_progress_store

router = APIRouter(tags=["analytics"])


@router.get("/analytics")
def get_analytics(
    store: ProgressStore = Depends(get_progress_store),
    clock: Callable[[], int] = Depends(get_clock),
):
    """Members behind, members inactive and the top performers."""

    return analytics_view(summarize(store.snapshot(), clock()))


@router.get("/status")
def get_status(
    store: ProgressStore = Depends(get_progress_store),
    clock: Callable[[], int] = Depends(get_clock),
):
    """Active and inactive members for this week."""

    return status_view(summarize(store.snapshot(), clock()))


__all__ = ["router"]
