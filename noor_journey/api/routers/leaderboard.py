"""Leaderboard endpoints."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ...services.progress_store import ProgressStore
from ...services.ranking import rank, truncate
from ..deps import get_progress_store

router = APIRouter(tags=["leaderboard"])


@router.get("/leaderboard")
def get_leaderboard(
    limit: Optional[int] = Query(default=None, ge=0),
    store: ProgressStore = Depends(get_progress_store),
):
    """Ranked members; ``limit`` trims the list for compact displays."""

    entries = rank(store.snapshot())
    return {
        "total": len(entries),
        "entries": [entry.to_dict() for entry in truncate(entries, limit)],
    }


__all__ = ["router"]
