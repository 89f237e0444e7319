"""System-level API endpoints."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from ... import __version__
from ...services.activity import BEHIND_BELOW_JUZ, INACTIVE_AFTER_DAYS
from ...services.pin_gate import PIN_MIN_LENGTH
from ...services.roster import Roster
from ..deps import get_roster

router = APIRouter(tags=["system"])


@router.get("/health")
def health() -> Dict[str, bool]:
    """Simple readiness probe."""

    return {"ok": True}


@router.get("/healthz")
def healthz() -> JSONResponse:
    """Kubernetes-style readiness endpoint."""

    return JSONResponse({"ok": True})


@router.get("/config")
def get_config(request: Request, roster: Roster = Depends(get_roster)) -> Dict[str, Any]:
    """Expose frontend configuration values."""

    return {
        "version": __version__,
        "roster": list(roster),
        "poll_interval_seconds": request.app.state.poll_interval,
        "pin_min_length": PIN_MIN_LENGTH,
        "inactive_after_days": INACTIVE_AFTER_DAYS,
        "behind_below_juz": BEHIND_BELOW_JUZ,
    }


__all__ = ["router"]
