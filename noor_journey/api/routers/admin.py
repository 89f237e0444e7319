"""Admin weekly report."""

from __future__ import annotations

import secrets
from typing import Any, Callable, Dict

import structlog
from fastapi import APIRouter, Depends, Request

from ...core.errors import InvalidAdminPassword
from ...services.progress_store import ProgressStore
from ...services.reports import build_weekly_report
from ..deps import get_clock, get_progress_store

router = APIRouter(prefix="/admin", tags=["admin"])

logger = structlog.get_logger(__name__)


@router.post("/report")
def weekly_report(
    body: Dict[str, Any],
    request: Request,
    store: ProgressStore = Depends(get_progress_store),
    clock: Callable[[], int] = Depends(get_clock),
):
    """Generate the shareable weekly report."""

    password = str(body.get("password") or "")
    expected = request.app.state.admin_password
    if not secrets.compare_digest(password.encode("utf-8"), expected.encode("utf-8")):
        raise InvalidAdminPassword()

    now = clock()
    report = build_weekly_report(store.snapshot(), now)
    logger.info("weekly_report_generated")
    return {"generatedAt": now, "report": report}


__all__ = ["router"]
