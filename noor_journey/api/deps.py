"""Request-scoped accessors for the services attached to ``app.state``."""

from __future__ import annotations

from typing import Callable

from fastapi import Depends, Request

from ..services.credentials import CredentialStore
from ..services.pin_gate import PinGate
from ..services.progress_store import ProgressStore
from ..services.roster import Roster
from ..services.sync import SyncNotifier

GATE_SESSION_KEY = "gate"


def get_roster(request: Request) -> Roster:
    return request.app.state.roster


def get_progress_store(request: Request) -> ProgressStore:
    return request.app.state.progress_store


def get_credentials(request: Request) -> CredentialStore:
    return request.app.state.credentials


def get_notifier(request: Request) -> SyncNotifier:
    return request.app.state.notifier


def get_clock(request: Request) -> Callable[[], int]:
    return request.app.state.clock


def get_gate(
    request: Request,
    roster: Roster = Depends(get_roster),
    credentials: CredentialStore = Depends(get_credentials),
) -> PinGate:
    """Rebuild this browser session's PIN gate from the signed cookie."""

    return PinGate.from_session(request.session.get(GATE_SESSION_KEY), roster, credentials)


def store_gate(request: Request, gate: PinGate) -> None:
    request.session[GATE_SESSION_KEY] = gate.to_session()


__all__ = [
    "GATE_SESSION_KEY",
    "get_clock",
    "get_credentials",
    "get_gate",
    "get_notifier",
    "get_progress_store",
    "get_roster",
    "store_gate",
]
