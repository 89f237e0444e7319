"""Roster listing and the per-session PIN gate."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Request

from ...services.pin_gate import PinGate
from ...services.roster import Roster
from ..deps import get_gate, get_roster, store_gate

router = APIRouter(tags=["members"])


def _text(body: Dict[str, Any], field: str) -> str:
    value = body.get(field)
    if value is None:
        return ""
    return str(value)


@router.get("/members")
def list_members(roster: Roster = Depends(get_roster)):
    """Roster in display order."""

    return {"members": list(roster)}


@router.get("/gate")
def gate_status(gate: PinGate = Depends(get_gate)):
    return gate.describe()


@router.post("/gate/select")
def select_member(
    body: Dict[str, Any], request: Request, gate: PinGate = Depends(get_gate)
):
    """Choose which family member this session is acting as."""

    name = _text(body, "name").strip()
    if not name:
        raise HTTPException(400, "Please select a family member")
    try:
        gate.choose_member(name)
    finally:
        store_gate(request, gate)
    return gate.describe()


@router.post("/gate/lookup")
def lookup_credential(request: Request, gate: PinGate = Depends(get_gate)):
    """Decide between first-time PIN setup and PIN entry."""

    try:
        gate.submit_credential_lookup()
    finally:
        store_gate(request, gate)
    return gate.describe()


@router.post("/gate/pin/setup")
def setup_pin(body: Dict[str, Any], request: Request, gate: PinGate = Depends(get_gate)):
    """Create the chosen member's PIN and sign them in."""

    try:
        gate.set_first_pin(_text(body, "pin"), _text(body, "confirm_pin"))
    finally:
        store_gate(request, gate)
    return gate.describe()


@router.post("/gate/pin")
def submit_pin(body: Dict[str, Any], request: Request, gate: PinGate = Depends(get_gate)):
    try:
        gate.submit_pin(_text(body, "pin"))
    finally:
        store_gate(request, gate)
    return gate.describe()


@router.post("/gate/reset")
def reset_gate(request: Request, gate: PinGate = Depends(get_gate)):
    """Switch family member."""

    gate.reset()
    store_gate(request, gate)
    return gate.describe()


__all__ = ["router"]
