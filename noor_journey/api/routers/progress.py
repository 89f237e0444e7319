"""Progress read and write endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ...models import Position
from ...services.pin_gate import PinGate
from ...services.progress_store import ProgressStore
from ..deps import get_gate, get_progress_store

router = APIRouter(tags=["progress"])


@router.get("/progress")
def get_all_progress(store: ProgressStore = Depends(get_progress_store)):
    """Point-in-time snapshot of every member's record, in roster order."""

    snapshot = store.snapshot()
    return {"members": [record.to_dict() for record in snapshot.values()]}


@router.get("/progress/me")
def get_my_progress(
    gate: PinGate = Depends(get_gate),
    store: ProgressStore = Depends(get_progress_store),
):
    member = gate.require_authenticated()
    return store.read(member).to_dict()


@router.put("/progress/me")
def save_my_progress(
    position: Position,
    gate: PinGate = Depends(get_gate),
    store: ProgressStore = Depends(get_progress_store),
):
    """Overwrite the signed-in member's position."""

    member = gate.require_authenticated()
    record = store.save(member, position)
    return {"ok": True, "record": record.to_dict()}


@router.delete("/progress/me")
def delete_my_progress(
    gate: PinGate = Depends(get_gate),
    store: ProgressStore = Depends(get_progress_store),
):
    """Reset the signed-in member's progress to the default position."""

    member = gate.require_authenticated()
    record = store.delete(member)
    return {"ok": True, "record": record.to_dict()}


@router.get("/progress/{member_name}")
def get_member_progress(member_name: str, store: ProgressStore = Depends(get_progress_store)):
    return store.read(member_name).to_dict()


__all__ = ["router"]
