"""WebSocket feed of progress change signals.

Protocol:
    Server -> Client:
        {"type": "connected", "revision": n}
        {"type": "progress_changed", "revision": n}
        {"type": "pong"}
    Client -> Server:
        "ping" or {"action": "ping"}

Signals carry no data; clients refetch the views they display.
"""

from __future__ import annotations

import asyncio
import json
import uuid

import structlog
from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from ...services.sync import SyncNotifier

router = APIRouter(tags=["events"])

logger = structlog.get_logger(__name__)


def _is_ping(raw: str) -> bool:
    if raw.strip().lower() == "ping":
        return True
    try:
        message = json.loads(raw)
    except json.JSONDecodeError:
        return False
    return isinstance(message, dict) and message.get("action") == "ping"


async def _answer_pings(websocket: WebSocket) -> None:
    """Read client messages until the socket closes."""
    try:
        while True:
            raw = await websocket.receive_text()
            if _is_ping(raw):
                await websocket.send_json({"type": "pong"})
    except WebSocketDisconnect:
        return


@router.websocket("/ws/progress")
async def progress_feed(websocket: WebSocket) -> None:
    notifier: SyncNotifier = websocket.app.state.notifier
    loop = asyncio.get_running_loop()
    changed = asyncio.Event()

    # Writes may land on threadpool workers; hop back onto this loop.
    unsubscribe = notifier.subscribe(lambda: loop.call_soon_threadsafe(changed.set))
    conn_id = str(uuid.uuid4())

    await websocket.accept()
    logger.info("ws_connected", conn_id=conn_id)
    receiver = asyncio.create_task(_answer_pings(websocket))
    try:
        await websocket.send_json({"type": "connected", "revision": notifier.revision})
        while True:
            waiter = asyncio.create_task(changed.wait())
            done, _ = await asyncio.wait(
                {waiter, receiver}, return_when=asyncio.FIRST_COMPLETED
            )
            if receiver in done:
                waiter.cancel()
                break
            changed.clear()
            await websocket.send_json(
                {"type": "progress_changed", "revision": notifier.revision}
            )
    except WebSocketDisconnect:
        pass
    finally:
        unsubscribe()
        receiver.cancel()
        logger.info("ws_disconnected", conn_id=conn_id)


__all__ = ["router"]
