"""Change propagation between the progress store and derived views.

The signal carries no data: whoever receives it re-reads the full snapshot.
Besides explicit notifications after each write, a poll task fires the same
signal on a fixed interval so views also pick up writes made by other
processes that share the database.
"""

from __future__ import annotations

import asyncio
import itertools
from typing import Callable, Dict

import structlog

logger = structlog.get_logger(__name__)

Callback = Callable[[], None]
Unsubscribe = Callable[[], None]


class SyncNotifier:
    """Level-triggered observer registry."""

    def __init__(self) -> None:
        self._subscribers: Dict[int, Callback] = {}
        self._ids = itertools.count(1)
        self._revision = 0

    @property
    def revision(self) -> int:
        """Number of signals fired so far."""
        return self._revision

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self, callback: Callback) -> Unsubscribe:
        token = next(self._ids)
        self._subscribers[token] = callback

        def unsubscribe() -> None:
            self._subscribers.pop(token, None)

        return unsubscribe

    def notify(self) -> int:
        """Fire the change signal; returns the new revision."""
        self._revision += 1
        for token, callback in list(self._subscribers.items()):
            try:
                callback()
            except Exception as exc:
                logger.warning(
                    "sync_subscriber_failed",
                    subscriber=token,
                    error=str(exc),
                    exc_info=exc,
                )
        return self._revision


async def run_poller(notifier: SyncNotifier, interval: float) -> None:
    """Fire ``notifier`` every ``interval`` seconds until cancelled."""

    logger.info("sync_poller_started", interval_seconds=interval)
    try:
        while True:
            await asyncio.sleep(interval)
            notifier.notify()
    except asyncio.CancelledError:
        logger.info("sync_poller_stopped")
        raise


__all__ = ["Callback", "SyncNotifier", "Unsubscribe", "run_poller"]
