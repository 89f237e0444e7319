"""Service layer: roster, stores, gate, ranking, activity, sync and reports."""

from .activity import summarize
from .credentials import MemoryCredentialStore, SQLCredentialStore
from .pin_gate import GateState, PinGate
from .progress_store import MemoryProgressStore, SQLProgressStore
from .ranking import rank
from .reports import build_weekly_report
from .roster import Roster, member_key
from .sync import SyncNotifier, run_poller

__all__ = [
    "GateState",
    "MemoryCredentialStore",
    "MemoryProgressStore",
    "PinGate",
    "Roster",
    "SQLCredentialStore",
    "SQLProgressStore",
    "SyncNotifier",
    "build_weekly_report",
    "member_key",
    "rank",
    "run_poller",
    "summarize",
]
