"""Activity and progress classification for analytics and status views."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from sqlmodel import SQLModel

from ..models import LeaderboardEntry, Position, ProgressRecord
from .ranking import rank

MS_PER_DAY = 86_400_000
INACTIVE_AFTER_DAYS = 7
BEHIND_BELOW_JUZ = 10
TOP_PERFORMER_COUNT = 3

ANALYTICS_BEHIND_LIMIT = 5
ANALYTICS_INACTIVE_LIMIT = 5


def elapsed_days(now: int, last_updated: int) -> int:
    """Whole days between two epoch-millisecond timestamps (floored)."""
    return (now - last_updated) // MS_PER_DAY


def is_active(record: ProgressRecord, now: int) -> bool:
    return elapsed_days(now, record.last_updated) < INACTIVE_AFTER_DAYS


def is_inactive(record: ProgressRecord, now: int) -> bool:
    return not is_active(record, now)


def is_behind(record: ProgressRecord) -> bool:
    return record.position.juz < BEHIND_BELOW_JUZ


def top_performers(
    leaderboard: List[LeaderboardEntry], limit: int = TOP_PERFORMER_COUNT
) -> List[LeaderboardEntry]:
    """Leading entries with at least one juz, in leaderboard order."""
    return [entry for entry in leaderboard if entry.position.juz > 0][:limit]


class MemberStatus(SQLModel):
    member: str
    position: Position
    last_updated: int
    days_since_update: int
    active: bool
    behind: bool

    @classmethod
    def from_record(cls, record: ProgressRecord, now: int) -> "MemberStatus":
        return cls(
            member=record.member,
            position=record.position,
            last_updated=record.last_updated,
            days_since_update=elapsed_days(now, record.last_updated),
            active=is_active(record, now),
            behind=is_behind(record),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.member,
            "juz": self.position.juz,
            "surah": self.position.surah,
            "ayah": self.position.ayah,
            "lastUpdated": self.last_updated,
            "daysSinceUpdate": self.days_since_update,
            "active": self.active,
            "behind": self.behind,
        }


class ActivitySummary(SQLModel):
    """Everything the analytics, status and report views derive from a snapshot."""

    generated_at: int
    statuses: List[MemberStatus]
    active: List[MemberStatus]
    inactive: List[MemberStatus]
    behind: List[MemberStatus]
    leaderboard: List[LeaderboardEntry]
    top_performers: List[LeaderboardEntry]


def summarize(records: Mapping[str, ProgressRecord], now: int) -> ActivitySummary:
    """Classify a full snapshot.

    ``active`` keeps roster order, ``inactive`` is sorted by days since the
    last update (longest first) and ``behind`` by juz (lowest first). Both
    sorts are stable.
    """

    statuses = [MemberStatus.from_record(record, now) for record in records.values()]
    leaderboard = rank(records)
    return ActivitySummary(
        generated_at=now,
        statuses=statuses,
        active=[status for status in statuses if status.active],
        inactive=sorted(
            (status for status in statuses if not status.active),
            key=lambda status: status.days_since_update,
            reverse=True,
        ),
        behind=sorted(
            (status for status in statuses if status.behind),
            key=lambda status: status.position.juz,
        ),
        leaderboard=leaderboard,
        top_performers=top_performers(leaderboard),
    )


def analytics_view(
    summary: ActivitySummary,
    *,
    behind_limit: Optional[int] = ANALYTICS_BEHIND_LIMIT,
    inactive_limit: Optional[int] = ANALYTICS_INACTIVE_LIMIT,
) -> Dict[str, Any]:
    return {
        "generatedAt": summary.generated_at,
        "behind": [status.to_dict() for status in summary.behind[:behind_limit]],
        "inactive": [status.to_dict() for status in summary.inactive[:inactive_limit]],
        "topPerformers": [entry.to_dict() for entry in summary.top_performers],
    }


def status_view(summary: ActivitySummary) -> Dict[str, Any]:
    return {
        "generatedAt": summary.generated_at,
        "activeCount": len(summary.active),
        "inactiveCount": len(summary.inactive),
        "active": [status.to_dict() for status in summary.active],
        "inactive": [status.to_dict() for status in summary.inactive],
    }


__all__ = [
    "ANALYTICS_BEHIND_LIMIT",
    "ANALYTICS_INACTIVE_LIMIT",
    "ActivitySummary",
    "BEHIND_BELOW_JUZ",
    "INACTIVE_AFTER_DAYS",
    "MS_PER_DAY",
    "MemberStatus",
    "TOP_PERFORMER_COUNT",
    "analytics_view",
    "elapsed_days",
    "is_active",
    "is_behind",
    "is_inactive",
    "summarize",
    "status_view",
    "top_performers",
]
