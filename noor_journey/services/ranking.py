"""Leaderboard ordering.

Members are ranked by juz, then surah, then ayah, all descending. Ties keep
their input (roster) order and still receive distinct, consecutive ranks.
"""

from __future__ import annotations

from typing import List, Mapping, Optional

from ..models import LeaderboardEntry, ProgressRecord


def rank(records: Mapping[str, ProgressRecord]) -> List[LeaderboardEntry]:
    """Return every member as a 1-based leaderboard entry."""

    # sorted() is stable, so equal keys stay in mapping order.
    ordered = sorted(
        records.items(),
        key=lambda item: item[1].position.sort_key(),
        reverse=True,
    )
    return [
        LeaderboardEntry(rank=index, member=member, position=record.position)
        for index, (member, record) in enumerate(ordered, start=1)
    ]


def truncate(entries: List[LeaderboardEntry], limit: Optional[int]) -> List[LeaderboardEntry]:
    if limit is None or limit < 0:
        return list(entries)
    return entries[:limit]


__all__ = ["rank", "truncate"]
