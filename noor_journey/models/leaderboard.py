"""Leaderboard row model. Derived on every read, never stored."""

from __future__ import annotations

from typing import Any, Dict

from sqlmodel import SQLModel

from .progress import Position


class LeaderboardEntry(SQLModel):
    rank: int
    member: str
    position: Position

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rank": self.rank,
            "name": self.member,
            "juz": self.position.juz,
            "surah": self.position.surah,
            "ayah": self.position.ayah,
        }


__all__ = ["LeaderboardEntry"]
