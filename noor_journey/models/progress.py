"""Progress models: the stored row and the domain record it serialises."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Tuple

from sqlmodel import Field as ORMField, SQLModel

from ..core.time import utcnow

JUZ_MIN, JUZ_MAX = 0, 30
SURAH_MIN, SURAH_MAX = 1, 114
AYAH_MIN = 1


class Position(SQLModel):
    """A place in the memorisation material."""

    juz: int = ORMField(default=JUZ_MIN, ge=JUZ_MIN, le=JUZ_MAX)
    surah: int = ORMField(default=SURAH_MIN, ge=SURAH_MIN, le=SURAH_MAX)
    ayah: int = ORMField(default=AYAH_MIN, ge=AYAH_MIN)

    def sort_key(self) -> Tuple[int, int, int]:
        return (self.juz, self.surah, self.ayah)


class ProgressRecord(SQLModel):
    """A member's position and the epoch-millisecond time it was written."""

    member: str
    position: Position
    last_updated: int

    @classmethod
    def default(cls, member: str, now: int) -> "ProgressRecord":
        return cls(member=member, position=Position(), last_updated=now)

    def to_storage(self) -> Dict[str, Any]:
        return {
            "juz": self.position.juz,
            "surah": self.position.surah,
            "ayah": self.position.ayah,
            "name": self.member,
            "lastUpdated": self.last_updated,
        }

    @classmethod
    def from_storage(cls, data: Dict[str, Any]) -> "ProgressRecord":
        return cls(
            member=data["name"],
            position=Position(juz=data["juz"], surah=data["surah"], ayah=data["ayah"]),
            last_updated=data["lastUpdated"],
        )

    def to_dict(self) -> Dict[str, Any]:
        return self.to_storage()


class ProgressEntry(SQLModel, table=True):
    """Persisted progress payload keyed by ``progress_<member key>``."""

    __tablename__ = "progress_entry"

    key: str = ORMField(primary_key=True, max_length=120)
    payload: str
    updated_at: datetime = ORMField(default_factory=utcnow)


__all__ = [
    "AYAH_MIN",
    "JUZ_MAX",
    "JUZ_MIN",
    "Position",
    "ProgressEntry",
    "ProgressRecord",
    "SURAH_MAX",
    "SURAH_MIN",
]
