"""Database and domain model exports."""

from .credential import FamilyPin
from .leaderboard import LeaderboardEntry
from .progress import Position, ProgressEntry, ProgressRecord

__all__ = [
    "FamilyPin",
    "LeaderboardEntry",
    "Position",
    "ProgressEntry",
    "ProgressRecord",
]
