"""Per-member progress persistence.

Every backend shares the same rules: unknown members are rejected before the
backend is touched, reads never fail (missing, unreadable or malformed
entries fall back to the default record), writes replace the whole record and
fire the sync notifier only once they have landed.
"""

from __future__ import annotations

import json
from typing import Callable, Dict, Iterable, Optional, Protocol

import structlog
from pydantic import ValidationError
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from ..core.errors import MalformedRecord, StorageUnavailable
from ..core.time import now_ms, utcnow
from ..models import Position, ProgressEntry, ProgressRecord
from .roster import Roster
from .sync import Callback, SyncNotifier, Unsubscribe

logger = structlog.get_logger(__name__)

Clock = Callable[[], int]


class ProgressStore(Protocol):
    roster: Roster

    def read(self, member: str) -> ProgressRecord: ...

    def save(self, member: str, position: Position) -> ProgressRecord: ...

    def delete(self, member: str) -> ProgressRecord: ...

    def snapshot(self) -> Dict[str, ProgressRecord]: ...

    def subscribe(self, callback: Callback) -> Unsubscribe: ...


def serialize_record(record: ProgressRecord) -> str:
    return json.dumps(record.to_storage(), separators=(",", ":"))


def deserialize_record(key: str, raw: str) -> ProgressRecord:
    """Parse a stored payload, raising ``MalformedRecord`` on any defect."""

    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise MalformedRecord(key, f"invalid JSON ({exc})") from exc
    if not isinstance(data, dict):
        raise MalformedRecord(key, "payload is not an object")
    try:
        return ProgressRecord.from_storage(data)
    except KeyError as exc:
        raise MalformedRecord(key, f"missing field {exc.args[0]!r}") from exc
    except (TypeError, ValidationError) as exc:
        raise MalformedRecord(key, str(exc)) from exc


class BaseProgressStore:
    """Shared read/save/delete semantics; subclasses supply raw key storage."""

    def __init__(
        self,
        roster: Roster,
        notifier: Optional[SyncNotifier] = None,
        *,
        clock: Clock = now_ms,
    ) -> None:
        self.roster = roster
        self.notifier = notifier or SyncNotifier()
        self._clock = clock

    # Backend hooks ----------------------------------------------------------
    def _load(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def _load_many(self, keys: Iterable[str]) -> Dict[str, str]:
        raise NotImplementedError

    def _store(self, key: str, payload: str) -> None:
        raise NotImplementedError

    def _remove(self, key: str) -> None:
        raise NotImplementedError

    # Public interface -------------------------------------------------------
    def read(self, member: str) -> ProgressRecord:
        key = self.roster.progress_key(member)
        try:
            raw = self._load(key)
        except StorageUnavailable as exc:
            logger.warning("progress_read_fallback", member=member, key=key, error=str(exc))
            return ProgressRecord.default(member, self._clock())
        return self._parse(member, key, raw)

    def save(self, member: str, position: Position) -> ProgressRecord:
        key = self.roster.progress_key(member)
        record = ProgressRecord(
            member=member,
            position=Position.model_validate(position.model_dump()),
            last_updated=self._clock(),
        )
        self._store(key, serialize_record(record))
        logger.info(
            "progress_saved",
            member=member,
            juz=record.position.juz,
            surah=record.position.surah,
            ayah=record.position.ayah,
        )
        self.notifier.notify()
        return record

    def delete(self, member: str) -> ProgressRecord:
        key = self.roster.progress_key(member)
        self._remove(key)
        logger.info("progress_deleted", member=member)
        self.notifier.notify()
        return ProgressRecord.default(member, self._clock())

    def snapshot(self) -> Dict[str, ProgressRecord]:
        """Every roster member's record, in roster order, from one read."""

        keys = {member: self.roster.progress_key(member) for member in self.roster}
        try:
            stored = self._load_many(keys.values())
        except StorageUnavailable as exc:
            logger.warning("progress_snapshot_fallback", error=str(exc))
            stored = {}
        return {
            member: self._parse(member, key, stored.get(key))
            for member, key in keys.items()
        }

    def subscribe(self, callback: Callback) -> Unsubscribe:
        return self.notifier.subscribe(callback)

    def _parse(self, member: str, key: str, raw: Optional[str]) -> ProgressRecord:
        if raw is None:
            return ProgressRecord.default(member, self._clock())
        try:
            record = deserialize_record(key, raw)
        except MalformedRecord as exc:
            logger.warning("progress_read_fallback", member=member, key=key, error=str(exc))
            return ProgressRecord.default(member, self._clock())
        if record.member != member:
            logger.warning(
                "progress_name_mismatch", member=member, key=key, stored_name=record.member
            )
            record = record.model_copy(update={"member": member})
        return record


class MemoryProgressStore(BaseProgressStore):
    """Dictionary-backed store for tests and single-process demos."""

    def __init__(
        self,
        roster: Roster,
        notifier: Optional[SyncNotifier] = None,
        *,
        clock: Clock = now_ms,
    ) -> None:
        super().__init__(roster, notifier, clock=clock)
        self.entries: Dict[str, str] = {}

    def _load(self, key: str) -> Optional[str]:
        return self.entries.get(key)

    def _load_many(self, keys: Iterable[str]) -> Dict[str, str]:
        return {key: self.entries[key] for key in keys if key in self.entries}

    def _store(self, key: str, payload: str) -> None:
        self.entries[key] = payload

    def _remove(self, key: str) -> None:
        self.entries.pop(key, None)


class SQLProgressStore(BaseProgressStore):
    """Store backed by the ``progress_entry`` table."""

    def __init__(
        self,
        roster: Roster,
        engine: Engine,
        notifier: Optional[SyncNotifier] = None,
        *,
        clock: Clock = now_ms,
    ) -> None:
        super().__init__(roster, notifier, clock=clock)
        self.engine = engine

    def _load(self, key: str) -> Optional[str]:
        try:
            with Session(self.engine) as session:
                entry = session.get(ProgressEntry, key)
                return entry.payload if entry else None
        except SQLAlchemyError as exc:
            raise StorageUnavailable(f"Could not read {key}: {exc}") from exc

    def _load_many(self, keys: Iterable[str]) -> Dict[str, str]:
        wanted = list(keys)
        try:
            with Session(self.engine) as session:
                entries = session.exec(
                    select(ProgressEntry).where(ProgressEntry.key.in_(wanted))
                ).all()
        except SQLAlchemyError as exc:
            raise StorageUnavailable(f"Could not read progress snapshot: {exc}") from exc
        return {entry.key: entry.payload for entry in entries}

    def _store(self, key: str, payload: str) -> None:
        try:
            with Session(self.engine) as session:
                entry = session.get(ProgressEntry, key)
                if entry:
                    entry.payload = payload
                    entry.updated_at = utcnow()
                else:
                    entry = ProgressEntry(key=key, payload=payload)
                session.add(entry)
                session.commit()
        except SQLAlchemyError as exc:
            logger.error("progress_write_failed", key=key, error=str(exc))
            raise StorageUnavailable(f"Could not save {key}") from exc

    def _remove(self, key: str) -> None:
        try:
            with Session(self.engine) as session:
                entry = session.get(ProgressEntry, key)
                if entry:
                    session.delete(entry)
                    session.commit()
        except SQLAlchemyError as exc:
            logger.error("progress_write_failed", key=key, error=str(exc))
            raise StorageUnavailable(f"Could not delete {key}") from exc


__all__ = [
    "BaseProgressStore",
    "MemoryProgressStore",
    "ProgressStore",
    "SQLProgressStore",
    "deserialize_record",
    "serialize_record",
]
