"""Per-member PIN credentials, stored apart from progress records."""

from __future__ import annotations

from typing import Callable, Dict, Optional, Protocol

import structlog
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session

from ..core.errors import GateStateError, StorageUnavailable
from ..core.time import utcnow
from ..models import FamilyPin
from .roster import Roster

logger = structlog.get_logger(__name__)

IsoClock = Callable[[], str]


def _iso_now() -> str:
    return utcnow().isoformat()


class CredentialStore(Protocol):
    roster: Roster

    def get(self, member: str) -> Optional[FamilyPin]: ...

    def create(self, member: str, pin: str) -> FamilyPin: ...


class MemoryCredentialStore:
    def __init__(self, roster: Roster, *, clock: IsoClock = _iso_now) -> None:
        self.roster = roster
        self._clock = clock
        self.entries: Dict[str, FamilyPin] = {}

    def get(self, member: str) -> Optional[FamilyPin]:
        return self.entries.get(self.roster.pin_key(member))

    def create(self, member: str, pin: str) -> FamilyPin:
        key = self.roster.pin_key(member)
        if key in self.entries:
            raise GateStateError(f"A PIN is already set for {member}")
        credential = FamilyPin(key=key, member_name=member, pin=pin, created_at=self._clock())
        self.entries[key] = credential
        logger.info("pin_created", member=member)
        return credential


class SQLCredentialStore:
    """Credentials in the ``family_pin`` table.

    Lookup failures are raised, never reported as a missing credential.
    """

    def __init__(self, roster: Roster, engine: Engine, *, clock: IsoClock = _iso_now) -> None:
        self.roster = roster
        self.engine = engine
        self._clock = clock

    def get(self, member: str) -> Optional[FamilyPin]:
        key = self.roster.pin_key(member)
        try:
            with Session(self.engine) as session:
                return session.get(FamilyPin, key)
        except SQLAlchemyError as exc:
            logger.error("pin_lookup_failed", member=member, error=str(exc))
            raise StorageUnavailable(f"Could not look up PIN for {member}") from exc

    def create(self, member: str, pin: str) -> FamilyPin:
        key = self.roster.pin_key(member)
        credential = FamilyPin(key=key, member_name=member, pin=pin, created_at=self._clock())
        try:
            with Session(self.engine) as session:
                session.add(credential)
                session.commit()
                session.refresh(credential)
        except IntegrityError as exc:
            raise GateStateError(f"A PIN is already set for {member}") from exc
        except SQLAlchemyError as exc:
            logger.error("pin_write_failed", member=member, error=str(exc))
            raise StorageUnavailable(f"Could not save PIN for {member}") from exc
        logger.info("pin_created", member=member)
        return credential


__all__ = ["CredentialStore", "MemoryCredentialStore", "SQLCredentialStore"]
