"""PIN gate: binds a claimed family member to proof before any write.

State machine::

    unselected -> member_chosen -+-> awaiting_first_pin -> authenticated
                                 +-> awaiting_pin       -> authenticated

``reset()`` returns to ``unselected`` from anywhere. A wrong PIN leaves the
gate in ``awaiting_pin``; there is no lockout or attempt counter.
"""

from __future__ import annotations

import secrets
from enum import Enum
from typing import Any, Dict, Optional

import structlog

from ..core.errors import (
    GateStateError,
    InvalidPin,
    NotAuthenticated,
    PinMismatch,
    PinTooShort,
)
from .credentials import CredentialStore
from .roster import Roster

logger = structlog.get_logger(__name__)

PIN_MIN_LENGTH = 4


class GateState(str, Enum):
    UNSELECTED = "unselected"
    MEMBER_CHOSEN = "member_chosen"
    AWAITING_FIRST_PIN = "awaiting_first_pin"
    AWAITING_PIN = "awaiting_pin"
    AUTHENTICATED = "authenticated"


def pins_match(candidate: str, stored: str) -> bool:
    return secrets.compare_digest(candidate.encode("utf-8"), stored.encode("utf-8"))


class PinGate:
    def __init__(
        self,
        roster: Roster,
        credentials: CredentialStore,
        *,
        state: GateState = GateState.UNSELECTED,
        member: Optional[str] = None,
    ) -> None:
        self.roster = roster
        self.credentials = credentials
        self.state = state
        self.member = member

    # Session round-trip ----------------------------------------------------
    @classmethod
    def from_session(
        cls,
        data: Optional[Dict[str, Any]],
        roster: Roster,
        credentials: CredentialStore,
    ) -> "PinGate":
        """Rebuild a gate from session data, discarding anything stale."""

        if not data:
            return cls(roster, credentials)
        try:
            state = GateState(data.get("state"))
        except ValueError:
            return cls(roster, credentials)
        member = data.get("member")
        if state is GateState.UNSELECTED or member not in roster:
            return cls(roster, credentials)
        return cls(roster, credentials, state=state, member=member)

    def to_session(self) -> Dict[str, Any]:
        return {"state": self.state.value, "member": self.member}

    # Transitions -----------------------------------------------------------
    def choose_member(self, name: str) -> GateState:
        if self.state is GateState.AUTHENTICATED:
            raise GateStateError("Switch member before choosing another one")
        self.member = self.roster.require(name)
        self.state = GateState.MEMBER_CHOSEN
        return self.state

    def submit_credential_lookup(self) -> GateState:
        member = self._expect(GateState.MEMBER_CHOSEN)
        if self.credentials.get(member) is None:
            self.state = GateState.AWAITING_FIRST_PIN
        else:
            self.state = GateState.AWAITING_PIN
        return self.state

    def set_first_pin(self, pin: str, confirm_pin: str) -> GateState:
        member = self._expect(GateState.AWAITING_FIRST_PIN)
        if len(pin) < PIN_MIN_LENGTH:
            raise PinTooShort(PIN_MIN_LENGTH)
        if pin != confirm_pin:
            raise PinMismatch()
        try:
            self.credentials.create(member, pin)
        except GateStateError:
            # Another session set the PIN first.
            self.state = GateState.AWAITING_PIN
            raise
        self.state = GateState.AUTHENTICATED
        logger.info("gate_authenticated", member=member, first_pin=True)
        return self.state

    def submit_pin(self, pin: str) -> GateState:
        member = self._expect(GateState.AWAITING_PIN)
        credential = self.credentials.get(member)
        if credential is None:
            self.state = GateState.AWAITING_FIRST_PIN
            raise GateStateError(f"No PIN is set for {member} yet")
        if not pins_match(pin, credential.pin):
            logger.info("pin_rejected", member=member)
            raise InvalidPin()
        self.state = GateState.AUTHENTICATED
        logger.info("gate_authenticated", member=member, first_pin=False)
        return self.state

    def reset(self) -> GateState:
        self.state = GateState.UNSELECTED
        self.member = None
        return self.state

    # Guards ----------------------------------------------------------------
    @property
    def is_authenticated(self) -> bool:
        return self.state is GateState.AUTHENTICATED

    def require_authenticated(self) -> str:
        """Return the authenticated member or raise ``NotAuthenticated``."""

        if self.state is not GateState.AUTHENTICATED or self.member is None:
            raise NotAuthenticated()
        return self.member

    def _expect(self, state: GateState) -> str:
        if self.state is not state or self.member is None:
            raise GateStateError(
                f"Expected gate state {state.value}, currently {self.state.value}"
            )
        return self.member

    def describe(self) -> Dict[str, Any]:
        return {
            "state": self.state.value,
            "member": self.member,
            "authenticated": self.is_authenticated,
        }


__all__ = ["GateState", "PIN_MIN_LENGTH", "PinGate", "pins_match"]
