"""Domain error hierarchy.

Each error carries the HTTP status and machine-readable code the API layer
renders it with, so services raise plain exceptions and stay HTTP-agnostic.
"""

from __future__ import annotations


class NoorError(Exception):
    """Base class for every expected failure in the tracker."""

    status_code = 400
    code = "error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message())

    @classmethod
    def default_message(cls) -> str:
        return cls.__name__

    @property
    def message(self) -> str:
        return str(self)


class UnknownMember(NoorError):
    status_code = 404
    code = "unknown_member"

    def __init__(self, name: str, message: str | None = None) -> None:
        self.name = name
        super().__init__(message or f"Unknown family member: {name!r}")


class DuplicateMemberKey(UnknownMember):
    """Two roster entries share a storage key."""

    code = "duplicate_member_key"

    def __init__(self, name: str, other: str, key: str) -> None:
        self.other = other
        self.key = key
        super().__init__(
            name, f"Roster entries {other!r} and {name!r} both map to storage key {key!r}"
        )


class PinTooShort(NoorError):
    code = "pin_too_short"

    def __init__(self, min_length: int) -> None:
        self.min_length = min_length
        super().__init__(f"PIN must be at least {min_length} characters")


class PinMismatch(NoorError):
    code = "pin_mismatch"

    @classmethod
    def default_message(cls) -> str:
        return "PINs do not match"


class InvalidPin(NoorError):
    status_code = 401
    code = "invalid_pin"

    @classmethod
    def default_message(cls) -> str:
        return "Invalid PIN"


class NotAuthenticated(NoorError):
    status_code = 401
    code = "not_authenticated"

    @classmethod
    def default_message(cls) -> str:
        return "Enter your PIN before updating progress"


class GateStateError(NoorError):
    status_code = 409
    code = "invalid_gate_state"


class InvalidAdminPassword(NoorError):
    status_code = 401
    code = "invalid_admin_password"

    @classmethod
    def default_message(cls) -> str:
        return "Invalid admin password"


class StorageUnavailable(NoorError):
    status_code = 503
    code = "storage_unavailable"

    @classmethod
    def default_message(cls) -> str:
        return "Progress storage is unavailable"


class MalformedRecord(StorageUnavailable):
    code = "malformed_record"

    def __init__(self, key: str, reason: str) -> None:
        self.key = key
        super().__init__(f"Stored value for {key!r} is malformed: {reason}")


__all__ = [
    "DuplicateMemberKey",
    "GateStateError",
    "InvalidAdminPassword",
    "InvalidPin",
    "MalformedRecord",
    "NoorError",
    "NotAuthenticated",
    "PinMismatch",
    "PinTooShort",
    "StorageUnavailable",
    "UnknownMember",
]
