"""The fixed, ordered set of family members."""

from __future__ import annotations

import re
from typing import Dict, Iterable, Iterator, List

from ..core.errors import DuplicateMemberKey, UnknownMember

_WHITESPACE = re.compile(r"\s+")

PROGRESS_NAMESPACE = "progress"
PIN_NAMESPACE = "pin"


def member_key(name: str) -> str:
    """Collapse whitespace runs to underscores, e.g. ``Bilal Qureshi`` -> ``Bilal_Qureshi``."""

    return _WHITESPACE.sub("_", name)


class Roster:
    """Immutable roster of member names in display order.

    Construction fails if two names produce the same storage key, since their
    records would otherwise silently merge.
    """

    def __init__(self, names: Iterable[str]) -> None:
        members: List[str] = []
        keys: Dict[str, str] = {}
        for raw in names:
            name = (raw or "").strip()
            if not name:
                continue
            key = member_key(name)
            if key in keys:
                raise DuplicateMemberKey(name, keys[key], key)
            keys[key] = name
            members.append(name)
        if not members:
            raise ValueError("Roster must contain at least one member")
        self._members = tuple(members)
        self._keys = {name: key for key, name in keys.items()}

    @property
    def members(self) -> tuple[str, ...]:
        return self._members

    def __iter__(self) -> Iterator[str]:
        return iter(self._members)

    def __len__(self) -> int:
        return len(self._members)

    def __contains__(self, name: object) -> bool:
        return name in self._keys

    def require(self, name: str) -> str:
        """Return ``name`` if it is on the roster, else raise ``UnknownMember``."""

        if name not in self._keys:
            raise UnknownMember(name)
        return name

    def key_for(self, name: str) -> str:
        return self._keys[self.require(name)]

    def progress_key(self, name: str) -> str:
        return f"{PROGRESS_NAMESPACE}_{self.key_for(name)}"

    def pin_key(self, name: str) -> str:
        return f"{PIN_NAMESPACE}_{self.key_for(name)}"

    def __repr__(self) -> str:
        return f"Roster({list(self._members)!r})"


__all__ = ["PIN_NAMESPACE", "PROGRESS_NAMESPACE", "Roster", "member_key"]
