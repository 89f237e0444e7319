"""Database model for per-member PINs."""

from __future__ import annotations

from typing import Any, Dict

from sqlmodel import Field as ORMField, SQLModel


class FamilyPin(SQLModel, table=True):
    """A member's PIN, stored under ``pin_<member key>``."""

    __tablename__ = "family_pin"

    key: str = ORMField(primary_key=True, max_length=120)
    member_name: str
    pin: str
    created_at: str

    def to_storage(self) -> Dict[str, Any]:
        return {
            "memberName": self.member_name,
            "pin": self.pin,
            "createdAt": self.created_at,
        }


__all__ = ["FamilyPin"]
