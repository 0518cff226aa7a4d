from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: User.

    Note: Plain data object (no DB access code).
    """

    user_id: int
    name: str
    email: str
    password_hash: str
    role: Role
    school_id: Optional[int] = None


@dataclass(frozen=True)
class UserSummary:
    """User as shown in the admin listing: no password hash, school name resolved."""

    user_id: int
    name: str
    email: str
    role: Role
    school_id: Optional[int]
    school_name: str

    def to_dict(self) -> dict:
        return {
            "id": self.user_id,
            "name": self.name,
            "email": self.email,
            "role": self.role.value,
            "school_id": self.school_id,
            "school_name": self.school_name,
        }
