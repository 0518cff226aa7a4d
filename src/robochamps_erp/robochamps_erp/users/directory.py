from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

from ..core.constants import UNKNOWN_LABEL
from ..schools.model import School
from ..schools.repository import SchoolRepository
from .model import User
from .repository import UserRepository


@dataclass(frozen=True)
class TrainerInfo:
    name: str
    email: str


class Directory:
    """In-memory id -> display name lookup for users and schools.

    Built from the *full* user and school listings on every call. This assumes
    a bounded number of schools and users; the store offers no joins, so the
    alternative would be one lookup per record.
    """

    def __init__(self, users: Mapping[int, User], schools: Mapping[int, School]):
        self._users = dict(users)
        self._schools = dict(schools)

    @classmethod
    def load(cls, users: UserRepository, schools: SchoolRepository) -> "Directory":
        return cls(
            {u.user_id: u for u in users.list_all()},
            {s.school_id: s for s in schools.list_all()},
        )

    def trainer(self, user_id: Optional[int]) -> TrainerInfo:
        user = self._users.get(user_id) if user_id is not None else None
        if not user:
            return TrainerInfo(name=UNKNOWN_LABEL, email=UNKNOWN_LABEL)
        return TrainerInfo(name=user.name, email=user.email)

    def school_name(self, school_id: Optional[int]) -> str:
        school = self._schools.get(school_id) if school_id is not None else None
        return school.name if school else UNKNOWN_LABEL


def matches_trainer(
    trainer_name: str,
    trainer_email: str,
    *,
    name: Optional[str] = None,
    email: Optional[str] = None,
) -> bool:
    """Case-insensitive substring match on the enriched trainer name/email."""

    if name and name.lower() not in trainer_name.lower():
        return False
    if email and email.lower() not in trainer_email.lower():
        return False
    return True
