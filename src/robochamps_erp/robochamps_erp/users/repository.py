from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from ..core.enums import Role
from .model import User


class UserRepository(Protocol):
    """Repository interface for User.

    Note (DIP): the service layer depends on this interface, not on a concrete DB.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def list_all(self) -> Sequence[User]:
        raise NotImplementedError

    def create_user(
        self,
        *,
        name: str,
        email: str,
        password_hash: str,
        role: Role,
        school_id: Optional[int],
    ) -> User:
        raise NotImplementedError

    def update(self, *, user_id: int, fields: Mapping[str, Any]) -> bool:
        """Set ``name`` / ``role`` / ``school_id`` / ``password_hash``; False if the user is gone."""
        raise NotImplementedError

    def delete_by_id(self, user_id: int) -> bool:
        raise NotImplementedError

    def count_by_school(self, school_id: int) -> int:
        raise NotImplementedError
