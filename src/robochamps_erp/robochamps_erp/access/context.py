from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError


@dataclass(frozen=True)
class CallerContext:
    """Identity of whoever is making the current call.

    Controllers build it from the session and pass it into services
    explicitly; services never read the session themselves.
    """

    caller_id: int
    role: Role
    school_id: Optional[int] = None
    name: str = ""
    email: str = ""

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def is_trainer(self) -> bool:
        return self.role.is_trainer


def require_caller(caller: Optional[CallerContext]) -> CallerContext:
    if caller is None:
        raise AuthenticationError("Unauthorized")
    return caller


def require_role(caller: Optional[CallerContext], roles: Iterable[Role], message: str) -> CallerContext:
    caller = require_caller(caller)
    if caller.role not in set(roles):
        raise AuthorizationError(message)
    return caller
