from __future__ import annotations

import hmac
import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..access.context import CallerContext, require_role
from ..common.validators import FieldErrors, require_min_length, require_non_empty
from ..core.constants import NO_SCHOOL_LABEL, PASSWORD_MIN_LENGTH
from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    BusinessRuleViolation,
    NotFoundError,
    ValidationError,
)
from ..schools.repository import SchoolRepository
from .model import User, UserSummary
from .repository import UserRepository

logger = logging.getLogger(__name__)

_EMAIL_RE = re.compile(r"[^@\s]+@[^@\s]+\.[^@\s]+")

# trainer_type chosen on the signup form -> stored role
SIGNUP_ROLES = {"ROBOCHAMPS": Role.TRAINER_ROBOCHAMPS, "SCHOOL": Role.TRAINER_SCHOOL}


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after login."""

    user_id: int
    name: str
    email: str
    role: Role
    school_id: Optional[int]


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, email: str, password: str) -> SessionUser:
        email = require_non_empty(email or "", "email").lower()
        if not password:
            raise AuthenticationError("Invalid email or password")

        user = self._users.get_by_email(email)
        if not user:
            logger.info("Login failed, unknown user: %s", email)
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(user.password_hash, password)
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            logger.info("Login failed, bad password: %s", email)
            raise AuthenticationError("Invalid email or password")

        return SessionUser(
            user_id=user.user_id,
            name=user.name,
            email=user.email,
            role=user.role,
            school_id=user.school_id,
        )


def _require_email(value: Any) -> str:
    text = str(value or "").strip().lower()
    if not _EMAIL_RE.fullmatch(text):
        raise ValidationError("Valid email is required", {"email": "must be a valid email address"})
    return text


def _require_password(value: Any, field_name: str) -> str:
    if not isinstance(value, str) or not value:
        raise ValidationError(f"{field_name} is required", {field_name: "is required"})
    return require_min_length(value, field_name, PASSWORD_MIN_LENGTH)


def _parse_role(value: Any) -> Role:
    try:
        return Role(value)
    except ValueError:
        raise ValidationError(
            "Unknown role",
            {"role": "must be ADMIN, TEACHER, TRAINER_ROBOCHAMPS or TRAINER_SCHOOL"},
        )


class UserService:
    """Account management: admin CRUD, trainer signup and the secret-key password reset."""

    def __init__(self, users: UserRepository, schools: SchoolRepository, *, reset_secret: str = ""):
        self._users = users
        self._schools = schools
        self._reset_secret = reset_secret

    def _existing_school_id(self, value: Any, errors: FieldErrors) -> Optional[int]:
        if value in (None, ""):
            return None
        if isinstance(value, bool):
            errors.add("school_id", "must be an integer")
            return None
        try:
            school_id = int(value)
        except (TypeError, ValueError):
            errors.add("school_id", "must be an integer")
            return None
        if not self._schools.get_by_id(school_id):
            errors.add("school_id", "school not found")
            return None
        return school_id

    def _ensure_email_free(self, email: str) -> None:
        if self._users.get_by_email(email):
            raise ValidationError("User with this email already exists", {"email": "is already registered"})

    def list_users(self, *, caller: Optional[CallerContext]) -> Sequence[UserSummary]:
        require_role(caller, {Role.ADMIN}, "Only admins can view users")
        school_names = {s.school_id: s.name for s in self._schools.list_all()}
        users = sorted(self._users.list_all(), key=lambda u: u.user_id, reverse=True)
        return [
            UserSummary(
                user_id=u.user_id,
                name=u.name,
                email=u.email,
                role=u.role,
                school_id=u.school_id,
                school_name=school_names.get(u.school_id, NO_SCHOOL_LABEL),
            )
            for u in users
        ]

    def create_user(self, *, caller: Optional[CallerContext], payload: Mapping[str, Any]) -> User:
        caller = require_role(caller, {Role.ADMIN}, "Only admins can create users")

        errors = FieldErrors()
        name = errors.check(require_non_empty, str(payload.get("name") or ""), "name")
        email = errors.check(_require_email, payload.get("email"))
        password = errors.check(_require_password, payload.get("password"), "password")
        role = errors.check(_parse_role, payload.get("role"))
        school_id = self._existing_school_id(payload.get("school_id"), errors)
        errors.raise_if_any()

        self._ensure_email_free(email)
        user = self._users.create_user(
            name=name,
            email=email,
            password_hash=generate_password_hash(password),
            role=role,
            school_id=school_id,
        )
        logger.info("User %s (%s) created by admin %s", user.user_id, role.value, caller.caller_id)
        return user

    def update_user(
        self,
        *,
        caller: Optional[CallerContext],
        user_id: int,
        payload: Mapping[str, Any],
    ) -> User:
        """Partial update; ``new_password`` replaces the stored hash."""

        caller = require_role(caller, {Role.ADMIN}, "Only admins can update users")

        errors = FieldErrors()
        fields: Dict[str, Any] = {}
        if "name" in payload:
            name = errors.check(require_non_empty, str(payload.get("name") or ""), "name")
            if name is not None:
                fields["name"] = name
        if "role" in payload:
            role = errors.check(_parse_role, payload.get("role"))
            if role is not None:
                fields["role"] = role
        if "school_id" in payload:
            school_id = self._existing_school_id(payload.get("school_id"), errors)
            if not errors.has("school_id"):
                fields["school_id"] = school_id
        if "new_password" in payload:
            password = errors.check(_require_password, payload.get("new_password"), "new_password")
            if password is not None:
                fields["password_hash"] = generate_password_hash(password)
        errors.raise_if_any()
        if not fields:
            raise ValidationError("Nothing to update", {"input": "no updatable fields given"})

        if not self._users.update(user_id=int(user_id), fields=fields):
            raise NotFoundError("User not found")
        logger.info("User %s updated by admin %s (%s)", user_id, caller.caller_id, ", ".join(sorted(fields)))
        updated = self._users.get_by_id(int(user_id))
        if not updated:
            raise NotFoundError("User not found")
        return updated

    def delete_user(self, *, caller: Optional[CallerContext], user_id: int) -> None:
        caller = require_role(caller, {Role.ADMIN}, "Only admins can delete users")
        if int(user_id) == caller.caller_id:
            raise BusinessRuleViolation("You cannot delete your own account", "SELF_DELETE")
        if not self._users.delete_by_id(int(user_id)):
            raise NotFoundError("User not found")
        logger.info("User %s deleted by admin %s", user_id, caller.caller_id)

    def signup(self, payload: Mapping[str, Any]) -> User:
        """Public trainer signup. The very first account becomes the admin."""

        errors = FieldErrors()
        name = errors.check(require_non_empty, str(payload.get("full_name") or ""), "full_name")
        email = errors.check(_require_email, payload.get("email"))
        password = errors.check(_require_password, payload.get("password"), "password")
        trainer_type = payload.get("trainer_type")
        if trainer_type not in SIGNUP_ROLES:
            errors.add("trainer_type", "must be ROBOCHAMPS or SCHOOL")

        school_id: Optional[int] = None
        school_code = str(payload.get("school_code") or "").strip().upper()
        if school_code:
            school = self._schools.get_by_code(school_code)
            if school:
                school_id = school.school_id
            else:
                errors.add("school_code", "no school with this code")
        else:
            school_id = self._existing_school_id(payload.get("school_id"), errors)
            if school_id is None:
                errors.add("school_id", "is required")
        errors.raise_if_any()

        self._ensure_email_free(email)
        role = Role.ADMIN if not self._users.list_all() else SIGNUP_ROLES[trainer_type]
        user = self._users.create_user(
            name=name,
            email=email,
            password_hash=generate_password_hash(password),
            role=role,
            school_id=school_id,
        )
        logger.info("Signup: user %s registered as %s", user.user_id, role.value)
        return user

    def reset_password(self, *, email: Any, new_password: Any, secret_key: Any) -> bool:
        """Out-of-band admin recovery guarded by a shared secret.

        Creates an ADMIN account when the email is unknown. Returns True in
        that case, False when an existing password was replaced.
        """

        if not self._reset_secret:
            raise AuthorizationError("Password reset is disabled")

        errors = FieldErrors()
        email = errors.check(_require_email, email)
        password = errors.check(_require_password, new_password, "new_password")
        if not isinstance(secret_key, str) or not secret_key:
            errors.add("secret_key", "is required")
        errors.raise_if_any()

        if not hmac.compare_digest(secret_key.encode("utf-8"), self._reset_secret.encode("utf-8")):
            logger.warning("Password reset refused for %s: bad secret key", email)
            raise AuthorizationError("Invalid secret key")

        password_hash = generate_password_hash(password)
        user = self._users.get_by_email(email)
        if not user:
            created = self._users.create_user(
                name="Admin User",
                email=email,
                password_hash=password_hash,
                role=Role.ADMIN,
                school_id=None,
            )
            logger.warning("Password reset created admin account %s", created.user_id)
            return True

        if not self._users.update(user_id=user.user_id, fields={"password_hash": password_hash}):
            raise NotFoundError("User not found")
        logger.warning("Password reset for user %s", user.user_id)
        return False
