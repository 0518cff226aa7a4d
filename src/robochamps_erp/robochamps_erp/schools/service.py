from __future__ import annotations

import logging
import re
from typing import Any, Dict, Mapping, Optional, Sequence

from ..access.context import CallerContext, require_caller, require_role
from ..common.validators import FieldErrors, require_non_empty
from ..core.enums import Role
from ..core.exceptions import BusinessRuleViolation, NotFoundError, ValidationError
from ..users.repository import UserRepository
from .model import School
from .repository import SchoolRepository

logger = logging.getLogger(__name__)

_CODE_RE = re.compile(r"[A-Z0-9-]{2,50}")


def normalize_code(value: Any) -> str:
    """School codes are matched upper-cased and trimmed."""

    return str(value or "").strip().upper()


def _optional_code(value: Any) -> Optional[str]:
    code = normalize_code(value)
    if not code:
        return None
    if not _CODE_RE.fullmatch(code):
        raise ValidationError("Invalid school code", {"school_code": "letters, digits and '-' only"})
    return code


class SchoolService:
    def __init__(self, schools: SchoolRepository, users: UserRepository):
        self._schools = schools
        self._users = users

    def list_schools(self, *, caller: Optional[CallerContext]) -> Sequence[School]:
        require_caller(caller)
        return sorted(self._schools.list_all(), key=lambda s: s.name.lower())

    def get_by_code(self, code: Any) -> School:
        """Public lookup used by the signup form."""

        code = normalize_code(code)
        if not code:
            raise ValidationError("School code is required", {"code": "is required"})
        school = self._schools.get_by_code(code)
        if not school:
            raise NotFoundError("School not found with this code")
        return school

    def _validated(self, payload: Mapping[str, Any], *, partial: bool) -> Dict[str, Any]:
        errors = FieldErrors()
        fields: Dict[str, Any] = {}
        if not partial or "name" in payload:
            name = errors.check(require_non_empty, str(payload.get("name") or ""), "name")
            if name is not None:
                fields["name"] = name
        if not partial or "location_text" in payload:
            location = errors.check(require_non_empty, str(payload.get("location_text") or ""), "location_text")
            if location is not None:
                fields["location_text"] = location
        if not partial or "school_code" in payload:
            code = errors.check(_optional_code, payload.get("school_code"))
            if not errors.has("school_code"):
                fields["school_code"] = code
        errors.raise_if_any()
        return fields

    def _check_unique(self, fields: Mapping[str, Any], *, current: Optional[School] = None) -> None:
        name = fields.get("name", current.name if current else "")
        location = fields.get("location_text", current.location_text if current else "")
        twin = self._schools.find_by_name_location(name, location)
        if twin and (current is None or twin.school_id != current.school_id):
            raise ValidationError(
                "School with this name and location already exists",
                {"name": "already exists at this location"},
            )
        code = fields.get("school_code")
        if code:
            holder = self._schools.get_by_code(code)
            if holder and (current is None or holder.school_id != current.school_id):
                raise ValidationError("School code is already in use", {"school_code": "is already in use"})

    def create(self, *, caller: Optional[CallerContext], payload: Mapping[str, Any]) -> School:
        caller = require_role(caller, {Role.ADMIN}, "Only admins can create schools")
        fields = self._validated(payload, partial=False)
        self._check_unique(fields)
        school = self._schools.create(
            name=fields["name"],
            location_text=fields["location_text"],
            school_code=fields["school_code"],
        )
        logger.info("School %s created by admin %s", school.school_id, caller.caller_id)
        return school

    def update(self, *, caller: Optional[CallerContext], school_id: int, payload: Mapping[str, Any]) -> School:
        require_role(caller, {Role.ADMIN}, "Only admins can update schools")
        fields = self._validated(payload, partial=True)
        current = self._schools.get_by_id(int(school_id))
        if not current:
            raise NotFoundError("School not found")
        self._check_unique(fields, current=current)
        if not self._schools.update(school_id=int(school_id), fields=fields):
            raise NotFoundError("School not found")
        updated = self._schools.get_by_id(int(school_id))
        if not updated:
            raise NotFoundError("School not found")
        return updated

    def delete(self, *, caller: Optional[CallerContext], school_id: int) -> None:
        caller = require_role(caller, {Role.ADMIN}, "Only admins can delete schools")
        if not self._schools.get_by_id(int(school_id)):
            raise NotFoundError("School not found")
        assigned = self._users.count_by_school(int(school_id))
        if assigned:
            raise BusinessRuleViolation(
                f"Cannot delete school. {assigned} user(s) are associated with this school.",
                "SCHOOL_IN_USE",
            )
        if not self._schools.delete_by_id(int(school_id)):
            raise NotFoundError("School not found")
        logger.info("School %s deleted by admin %s", school_id, caller.caller_id)
