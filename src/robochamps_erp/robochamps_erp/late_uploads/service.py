from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional, Sequence

from ..access.context import CallerContext, require_caller, require_role
from ..access.filters import LateRequestFilters, late_request_scope
from ..common.datetime_utils import now_local
from ..common.validators import FieldErrors, require_int_range, require_min_length
from ..core.constants import LATE_REASON_MIN_LENGTH, MAX_YEAR, MIN_YEAR
from ..core.enums import TRAINER_ROLES, RequestStatus, Role
from ..core.exceptions import BusinessRuleViolation, NotFoundError, ValidationError
from ..schools.repository import SchoolRepository
from .deadline import is_submission_window_open, parse_month
from .guard import OpenRequestGuard
from .model import LateUploadRequest, NewLateUploadRequest
from .repository import LateUploadRequestRepository

logger = logging.getLogger(__name__)

NO_SCHOOL_MESSAGE = "School not found. Please contact admin to assign you to a school."

DECISION_STATUSES = frozenset({RequestStatus.APPROVED, RequestStatus.REJECTED})


def validate_month_year(month: Any, year: Any, errors: FieldErrors) -> None:
    """Shared month/year checks: format, range, and year agreeing with the month."""

    parsed = errors.check(parse_month, month)
    year_value = errors.check(require_int_range, year, "year", MIN_YEAR, MAX_YEAR)
    if parsed and year_value is not None and parsed[0] != year_value:
        errors.add("year", "must match the year of month")


class LateUploadService:
    """Late-upload approval workflow: PENDING -> APPROVED | REJECTED.

    Decided requests are terminal and rows are never deleted.
    """

    def __init__(
        self,
        requests: LateUploadRequestRepository,
        schools: SchoolRepository,
        *,
        guard: Optional[OpenRequestGuard] = None,
    ):
        self._requests = requests
        self._schools = schools
        self._guard = guard or OpenRequestGuard(requests)

    def create_request(
        self,
        *,
        caller: Optional[CallerContext],
        month: Any,
        year: Any,
        reason: Any,
        now: Optional[datetime] = None,
    ) -> LateUploadRequest:
        caller = require_role(caller, TRAINER_ROLES, "Only trainers can request late upload approval")
        if caller.school_id is None:
            raise ValidationError(NO_SCHOOL_MESSAGE, {"school": NO_SCHOOL_MESSAGE})

        errors = FieldErrors()
        # JSON callers must send a number; form uploads go through SheetService instead.
        if isinstance(year, str):
            errors.add("year", "must be a number")
            errors.check(parse_month, month)
        else:
            validate_month_year(month, year, errors)
        if not isinstance(reason, str):
            errors.add("reason", "is required")
        else:
            errors.check(require_min_length, reason, "reason", LATE_REASON_MIN_LENGTH)
        errors.raise_if_any()

        now = now or now_local()
        if is_submission_window_open(month, now):
            raise BusinessRuleViolation(
                "You can still upload this month's sheet directly. "
                "Late approval request is only needed after the 5th of next month.",
                "BEFORE_DEADLINE",
            )

        school = self._schools.get_by_id(caller.school_id)
        if not school:
            raise ValidationError("School not found", {"school": "not found"})

        created = self._guard.insert_unless_open(
            NewLateUploadRequest(
                trainer_id=caller.caller_id,
                trainer_name=caller.name,
                trainer_email=caller.email,
                school_id=school.school_id,
                school_name=school.name or "Unknown School",
                month=month,
                year=int(year),
                reason=reason,
                created_at=now,
            )
        )
        logger.info(
            "Late upload request %s created by trainer %s for %s",
            created.request_id,
            caller.caller_id,
            month,
        )
        return created

    def decide(
        self,
        *,
        caller: Optional[CallerContext],
        request_id: int,
        status: Any,
        now: Optional[datetime] = None,
    ) -> LateUploadRequest:
        caller = require_role(caller, {Role.ADMIN}, "Only admins can update late upload requests")

        try:
            decision = RequestStatus(status)
        except ValueError:
            decision = None
        if decision not in DECISION_STATUSES:
            raise ValidationError("Status must be APPROVED or REJECTED", {"status": "must be APPROVED or REJECTED"})

        existing = self._requests.get(request_id=int(request_id))
        if not existing:
            raise NotFoundError("Request not found")
        if existing.status != RequestStatus.PENDING:
            raise BusinessRuleViolation(f"Request was already {existing.status.value.lower()}", "ALREADY_DECIDED")

        decided = self._requests.decide(
            request_id=int(request_id),
            status=decision,
            decided_at=now or now_local(),
            admin_id=caller.caller_id,
            admin_name=caller.name or "Admin",
        )
        if not decided:
            # Another admin decided it between our read and write.
            raise BusinessRuleViolation("Request was already decided", "ALREADY_DECIDED")

        logger.info("Late upload request %s %s by admin %s", request_id, decision.value, caller.caller_id)
        updated = self._requests.get(request_id=int(request_id))
        if not updated:
            raise NotFoundError("Request not found")
        return updated

    def list_requests(
        self,
        *,
        caller: Optional[CallerContext],
        filters: LateRequestFilters = LateRequestFilters(),
    ) -> Sequence[LateUploadRequest]:
        caller = require_caller(caller)
        return self._requests.find(late_request_scope(caller, filters))

    def has_approved(self, *, trainer_id: int, month: str, year: int) -> bool:
        existing = self._requests.find_for_key(trainer_id=int(trainer_id), month=month, year=int(year))
        return any(r.status == RequestStatus.APPROVED for r in existing)
