"""Row-level narrowing of listing queries by caller role.

| Role               | Own-only                 | School-scoped                              |
|--------------------|--------------------------|--------------------------------------------|
| ADMIN              | no                       | no (may pass any filter)                   |
| TEACHER            | TEACHER_TRAINING reports | attendance, uploaded sheets, combined view |
| TRAINER_ROBOCHAMPS | yes                      | yes                                        |
| TRAINER_SCHOOL     | yes                      | yes                                        |

Own-only conditions always replace whatever the caller asked for.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from typing import Optional

from ..attendance.model import AttendanceQuery
from ..common.datetime_utils import end_of_day, start_of_day
from ..core.enums import ReportType, RequestStatus, Role
from ..core.exceptions import AuthorizationError
from ..late_uploads.model import LateRequestQuery
from ..reports.model import ReportQuery
from ..sheets.model import SheetQuery
from .context import CallerContext


@dataclass(frozen=True)
class RecordFilters:
    """Caller-supplied filters for attendance, report and combined listings."""

    start_date: Optional[date] = None
    end_date: Optional[date] = None
    school_id: Optional[int] = None
    trainer_id: Optional[int] = None
    trainer_name: Optional[str] = None
    trainer_email: Optional[str] = None
    report_type: Optional[ReportType] = None


@dataclass(frozen=True)
class SheetFilters:
    trainer_id: Optional[int] = None
    school_id: Optional[int] = None
    month: Optional[str] = None
    year: Optional[int] = None


@dataclass(frozen=True)
class LateRequestFilters:
    status: Optional[RequestStatus] = None
    month: Optional[str] = None
    trainer_email: Optional[str] = None
    school_name: Optional[str] = None


def _scoped_school(caller: CallerContext, requested: Optional[int]) -> Optional[int]:
    if caller.school_id is not None and not caller.is_admin:
        return caller.school_id
    return requested


def attendance_scope(caller: CallerContext, filters: RecordFilters) -> AttendanceQuery:
    trainer_id = caller.caller_id if caller.is_trainer else filters.trainer_id
    return AttendanceQuery(
        trainer_id=trainer_id,
        school_id=_scoped_school(caller, filters.school_id),
        start=start_of_day(filters.start_date) if filters.start_date else None,
        end=end_of_day(filters.end_date) if filters.end_date else None,
    )


def report_scope(caller: CallerContext, filters: RecordFilters) -> ReportQuery:
    if caller.is_trainer:
        author_id, report_type = caller.caller_id, ReportType.TRAINER_CLASS
    elif caller.role == Role.TEACHER:
        author_id, report_type = caller.caller_id, ReportType.TEACHER_TRAINING
    else:
        author_id, report_type = filters.trainer_id, filters.report_type

    # Training reports are already own-only and may carry no school at all.
    if caller.role == Role.TEACHER:
        school_id = filters.school_id
    else:
        school_id = _scoped_school(caller, filters.school_id)

    return ReportQuery(
        author_id=author_id,
        type=report_type,
        school_id=school_id,
        start=start_of_day(filters.start_date) if filters.start_date else None,
        end=end_of_day(filters.end_date) if filters.end_date else None,
    )


def sheet_scope(caller: CallerContext, filters: SheetFilters) -> SheetQuery:
    trainer_id: Optional[int] = None
    school_id: Optional[int] = None

    if caller.is_trainer:
        trainer_id = caller.caller_id
    elif caller.is_admin:
        trainer_id = filters.trainer_id
        school_id = filters.school_id
    elif caller.role == Role.TEACHER:
        school_id = caller.school_id

    return SheetQuery(trainer_id=trainer_id, school_id=school_id, month=filters.month, year=filters.year)


def late_request_scope(caller: CallerContext, filters: LateRequestFilters) -> LateRequestQuery:
    if caller.is_admin:
        return LateRequestQuery(
            status=filters.status,
            month=filters.month,
            trainer_email_contains=filters.trainer_email or None,
            school_name_contains=filters.school_name or None,
        )
    if caller.is_trainer:
        return LateRequestQuery(trainer_id=caller.caller_id)
    raise AuthorizationError("Not allowed to view late upload requests")


def combined_report_scope(caller: CallerContext, filters: RecordFilters) -> ReportQuery:
    """Report side of the combined view: teachers stay inside their own school here."""

    query = report_scope(caller, filters)
    if caller.role == Role.TEACHER:
        return replace(query, school_id=_scoped_school(caller, filters.school_id))
    return query
