from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, List, Mapping, Optional, Sequence

from ..access.context import CallerContext, require_caller
from ..access.filters import RecordFilters, report_scope
from ..common.datetime_utils import now_local, parse_iso_datetime
from ..common.validators import FieldErrors, require_non_empty
from ..core.enums import TRAINER_ROLES, ReportType, Role
from ..core.exceptions import AuthorizationError
from ..schools.repository import SchoolRepository
from ..users.directory import Directory, matches_trainer
from ..users.repository import UserRepository
from .model import DailyReport, NewReport, ReportRow
from .repository import ReportRepository

logger = logging.getLogger(__name__)

_ALLOWED_AUTHORS = {
    ReportType.TEACHER_TRAINING: frozenset({Role.TEACHER, Role.ADMIN}),
    ReportType.TRAINER_CLASS: TRAINER_ROLES | {Role.ADMIN},
}

_FORBIDDEN_MESSAGES = {
    ReportType.TEACHER_TRAINING: "Only teachers can create training reports",
    ReportType.TRAINER_CLASS: "Only trainers can create class reports",
}


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def enrich_reports(reports: Sequence[DailyReport], directory: Directory) -> List[ReportRow]:
    rows: List[ReportRow] = []
    for r in reports:
        author = directory.trainer(r.author_id)
        rows.append(
            ReportRow(
                report=r,
                trainer_name=author.name,
                trainer_email=author.email,
                school_name=directory.school_name(r.school_id),
            )
        )
    return rows


class ReportService:
    def __init__(self, reports: ReportRepository, users: UserRepository, schools: SchoolRepository):
        self._reports = reports
        self._users = users
        self._schools = schools

    def create(
        self,
        *,
        caller: Optional[CallerContext],
        payload: Mapping[str, Any],
        now: Optional[datetime] = None,
    ) -> int:
        caller = require_caller(caller)

        errors = FieldErrors()
        try:
            report_type = ReportType(payload.get("type"))
        except ValueError:
            report_type = None
            errors.add("type", "must be TEACHER_TRAINING or TRAINER_CLASS")
        topics = errors.check(require_non_empty, str(payload.get("topics") or ""), "topics")
        summary = errors.check(require_non_empty, str(payload.get("summary") or ""), "summary")

        school_id = None
        if payload.get("school_id") not in (None, ""):
            try:
                school_id = int(payload["school_id"])
            except (TypeError, ValueError):
                errors.add("school_id", "must be an integer")

        recorded_at = now or now_local()
        if payload.get("datetime"):
            try:
                recorded_at = parse_iso_datetime(str(payload["datetime"]))
            except ValueError:
                errors.add("datetime", "must be an ISO-8601 timestamp")
        errors.raise_if_any()

        if caller.role not in _ALLOWED_AUTHORS[report_type]:
            raise AuthorizationError(_FORBIDDEN_MESSAGES[report_type])

        if school_id is None and report_type == ReportType.TRAINER_CLASS:
            school_id = caller.school_id

        report_id = self._reports.create(
            NewReport(
                type=report_type,
                school_id=school_id,
                author_id=caller.caller_id,
                class_label=_optional_text(payload.get("class_label")),
                topics=topics,
                summary=summary,
                notes=_optional_text(payload.get("notes")),
                recorded_at=recorded_at,
            )
        )
        logger.info("%s report %s created by %s", report_type.value, report_id, caller.caller_id)
        return report_id

    def list_reports(
        self,
        *,
        caller: Optional[CallerContext],
        filters: RecordFilters = RecordFilters(),
    ) -> List[ReportRow]:
        caller = require_caller(caller)
        reports = self._reports.find(report_scope(caller, filters))
        rows = enrich_reports(reports, Directory.load(self._users, self._schools))
        return [
            row
            for row in rows
            if matches_trainer(row.trainer_name, row.trainer_email, name=filters.trainer_name, email=filters.trainer_email)
        ]
