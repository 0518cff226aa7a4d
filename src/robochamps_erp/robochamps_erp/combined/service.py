from __future__ import annotations

from typing import List, Optional

from ..access.context import CallerContext, require_caller
from ..access.filters import RecordFilters, attendance_scope, combined_report_scope
from ..attendance.repository import AttendanceRepository
from ..attendance.service import enrich_attendance
from ..reports.repository import ReportRepository
from ..reports.service import enrich_reports
from ..schools.repository import SchoolRepository
from ..users.directory import Directory, matches_trainer
from ..users.repository import UserRepository
from .aggregator import combine_records
from .model import CombinedRecord


class CombinedRecordService:
    """Use case: per-day view of attendance and reports for the caller's scope."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        reports: ReportRepository,
        users: UserRepository,
        schools: SchoolRepository,
    ):
        self._attendance = attendance
        self._reports = reports
        self._users = users
        self._schools = schools

    def list_combined(
        self,
        *,
        caller: Optional[CallerContext],
        filters: RecordFilters = RecordFilters(),
    ) -> List[CombinedRecord]:
        caller = require_caller(caller)

        # Two independent queries; the store has no joins.
        attendance = self._attendance.find(attendance_scope(caller, filters))
        reports = self._reports.find(combined_report_scope(caller, filters))

        directory = Directory.load(self._users, self._schools)
        attendance_rows = [
            row
            for row in enrich_attendance(attendance, directory)
            if matches_trainer(row.trainer_name, row.trainer_email, name=filters.trainer_name, email=filters.trainer_email)
        ]
        report_rows = [
            row
            for row in enrich_reports(reports, directory)
            if matches_trainer(row.trainer_name, row.trainer_email, name=filters.trainer_name, email=filters.trainer_email)
        ]

        return combine_records(attendance_rows, report_rows)
