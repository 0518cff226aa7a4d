"""Merge attendance marks and daily reports into per-day combined records.

Records are grouped by ``<calendar day>_<trainer id>_<school id>``. Within a
group the earliest attendance mark is kept (the first class of the day is the
one that counts) and every report is attached. Reports whose group has no
attendance form a group of their own.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from ..attendance.model import AttendanceRow
from ..common.datetime_utils import day_key
from ..reports.model import ReportRow
from .model import CombinedRecord


def group_key(day: str, trainer_id: int, school_id: Optional[int]) -> str:
    return f"{day}_{trainer_id}_{'' if school_id is None else school_id}"


def _attendance_order(row: AttendanceRow):
    return (row.record.recorded_at, row.record.attendance_id)


def _report_order(row: ReportRow):
    return (row.report.recorded_at, row.report.report_id)


def combine_records(
    attendance: Sequence[AttendanceRow],
    reports: Sequence[ReportRow],
) -> List[CombinedRecord]:
    combined: Dict[str, CombinedRecord] = {}

    # Oldest first, so the first row seen for a key is the one that stays.
    for row in sorted(attendance, key=_attendance_order):
        r = row.record
        key = group_key(day_key(r.recorded_at), r.trainer_id, r.school_id)
        if key in combined:
            continue
        combined[key] = CombinedRecord(
            date=r.recorded_at,
            trainer_id=r.trainer_id,
            trainer_name=row.trainer_name,
            trainer_email=row.trainer_email,
            school_id=r.school_id,
            school_name=row.school_name,
            attendance=row,
        )

    for row in sorted(reports, key=_report_order, reverse=True):
        r = row.report
        key = group_key(day_key(r.recorded_at), r.author_id, r.school_id)
        entry = combined.get(key)
        if entry is None:
            entry = combined[key] = CombinedRecord(
                date=r.recorded_at,
                trainer_id=r.author_id,
                trainer_name=row.trainer_name,
                trainer_email=row.trainer_email,
                school_id=r.school_id,
                school_name=row.school_name,
            )
        entry.reports.append(row)

    return sorted(combined.values(), key=lambda c: c.date, reverse=True)
