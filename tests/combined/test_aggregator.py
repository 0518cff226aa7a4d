from __future__ import annotations

from datetime import datetime

from src.robochamps_erp.robochamps_erp.attendance.model import AttendanceRecord, AttendanceRow
from src.robochamps_erp.robochamps_erp.combined.aggregator import combine_records, group_key
from src.robochamps_erp.robochamps_erp.core.enums import ReportType
from src.robochamps_erp.robochamps_erp.reports.model import DailyReport, ReportRow


def att(aid, when, trainer_id=10, school_id=1):
    return AttendanceRow(
        record=AttendanceRecord(
            attendance_id=aid,
            school_id=school_id,
            trainer_id=trainer_id,
            class_label=f"class-{aid}",
            recorded_at=when,
            photo_url=f"https://photos/{aid}.jpg",
        ),
        trainer_name="Tina",
        trainer_email="tina@example.com",
        school_name="North School",
    )


def rep(rid, when, author_id=10, school_id=1):
    return ReportRow(
        report=DailyReport(
            report_id=rid,
            type=ReportType.TRAINER_CLASS,
            school_id=school_id,
            author_id=author_id,
            class_label=None,
            topics="t",
            summary="s",
            notes=None,
            recorded_at=when,
        ),
        trainer_name="Tina",
        trainer_email="tina@example.com",
        school_name="North School",
    )


def test_group_key_format():
    assert group_key("2025-03-03", 10, 1) == "2025-03-03_10_1"
    assert group_key("2025-03-03", 10, None) == "2025-03-03_10_"


def test_earliest_attendance_wins_and_reports_attach():
    a_0910 = att(3, datetime(2025, 3, 3, 9, 10))
    a_0900 = att(1, datetime(2025, 3, 3, 9, 0))
    a_0905 = att(2, datetime(2025, 3, 3, 9, 5))
    r_morning = rep(1, datetime(2025, 3, 3, 11, 0))
    r_evening = rep(2, datetime(2025, 3, 3, 17, 0))

    result = combine_records([a_0910, a_0900, a_0905], [r_morning, r_evening])

    assert len(result) == 1
    day = result[0]
    assert day.attendance is a_0900
    assert day.date == datetime(2025, 3, 3, 9, 0)
    assert [r.report.report_id for r in day.reports] == [2, 1]


def test_equal_timestamps_keep_lowest_id():
    when = datetime(2025, 3, 3, 9, 0)
    result = combine_records([att(7, when), att(4, when)], [])
    assert result[0].attendance.record.attendance_id == 4


def test_report_without_attendance_forms_its_own_row():
    result = combine_records(
        [att(1, datetime(2025, 3, 3, 9, 0))],
        [rep(1, datetime(2025, 3, 4, 15, 0)), rep(2, datetime(2025, 3, 3, 15, 0), school_id=2)],
    )

    assert [(c.date.date().isoformat(), c.school_id, c.attendance is not None) for c in result] == [
        ("2025-03-04", 1, False),
        ("2025-03-03", 2, False),
        ("2025-03-03", 1, True),
    ]


def test_different_trainers_same_day_are_separate():
    result = combine_records(
        [att(1, datetime(2025, 3, 3, 9, 0), trainer_id=10), att(2, datetime(2025, 3, 3, 8, 0), trainer_id=11)],
        [],
    )
    assert [c.trainer_id for c in result] == [10, 11]


def test_result_is_independent_of_input_order():
    attendance = [att(1, datetime(2025, 3, 3, 9, 0)), att(2, datetime(2025, 3, 3, 9, 5)), att(3, datetime(2025, 3, 5, 9, 0))]
    reports = [rep(1, datetime(2025, 3, 3, 12, 0)), rep(2, datetime(2025, 3, 6, 12, 0))]

    forward = [c.to_dict() for c in combine_records(attendance, reports)]
    backward = [c.to_dict() for c in combine_records(list(reversed(attendance)), list(reversed(reports)))]

    assert forward == backward
    assert [c["date"][:10] for c in forward] == ["2025-03-06", "2025-03-05", "2025-03-03"]


def test_empty_inputs():
    assert combine_records([], []) == []
