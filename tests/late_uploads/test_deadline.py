from __future__ import annotations

from datetime import datetime

import pytest

from src.robochamps_erp.robochamps_erp.core.exceptions import ValidationError
from src.robochamps_erp.robochamps_erp.late_uploads.deadline import (
    is_submission_window_open,
    parse_month,
    submission_deadline,
)


def test_deadline_is_end_of_fifth_of_next_month():
    assert submission_deadline("2025-03") == datetime(2025, 4, 5, 23, 59, 59, 999000)


def test_december_rolls_into_next_year():
    assert submission_deadline("2025-12") == datetime(2026, 1, 5, 23, 59, 59, 999000)


def test_window_boundaries():
    assert is_submission_window_open("2025-03", datetime(2025, 3, 20, 12, 0))
    assert is_submission_window_open("2025-03", datetime(2025, 4, 5, 23, 59, 59, 999000))
    assert not is_submission_window_open("2025-03", datetime(2025, 4, 6, 0, 0, 0))


@pytest.mark.parametrize(
    "month",
    ["2025-3", "25-03", "2025/03", "", "2025-03-01", "2025-00", "2025-13", "2025-03\n", " 2025-03", "\u0662\u0660\u0662\u0665-\u0660\u0663"],
)
def test_parse_month_rejects_bad_input(month):
    with pytest.raises(ValidationError) as exc:
        parse_month(month)
    assert "month" in exc.value.field_errors


def test_parse_month_rejects_non_string():
    with pytest.raises(ValidationError):
        parse_month(202503)


def test_parse_month_splits_year_and_number():
    assert parse_month("2024-11") == (2024, 11)
