"""Monthly submission deadline.

Signed sheets for month M may be uploaded directly until 23:59:59.999 on the
5th of the month after M. All datetimes here are naive server-local time.
"""

from __future__ import annotations

import re
from datetime import datetime

from ..core.constants import SUBMISSION_DEADLINE_DAY
from ..core.exceptions import ValidationError

_MONTH_RE = re.compile(r"[0-9]{4}-[0-9]{2}")


def parse_month(month: str) -> tuple[int, int]:
    """Split ``YYYY-MM`` into (year, month number)."""

    if not isinstance(month, str) or not _MONTH_RE.fullmatch(month):
        raise ValidationError("Month must be in YYYY-MM format", {"month": "must be in YYYY-MM format"})
    year, number = (int(part) for part in month.split("-"))
    if not 1 <= number <= 12:
        raise ValidationError("Month must be between 01 and 12", {"month": "must be between 01 and 12"})
    return year, number


def submission_deadline(month: str) -> datetime:
    year, number = parse_month(month)
    if number == 12:
        year, number = year + 1, 1
    else:
        number += 1
    return datetime(year, number, SUBMISSION_DEADLINE_DAY, 23, 59, 59, 999000)


def is_submission_window_open(month: str, now: datetime) -> bool:
    return now <= submission_deadline(month)
