"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

# Monthly sheets are due by the end of this day of the following month.
SUBMISSION_DEADLINE_DAY = 5

LATE_REASON_MIN_LENGTH = 10
MIN_YEAR = 2000
MAX_YEAR = 2100

MAX_SHEET_SIZE_BYTES = 10 * 1024 * 1024
ALLOWED_SHEET_CONTENT_TYPES = frozenset(
    {
        "application/pdf",
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        "application/vnd.ms-excel",
        "image/jpeg",
        "image/png",
        "image/jpg",
    }
)

DEFAULT_SHEETS_BUCKET = "combined-sheets"
DEFAULT_ATTENDANCE_BUCKET = "robochamps-attendance"

RECENT_CLICKS_LIMIT = 100
UNKNOWN_LABEL = "Unknown"

PASSWORD_MIN_LENGTH = 6
# Shown in the user listing for accounts without a school.
NO_SCHOOL_LABEL = "N/A"
