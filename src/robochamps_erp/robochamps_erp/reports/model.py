from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import ReportType


@dataclass(frozen=True)
class DailyReport:
    """Domain entity: narrative report of a class or a training session. Immutable once stored."""

    report_id: int
    type: ReportType
    school_id: Optional[int]
    author_id: int
    class_label: Optional[str]
    topics: str
    summary: str
    notes: Optional[str]
    recorded_at: datetime


@dataclass(frozen=True)
class NewReport:
    type: ReportType
    school_id: Optional[int]
    author_id: int
    class_label: Optional[str]
    topics: str
    summary: str
    notes: Optional[str]
    recorded_at: datetime


@dataclass(frozen=True)
class ReportQuery:
    author_id: Optional[int] = None
    type: Optional[ReportType] = None
    school_id: Optional[int] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None


@dataclass(frozen=True)
class ReportRow:
    """Read-model: report enriched with author and school display names."""

    report: DailyReport
    trainer_name: str
    trainer_email: str
    school_name: str

    def to_dict(self) -> dict:
        r = self.report
        return {
            "id": r.report_id,
            "type": r.type.value,
            "school_id": r.school_id,
            "author_id": r.author_id,
            "class_label": r.class_label,
            "topics": r.topics,
            "summary": r.summary,
            "notes": r.notes,
            "datetime": r.recorded_at.isoformat(),
            "trainer_name": self.trainer_name,
            "trainer_email": self.trainer_email,
            "school_name": self.school_name,
        }
