from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from ..attendance.model import AttendanceRow
from ..reports.model import ReportRow


@dataclass
class CombinedRecord:
    """One trainer's day at one school: first attendance mark plus its reports.

    Derived on every request, never stored.
    """

    date: datetime
    trainer_id: int
    trainer_name: str
    trainer_email: str
    school_id: Optional[int]
    school_name: str
    attendance: Optional[AttendanceRow] = None
    reports: List[ReportRow] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "trainer_id": self.trainer_id,
            "trainer_name": self.trainer_name,
            "trainer_email": self.trainer_email,
            "school_id": self.school_id,
            "school_name": self.school_name,
            "attendance": self.attendance.to_dict() if self.attendance else None,
            "reports": [r.to_dict() for r in self.reports],
        }
