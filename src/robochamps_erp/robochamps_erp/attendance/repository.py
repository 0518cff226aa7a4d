from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import AttendanceQuery, AttendanceRecord, GeoPoint


class AttendanceRepository(Protocol):
    def create(
        self,
        *,
        school_id: int,
        trainer_id: int,
        class_label: str,
        recorded_at: datetime,
        photo_url: str,
        geo: Optional[GeoPoint] = None,
    ) -> int:
        raise NotImplementedError

    def find(self, query: AttendanceQuery) -> Sequence[AttendanceRecord]:
        """Matching records, newest first."""

        raise NotImplementedError
