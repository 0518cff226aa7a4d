from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import iso_or_none


@dataclass(frozen=True)
class GeoPoint:
    lat: float
    lng: float
    captured_at: datetime
    accuracy: Optional[float] = None


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: a trainer's attendance mark for one class. Immutable once stored."""

    attendance_id: int
    school_id: int
    trainer_id: int
    class_label: str
    recorded_at: datetime
    photo_url: str
    geo: Optional[GeoPoint] = None


@dataclass(frozen=True)
class AttendanceQuery:
    """Store-level filter (every field is an equality/range condition)."""

    trainer_id: Optional[int] = None
    school_id: Optional[int] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None


@dataclass(frozen=True)
class AttendanceRow:
    """Read-model: attendance record enriched with display names."""

    record: AttendanceRecord
    trainer_name: str
    trainer_email: str
    school_name: str

    def to_dict(self) -> dict:
        r = self.record
        return {
            "id": r.attendance_id,
            "school_id": r.school_id,
            "trainer_id": r.trainer_id,
            "class_label": r.class_label,
            "datetime": r.recorded_at.isoformat(),
            "photo_url": r.photo_url,
            "geo": (
                {
                    "lat": r.geo.lat,
                    "lng": r.geo.lng,
                    "accuracy": r.geo.accuracy,
                    "captured_at": iso_or_none(r.geo.captured_at),
                }
                if r.geo
                else None
            ),
            "trainer_name": self.trainer_name,
            "trainer_email": self.trainer_email,
            "school_name": self.school_name,
        }
