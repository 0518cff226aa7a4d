from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, List, Optional, Sequence

from ..access.context import CallerContext, require_caller, require_role
from ..access.filters import RecordFilters, attendance_scope
from ..common.datetime_utils import now_local
from ..common.validators import FieldErrors
from ..core.enums import TRAINER_ROLES
from ..core.exceptions import ValidationError
from ..schools.repository import SchoolRepository
from ..storage.blob import BlobStorage, FileUpload
from ..users.directory import Directory, matches_trainer
from ..users.repository import UserRepository
from .model import AttendanceRecord, AttendanceRow, GeoPoint
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def _optional_float(value: Any, field_name: str, errors: FieldErrors) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        errors.add(field_name, "must be a number")
        return None


def enrich_attendance(records: Sequence[AttendanceRecord], directory: Directory) -> List[AttendanceRow]:
    rows: List[AttendanceRow] = []
    for r in records:
        trainer = directory.trainer(r.trainer_id)
        rows.append(
            AttendanceRow(
                record=r,
                trainer_name=trainer.name,
                trainer_email=trainer.email,
                school_name=directory.school_name(r.school_id),
            )
        )
    return rows


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        users: UserRepository,
        schools: SchoolRepository,
        storage: BlobStorage,
        *,
        bucket: str,
    ):
        self._attendance = attendance
        self._users = users
        self._schools = schools
        self._storage = storage
        self._bucket = bucket

    def mark(
        self,
        *,
        caller: Optional[CallerContext],
        class_label: Optional[str],
        photo: Optional[FileUpload],
        lat: Any = None,
        lng: Any = None,
        accuracy: Any = None,
        now: Optional[datetime] = None,
    ) -> int:
        caller = require_role(caller, TRAINER_ROLES, "Only trainers can mark attendance")
        if caller.school_id is None:
            raise ValidationError("School not found", {"school": "not found"})

        errors = FieldErrors()
        if photo is None or not photo.data:
            errors.add("photo", "is required")
        if not class_label or not class_label.strip():
            errors.add("class_label", "is required")
        lat_v = _optional_float(lat, "lat", errors)
        lng_v = _optional_float(lng, "lng", errors)
        accuracy_v = _optional_float(accuracy, "accuracy", errors)
        errors.raise_if_any()

        now = now or now_local()
        millis = int(now.timestamp() * 1000)
        photo_url = self._storage.put(
            bucket=self._bucket,
            path=f"{caller.caller_id}/attendance-{millis}.{photo.extension}",
            upload=photo,
        )

        geo = None
        if lat_v is not None and lng_v is not None:
            geo = GeoPoint(lat=lat_v, lng=lng_v, accuracy=accuracy_v, captured_at=now)

        attendance_id = self._attendance.create(
            school_id=caller.school_id,
            trainer_id=caller.caller_id,
            class_label=class_label.strip(),
            recorded_at=now,
            photo_url=photo_url,
            geo=geo,
        )
        logger.info("Attendance %s marked by trainer %s", attendance_id, caller.caller_id)
        return attendance_id

    def list_records(
        self,
        *,
        caller: Optional[CallerContext],
        filters: RecordFilters = RecordFilters(),
    ) -> List[AttendanceRow]:
        caller = require_caller(caller)
        records = self._attendance.find(attendance_scope(caller, filters))
        directory = Directory.load(self._users, self._schools)
        rows = enrich_attendance(records, directory)
        return [
            row
            for row in rows
            if matches_trainer(row.trainer_name, row.trainer_email, name=filters.trainer_name, email=filters.trainer_email)
        ]
