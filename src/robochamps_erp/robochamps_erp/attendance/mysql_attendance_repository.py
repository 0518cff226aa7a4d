from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import WhereBuilder, db_cursor, fetchall
from .model import AttendanceQuery, AttendanceRecord, GeoPoint
from .repository import AttendanceRepository


def _to_record(r: dict) -> AttendanceRecord:
    geo = None
    if r.get("geo_lat") is not None and r.get("geo_lng") is not None:
        geo = GeoPoint(
            lat=float(r["geo_lat"]),
            lng=float(r["geo_lng"]),
            accuracy=float(r["geo_accuracy"]) if r.get("geo_accuracy") is not None else None,
            captured_at=r.get("geo_captured_at") or r["recorded_at"],
        )
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        school_id=int(r["school_id"]),
        trainer_id=int(r["trainer_id"]),
        class_label=r["class_label"],
        recorded_at=r["recorded_at"],
        photo_url=r["photo_url"],
        geo=geo,
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(
                    school_id, trainer_id, class_label, recorded_at, photo_url,
                    geo_lat, geo_lng, geo_accuracy, geo_captured_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(school_id),
                    int(trainer_id),
                    class_label,
                    recorded_at,
                    photo_url,
                    geo.lat if geo else None,
                    geo.lng if geo else None,
                    geo.accuracy if geo else None,
                    geo.captured_at if geo else None,
                ),
            )
            return int(cur.lastrowid)

    def find(self, query: AttendanceQuery) -> Sequence[AttendanceRecord]:
        where = WhereBuilder()
        where.add_if(query.trainer_id, "trainer_id=%s")
        where.add_if(query.school_id, "school_id=%s")
        where.add_if(query.start, "recorded_at >= %s")
        where.add_if(query.end, "recorded_at <= %s")

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT attendance_id, school_id, trainer_id, class_label, recorded_at, photo_url,
                       geo_lat, geo_lng, geo_accuracy, geo_captured_at
                FROM attendance_records
                WHERE {where.sql}
                ORDER BY recorded_at DESC, attendance_id DESC
                """,
                where.params(),
            )
            return [_to_record(r) for r in fetchall(cur)]
