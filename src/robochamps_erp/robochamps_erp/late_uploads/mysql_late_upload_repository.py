from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import RequestStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import WhereBuilder, db_cursor, fetchall, fetchone, like_contains
from .model import LateRequestQuery, LateUploadRequest, NewLateUploadRequest
from .repository import LateUploadRequestRepository

_COLUMNS = """
    request_id, trainer_id, trainer_name, trainer_email, school_id, school_name,
    month, year, reason, status, created_at,
    decided_at, decided_by_admin_id, decided_by_admin_name
"""


def _to_request(r: dict) -> LateUploadRequest:
    return LateUploadRequest(
        request_id=int(r["request_id"]),
        trainer_id=int(r["trainer_id"]),
        trainer_name=r["trainer_name"],
        trainer_email=r["trainer_email"],
        school_id=int(r["school_id"]),
        school_name=r["school_name"],
        month=r["month"],
        year=int(r["year"]),
        reason=r["reason"],
        status=RequestStatus(r["status"]),
        created_at=r["created_at"],
        decided_at=r.get("decided_at"),
        decided_by_admin_id=r.get("decided_by_admin_id"),
        decided_by_admin_name=r.get("decided_by_admin_name"),
    )


class MySQLLateUploadRequestRepository(LateUploadRequestRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def insert(self, new: NewLateUploadRequest) -> LateUploadRequest:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO late_upload_requests(
                    trainer_id, trainer_name, trainer_email, school_id, school_name,
                    month, year, reason, status, created_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(new.trainer_id),
                    new.trainer_name,
                    new.trainer_email,
                    int(new.school_id),
                    new.school_name,
                    new.month,
                    int(new.year),
                    new.reason,
                    RequestStatus.PENDING.value,
                    new.created_at,
                ),
            )
            request_id = int(cur.lastrowid)

        return LateUploadRequest(
            request_id=request_id,
            trainer_id=new.trainer_id,
            trainer_name=new.trainer_name,
            trainer_email=new.trainer_email,
            school_id=new.school_id,
            school_name=new.school_name,
            month=new.month,
            year=new.year,
            reason=new.reason,
            status=RequestStatus.PENDING,
            created_at=new.created_at,
        )

    def get(self, *, request_id: int) -> Optional[LateUploadRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM late_upload_requests WHERE request_id=%s", (int(request_id),))
            r = fetchone(cur)
            return _to_request(r) if r else None

    def find_for_key(self, *, trainer_id: int, month: str, year: int) -> Sequence[LateUploadRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM late_upload_requests
                WHERE trainer_id=%s AND month=%s AND year=%s
                ORDER BY created_at DESC, request_id DESC
                """,
                (int(trainer_id), month, int(year)),
            )
            return [_to_request(r) for r in fetchall(cur)]

    def find(self, query: LateRequestQuery) -> Sequence[LateUploadRequest]:
        where = WhereBuilder()
        where.add_if(query.trainer_id, "trainer_id=%s")
        where.add_if(query.status.value if query.status else None, "status=%s")
        where.add_if(query.month, "month=%s")
        if query.trainer_email_contains:
            where.add("LOWER(trainer_email) LIKE %s", like_contains(query.trainer_email_contains))
        if query.school_name_contains:
            where.add("LOWER(school_name) LIKE %s", like_contains(query.school_name_contains))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM late_upload_requests
                WHERE {where.sql}
                ORDER BY created_at DESC, request_id DESC
                """,
                where.params(),
            )
            return [_to_request(r) for r in fetchall(cur)]

    def decide(
        self,
        *,
        request_id: int,
        status: RequestStatus,
        decided_at: datetime,
        admin_id: int,
        admin_name: str,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE late_upload_requests
                SET status=%s, decided_at=%s, decided_by_admin_id=%s, decided_by_admin_name=%s
                WHERE request_id=%s AND status=%s
                """,
                (
                    status.value,
                    decided_at,
                    int(admin_id),
                    admin_name,
                    int(request_id),
                    RequestStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0
