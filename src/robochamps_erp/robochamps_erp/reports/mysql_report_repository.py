from __future__ import annotations

from typing import Sequence

from ..core.enums import ReportType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import WhereBuilder, db_cursor, fetchall
from .model import DailyReport, NewReport, ReportQuery
from .repository import ReportRepository


def _to_report(r: dict) -> DailyReport:
    return DailyReport(
        report_id=int(r["report_id"]),
        type=ReportType(r["type"]),
        school_id=int(r["school_id"]) if r.get("school_id") is not None else None,
        author_id=int(r["author_id"]),
        class_label=r.get("class_label"),
        topics=r["topics"],
        summary=r["summary"],
        notes=r.get("notes"),
        recorded_at=r["recorded_at"],
    )


class MySQLReportRepository(ReportRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, new: NewReport) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO daily_reports(
                    type, school_id, author_id, class_label, topics, summary, notes, recorded_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    new.type.value,
                    new.school_id,
                    int(new.author_id),
                    new.class_label,
                    new.topics,
                    new.summary,
                    new.notes,
                    new.recorded_at,
                ),
            )
            return int(cur.lastrowid)

    def find(self, query: ReportQuery) -> Sequence[DailyReport]:
        where = WhereBuilder()
        where.add_if(query.author_id, "author_id=%s")
        where.add_if(query.type.value if query.type else None, "type=%s")
        where.add_if(query.school_id, "school_id=%s")
        where.add_if(query.start, "recorded_at >= %s")
        where.add_if(query.end, "recorded_at <= %s")

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT report_id, type, school_id, author_id, class_label,
                       topics, summary, notes, recorded_at
                FROM daily_reports
                WHERE {where.sql}
                ORDER BY recorded_at DESC, report_id DESC
                """,
                where.params(),
            )
            return [_to_report(r) for r in fetchall(cur)]
