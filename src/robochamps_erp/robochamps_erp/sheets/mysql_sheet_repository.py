from __future__ import annotations

from dataclasses import asdict
from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import WhereBuilder, db_cursor, fetchall
from .model import NewSheet, SheetQuery, UploadedCombinedSheet
from .repository import SheetRepository


def _to_sheet(r: dict) -> UploadedCombinedSheet:
    return UploadedCombinedSheet(
        sheet_id=int(r["sheet_id"]),
        trainer_id=int(r["trainer_id"]),
        trainer_name=r["trainer_name"],
        trainer_email=r["trainer_email"],
        school_id=int(r["school_id"]),
        school_name=r["school_name"],
        month=r["month"],
        year=int(r["year"]),
        file_url=r["file_url"],
        file_name=r["file_name"],
        file_size=int(r["file_size"]),
        uploaded_at=r["uploaded_at"],
    )


class MySQLSheetRepository(SheetRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def insert(self, new: NewSheet) -> UploadedCombinedSheet:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO uploaded_combined_sheets(
                    trainer_id, trainer_name, trainer_email, school_id, school_name,
                    month, year, file_url, file_name, file_size, uploaded_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(new.trainer_id),
                    new.trainer_name,
                    new.trainer_email,
                    int(new.school_id),
                    new.school_name,
                    new.month,
                    int(new.year),
                    new.file_url,
                    new.file_name,
                    int(new.file_size),
                    new.uploaded_at,
                ),
            )
            sheet_id = int(cur.lastrowid)
        return UploadedCombinedSheet(sheet_id=sheet_id, **asdict(new))

    def find(self, query: SheetQuery) -> Sequence[UploadedCombinedSheet]:
        where = WhereBuilder()
        where.add_if(query.trainer_id, "trainer_id=%s")
        where.add_if(query.school_id, "school_id=%s")
        where.add_if(query.month, "month=%s")
        where.add_if(query.year, "year=%s")

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT sheet_id, trainer_id, trainer_name, trainer_email, school_id, school_name,
                       month, year, file_url, file_name, file_size, uploaded_at
                FROM uploaded_combined_sheets
                WHERE {where.sql}
                ORDER BY uploaded_at DESC, sheet_id DESC
                """,
                where.params(),
            )
            return [_to_sheet(r) for r in fetchall(cur)]
