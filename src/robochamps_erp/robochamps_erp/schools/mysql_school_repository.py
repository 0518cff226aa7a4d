from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import School
from .repository import SchoolRepository

_COLUMNS = "school_id, name, location_text, school_code"

EDITABLE_COLUMNS = ("name", "location_text", "school_code")


def _to_school(row: dict) -> School:
    return School(
        school_id=int(row["school_id"]),
        name=row["name"],
        location_text=row.get("location_text") or "",
        school_code=row.get("school_code"),
    )


class MySQLSchoolRepository(SchoolRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _select_one(self, where: str, params: tuple) -> Optional[School]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM schools WHERE {where} LIMIT 1", params)
            row = fetchone(cur)
            return _to_school(row) if row else None

    def get_by_id(self, school_id: int) -> Optional[School]:
        return self._select_one("school_id=%s", (int(school_id),))

    def get_by_code(self, school_code: str) -> Optional[School]:
        return self._select_one("school_code=%s", (school_code,))

    def find_by_name_location(self, name: str, location_text: str) -> Optional[School]:
        return self._select_one("name=%s AND location_text=%s", (name, location_text))

    def list_all(self) -> Sequence[School]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM schools ORDER BY name")
            return [_to_school(r) for r in fetchall(cur)]

    def create(self, *, name: str, location_text: str, school_code: Optional[str]) -> School:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO schools(name, location_text, school_code) VALUES(%s,%s,%s)",
                (name, location_text, school_code),
            )
            school_id = int(cur.lastrowid)
            cur.execute(f"SELECT {_COLUMNS} FROM schools WHERE school_id=%s", (school_id,))
            return _to_school(fetchone(cur))

    def update(self, *, school_id: int, fields: Mapping[str, Any]) -> bool:
        columns = [c for c in EDITABLE_COLUMNS if c in fields]

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT school_id FROM schools WHERE school_id=%s", (int(school_id),))
            if not fetchone(cur):
                return False
            if columns:
                cur.execute(
                    f"UPDATE schools SET {', '.join(f'{c}=%s' for c in columns)} WHERE school_id=%s",
                    tuple(fields[c] for c in columns) + (int(school_id),),
                )
            return True

    def delete_by_id(self, school_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM schools WHERE school_id=%s", (int(school_id),))
            return cur.rowcount > 0
