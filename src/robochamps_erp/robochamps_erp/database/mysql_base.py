from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, List, Optional, Sequence

import mysql.connector

from ..core.exceptions import DependencyError
from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.Error as exc:
        conn.rollback()
        raise DependencyError("Database operation failed") from exc
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


class WhereBuilder:
    """Accumulates ``AND``-joined SQL conditions with their parameters."""

    def __init__(self) -> None:
        self._clauses: list[str] = ["1=1"]
        self._params: list[object] = []

    def add(self, clause: str, *params: object) -> "WhereBuilder":
        self._clauses.append(clause)
        self._params.extend(params)
        return self

    def add_if(self, value: object, clause: str) -> "WhereBuilder":
        if value is not None:
            self.add(clause, value)
        return self

    @property
    def sql(self) -> str:
        return " AND ".join(self._clauses)

    def params(self, *extra: object) -> Sequence[object]:
        return tuple(self._params) + tuple(extra)


def like_contains(value: str) -> str:
    """``LIKE`` pattern for a case-folded substring match, wildcards escaped."""

    escaped = value.lower().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"
