from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import User
from .repository import UserRepository

_COLUMNS = "user_id, name, email, password_hash, role, school_id"

# Columns an admin may change after creation.
EDITABLE_COLUMNS = ("name", "role", "school_id", "password_hash")


def _to_user(row: dict) -> User:
    return User(
        user_id=int(row["user_id"]),
        name=row["name"],
        email=row["email"],
        password_hash=row["password_hash"],
        role=Role(row["role"]),
        school_id=int(row["school_id"]) if row.get("school_id") is not None else None,
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE email=%s", (email.strip().lower(),))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def list_all(self) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users ORDER BY user_id")
            return [_to_user(r) for r in fetchall(cur)]

    def create_user(
        self,
        *,
        name: str,
        email: str,
        password_hash: str,
        role: Role,
        school_id: Optional[int],
    ) -> User:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(name, email, password_hash, role, school_id)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (name, email.strip().lower(), password_hash, role.value, school_id),
            )
            user_id = int(cur.lastrowid)
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE user_id=%s", (user_id,))
            return _to_user(fetchone(cur))

    def update(self, *, user_id: int, fields: Mapping[str, Any]) -> bool:
        columns = [c for c in EDITABLE_COLUMNS if c in fields]
        values = [fields[c].value if isinstance(fields[c], Role) else fields[c] for c in columns]

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT user_id FROM users WHERE user_id=%s", (int(user_id),))
            if not fetchone(cur):
                return False
            if columns:
                cur.execute(
                    f"UPDATE users SET {', '.join(f'{c}=%s' for c in columns)} WHERE user_id=%s",
                    tuple(values) + (int(user_id),),
                )
            return True

    def delete_by_id(self, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM users WHERE user_id=%s", (int(user_id),))
            return cur.rowcount > 0

    def count_by_school(self, school_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM users WHERE school_id=%s", (int(school_id),))
            row = fetchone(cur)
            return int(row["n"]) if row else 0
