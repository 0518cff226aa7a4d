from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import WhereBuilder, db_cursor, fetchall, fetchone, like_contains
from .model import ClickQuery, MeetingLink, MeetingLinkClick
from .repository import MeetingLinkRepository

# Columns an admin may set through create/update.
EDITABLE_COLUMNS = ("title", "url", "description", "is_active", "scheduled_date", "scheduled_time")

_LINK_COLUMNS = """
    link_id, title, url, description, created_by, is_active, click_count,
    scheduled_date, scheduled_time, created_at, updated_at
"""


def _to_link(r: dict) -> MeetingLink:
    return MeetingLink(
        link_id=int(r["link_id"]),
        title=r["title"],
        url=r["url"],
        description=r.get("description"),
        created_by=int(r["created_by"]),
        is_active=bool(r["is_active"]),
        click_count=int(r["click_count"]),
        scheduled_date=r.get("scheduled_date"),
        scheduled_time=r.get("scheduled_time"),
        created_at=r["created_at"],
        updated_at=r["updated_at"],
    )


def _to_click(r: dict) -> MeetingLinkClick:
    return MeetingLinkClick(
        click_id=int(r["click_id"]),
        meeting_link_id=int(r["meeting_link_id"]),
        user_id=int(r["user_id"]),
        user_name=r["user_name"],
        user_email=r["user_email"],
        school_name=r.get("school_name"),
        clicked_at=r["clicked_at"],
    )


class MySQLMeetingLinkRepository(MeetingLinkRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, fields: Mapping[str, Any], created_by: int, now: datetime) -> MeetingLink:
        columns = [c for c in EDITABLE_COLUMNS if c in fields]
        values = [fields[c] for c in columns]
        placeholders = ",".join(["%s"] * (len(columns) + 4))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO meeting_links({", ".join(columns + ["created_by", "click_count", "created_at", "updated_at"])})
                VALUES({placeholders})
                """,
                tuple(values) + (int(created_by), 0, now, now),
            )
            link_id = int(cur.lastrowid)
            cur.execute(f"SELECT {_LINK_COLUMNS} FROM meeting_links WHERE link_id=%s", (link_id,))
            return _to_link(fetchone(cur))

    def get(self, *, link_id: int) -> Optional[MeetingLink]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_LINK_COLUMNS} FROM meeting_links WHERE link_id=%s", (int(link_id),))
            r = fetchone(cur)
            return _to_link(r) if r else None

    def update(self, *, link_id: int, fields: Mapping[str, Any], now: datetime) -> bool:
        columns = [c for c in EDITABLE_COLUMNS if c in fields]
        assignments = ", ".join([f"{c}=%s" for c in columns] + ["updated_at=%s"])

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT link_id FROM meeting_links WHERE link_id=%s", (int(link_id),))
            if not fetchone(cur):
                return False
            cur.execute(
                f"UPDATE meeting_links SET {assignments} WHERE link_id=%s",
                tuple(fields[c] for c in columns) + (now, int(link_id)),
            )
            return True

    def delete(self, *, link_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM meeting_links WHERE link_id=%s", (int(link_id),))
            return cur.rowcount > 0

    def list_links(self, *, active_only: bool) -> Sequence[MeetingLink]:
        where = "is_active=1" if active_only else "1=1"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_LINK_COLUMNS}
                FROM meeting_links
                WHERE {where}
                ORDER BY scheduled_date IS NULL, scheduled_date ASC, created_at DESC
                """
            )
            return [_to_link(r) for r in fetchall(cur)]

    def record_click(
        self,
        *,
        link_id: int,
        user_id: int,
        user_name: str,
        user_email: str,
        school_name: Optional[str],
        clicked_at: datetime,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO meeting_link_clicks(
                    meeting_link_id, user_id, user_name, user_email, school_name, clicked_at
                )
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(link_id), int(user_id), user_name, user_email, school_name, clicked_at),
            )
            click_id = int(cur.lastrowid)
            cur.execute("UPDATE meeting_links SET click_count = click_count + 1 WHERE link_id=%s", (int(link_id),))
            return click_id

    def find_clicks(self, query: ClickQuery) -> Sequence[MeetingLinkClick]:
        where = WhereBuilder()
        where.add_if(query.meeting_link_id, "meeting_link_id=%s")
        if query.school_name_contains:
            where.add("LOWER(school_name) LIKE %s", like_contains(query.school_name_contains))
        if query.email_contains:
            where.add("LOWER(user_email) LIKE %s", like_contains(query.email_contains))
        where.add_if(query.start, "clicked_at >= %s")
        where.add_if(query.end, "clicked_at <= %s")

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT click_id, meeting_link_id, user_id, user_name, user_email, school_name, clicked_at
                FROM meeting_link_clicks
                WHERE {where.sql}
                ORDER BY clicked_at DESC, click_id DESC
                """,
                where.params(),
            )
            return [_to_click(r) for r in fetchall(cur)]
