from __future__ import annotations

import mysql.connector
import pytest

from src.robochamps_erp.robochamps_erp.core.exceptions import DependencyError
from src.robochamps_erp.robochamps_erp.database.mysql_base import WhereBuilder, db_cursor, like_contains


class FakeCursor:
    def __init__(self):
        self.closed = False

    def close(self):
        self.closed = True


class FakeConn:
    def __init__(self):
        self.cursor_obj = FakeCursor()
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def cursor(self, dictionary=True):
        return self.cursor_obj

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


class FakeFactory:
    def __init__(self):
        self.conn = FakeConn()

    def connect(self):
        return self.conn


def test_db_cursor_commits_on_success():
    factory = FakeFactory()
    with db_cursor(factory) as (_, cur):
        assert cur is factory.conn.cursor_obj
    assert factory.conn.committed and factory.conn.closed and cur.closed


def test_db_cursor_wraps_connector_errors():
    factory = FakeFactory()
    with pytest.raises(DependencyError):
        with db_cursor(factory):
            raise mysql.connector.Error("lost connection")
    assert factory.conn.rolled_back and not factory.conn.committed and factory.conn.closed


def test_db_cursor_reraises_other_errors():
    factory = FakeFactory()
    with pytest.raises(KeyError):
        with db_cursor(factory):
            raise KeyError("status")
    assert factory.conn.rolled_back


def test_where_builder_skips_missing_values():
    where = WhereBuilder().add_if(10, "trainer_id=%s").add_if(None, "status=%s").add("LOWER(school_name) LIKE %s", "%x%")
    assert where.sql == "1=1 AND trainer_id=%s AND LOWER(school_name) LIKE %s"
    assert where.params(200) == (10, "%x%", 200)


def test_like_contains_escapes_wildcards():
    assert like_contains("50%_Off") == "%50\\%\\_off%"
