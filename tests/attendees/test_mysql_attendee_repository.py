from __future__ import annotations

from datetime import datetime, timezone

import mysql.connector
import pytest

from src.event_checkin.event_checkin.attendees.mysql_attendee_repository import MySQLAttendeeRepository
from src.event_checkin.event_checkin.core.exceptions import StorageError


class FakeCursor:
    def __init__(self, conn):
        self._conn = conn
        self.rowcount = 0

    def execute(self, sql, params=None):
        self._conn.executed.append((" ".join(sql.split()), params))
        if self._conn.error is not None:
            raise self._conn.error
        self.rowcount = self._conn.rowcounts.pop(0) if self._conn.rowcounts else 0

    def executemany(self, sql, seq):
        for params in seq:
            self.execute(sql, params)

    def fetchone(self):
        return self._conn.rows.pop(0) if self._conn.rows else None

    def fetchall(self):
        rows, self._conn.rows = self._conn.rows, []
        return rows

    def close(self):
        pass


class FakeConn:
    def __init__(self, *, rowcounts=None, rows=None, error=None):
        self.executed = []
        self.rowcounts = list(rowcounts or [])
        self.rows = list(rows or [])
        self.error = error
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def cursor(self, dictionary=False):
        return FakeCursor(self)

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


class FakeConnFactory:
    def __init__(self, conn):
        self.conn = conn

    def connect(self):
        return self.conn


def _row(**overrides):
    row = {
        "attendee_id": "AbC123",
        "name": "Jane Doe",
        "age": 25,
        "blood_group": "O+",
        "gender": "female",
        "job": "Nurse",
        "area": "Salmiya",
        "whatsapp_number": "99112233",
        "email": "jane@example.com",
        "code_payload": '{"id":"AbC123"}',
        "qr_code_url": None,
        "registered_at": datetime(2026, 3, 14, 9, 30),
        "checked_in_at": None,
    }
    row.update(overrides)
    return row


def test_get_by_id_converts_naive_utc():
    conn = FakeConn(rows=[_row(checked_in_at=datetime(2026, 3, 14, 10, 0))])

    a = MySQLAttendeeRepository(FakeConnFactory(conn)).get_by_id("AbC123")

    assert a.registered_at == datetime(2026, 3, 14, 9, 30, tzinfo=timezone.utc)
    assert a.checked_in_at == datetime(2026, 3, 14, 10, 0, tzinfo=timezone.utc)
    assert a.qr_code_url == ""
    assert conn.committed and conn.closed


def test_mark_checked_in_is_conditional_update():
    conn = FakeConn(rowcounts=[1])
    at = datetime(2026, 3, 14, 10, 0, tzinfo=timezone.utc)

    assert MySQLAttendeeRepository(FakeConnFactory(conn)).mark_checked_in("AbC123", checked_in_at=at)

    sql, params = conn.executed[0]
    assert sql == "UPDATE attendees SET checked_in_at=%s WHERE attendee_id=%s AND checked_in_at IS NULL"
    assert params == (datetime(2026, 3, 14, 10, 0), "AbC123")


def test_mark_checked_in_loses_when_no_row_changes():
    conn = FakeConn(rowcounts=[0])
    at = datetime(2026, 3, 14, 10, 0, tzinfo=timezone.utc)

    assert not MySQLAttendeeRepository(FakeConnFactory(conn)).mark_checked_in("AbC123", checked_in_at=at)


def test_clear_checked_in_on_already_clear_record_still_reports_found():
    conn = FakeConn(rowcounts=[0, 1], rows=[{"present": 1}])

    assert MySQLAttendeeRepository(FakeConnFactory(conn)).clear_checked_in("AbC123")


def test_update_rejects_unknown_fields():
    repo = MySQLAttendeeRepository(FakeConnFactory(FakeConn()))
    with pytest.raises(ValueError):
        repo.update("AbC123", registered_at=datetime(2026, 1, 1))


def test_driver_error_becomes_storage_error():
    conn = FakeConn(error=mysql.connector.errors.DatabaseError(msg="Lock wait timeout exceeded"))

    with pytest.raises(StorageError):
        MySQLAttendeeRepository(FakeConnFactory(conn)).list_all()

    assert conn.rolled_back
    assert conn.closed
    assert not conn.committed


def test_update_builds_set_clause_and_converts_checked_in_at():
    conn = FakeConn(rowcounts=[1])
    at = datetime(2026, 3, 14, 12, 0, tzinfo=timezone.utc)

    changed = MySQLAttendeeRepository(FakeConnFactory(conn)).update("AbC123", job="Doctor", checked_in_at=at)

    assert changed
    sql, params = conn.executed[0]
    assert sql == "UPDATE attendees SET job=%s, checked_in_at=%s WHERE attendee_id=%s"
    assert params == ("Doctor", datetime(2026, 3, 14, 12, 0), "AbC123")
    assert conn.committed


def test_update_reports_unknown_id():
    conn = FakeConn(rowcounts=[0])

    assert not MySQLAttendeeRepository(FakeConnFactory(conn)).update("missing", area="Hawally")
