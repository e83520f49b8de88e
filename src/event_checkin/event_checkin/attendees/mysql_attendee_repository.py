from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Sequence

from ..common.datetime_utils import as_utc, to_db
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import PROFILE_FIELDS, Attendee
from .repository import AttendeeRepository

_COLUMNS = (
    "attendee_id, name, age, blood_group, gender, job, area, whatsapp_number, email, "
    "code_payload, qr_code_url, registered_at, checked_in_at"
)

_UPDATABLE = frozenset(PROFILE_FIELDS) | {"checked_in_at"}


def _row_to_attendee(r: dict) -> Attendee:
    return Attendee(
        attendee_id=str(r["attendee_id"]),
        name=r["name"],
        age=int(r["age"]),
        blood_group=r["blood_group"],
        gender=r["gender"],
        job=r["job"],
        area=r["area"],
        whatsapp_number=r["whatsapp_number"],
        email=r["email"],
        code_payload=r["code_payload"],
        qr_code_url=r.get("qr_code_url") or "",
        registered_at=as_utc(r["registered_at"]),
        checked_in_at=as_utc(r.get("checked_in_at")),
    )


def _insert_params(a: Attendee) -> tuple:
    return (
        a.attendee_id,
        a.name,
        int(a.age),
        a.blood_group,
        a.gender,
        a.job,
        a.area,
        a.whatsapp_number,
        a.email,
        a.code_payload,
        a.qr_code_url,
        to_db(a.registered_at),
        to_db(a.checked_in_at),
    )


_INSERT_SQL = f"""
    INSERT INTO attendees({_COLUMNS})
    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
"""


class MySQLAttendeeRepository(AttendeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, attendee: Attendee) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_INSERT_SQL, _insert_params(attendee))
            return attendee.attendee_id

    def create_many(self, attendees: Sequence[Attendee]) -> int:
        if not attendees:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(_INSERT_SQL, [_insert_params(a) for a in attendees])
            return len(attendees)

    def get_by_id(self, attendee_id: str) -> Optional[Attendee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendees WHERE attendee_id=%s",
                (attendee_id,),
            )
            r = fetchone(cur)
            return _row_to_attendee(r) if r else None

    def list_all(self) -> Sequence[Attendee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendees
                ORDER BY registered_at DESC, attendee_id ASC
                """
            )
            return [_row_to_attendee(r) for r in fetchall(cur)]

    def update(self, attendee_id: str, **fields: Any) -> bool:
        unknown = set(fields) - _UPDATABLE
        if unknown:
            raise ValueError(f"Cannot update fields: {', '.join(sorted(unknown))}")
        if not fields:
            return False

        sets = []
        params: list[object] = []
        for name, value in fields.items():
            sets.append(f"{name}=%s")
            params.append(to_db(value) if name == "checked_in_at" else value)
        params.append(attendee_id)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE attendees SET {', '.join(sets)} WHERE attendee_id=%s",
                tuple(params),
            )
            return cur.rowcount > 0

    def mark_checked_in(self, attendee_id: str, *, checked_in_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendees
                SET checked_in_at=%s
                WHERE attendee_id=%s AND checked_in_at IS NULL
                """,
                (to_db(checked_in_at), attendee_id),
            )
            return cur.rowcount > 0

    def clear_checked_in(self, attendee_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            # Matching on the id alone: MySQL reports 0 changed rows when the
            # value is already NULL, so existence is checked separately.
            cur.execute(
                "UPDATE attendees SET checked_in_at=NULL WHERE attendee_id=%s",
                (attendee_id,),
            )
            if cur.rowcount > 0:
                return True
            cur.execute("SELECT 1 AS present FROM attendees WHERE attendee_id=%s", (attendee_id,))
            return fetchone(cur) is not None
