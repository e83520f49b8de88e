from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime, timezone
from typing import Optional

import pytest

from src.event_checkin.event_checkin.attendees.model import Attendee


class InMemoryAttendees:
    """Thread-safe stand-in for the MySQL repository.

    ``mark_checked_in`` holds the lock across test-and-set, mirroring the
    single-row UPDATE the database performs.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._by_id: dict[str, Attendee] = {}
        self.fail_with: Optional[Exception] = None

    def _maybe_fail(self):
        if self.fail_with is not None:
            raise self.fail_with

    def create(self, attendee: Attendee) -> str:
        self._maybe_fail()
        with self._lock:
            self._by_id[attendee.attendee_id] = attendee
        return attendee.attendee_id

    def create_many(self, attendees) -> int:
        self._maybe_fail()
        with self._lock:
            for a in attendees:
                self._by_id[a.attendee_id] = a
        return len(attendees)

    def get_by_id(self, attendee_id: str) -> Optional[Attendee]:
        self._maybe_fail()
        return self._by_id.get(attendee_id)

    def list_all(self):
        self._maybe_fail()
        return sorted(self._by_id.values(), key=lambda a: a.registered_at, reverse=True)

    def update(self, attendee_id: str, **fields) -> bool:
        self._maybe_fail()
        with self._lock:
            current = self._by_id.get(attendee_id)
            if current is None:
                return False
            self._by_id[attendee_id] = replace(current, **fields)
            return True

    def mark_checked_in(self, attendee_id: str, *, checked_in_at: datetime) -> bool:
        self._maybe_fail()
        with self._lock:
            current = self._by_id.get(attendee_id)
            if current is None or current.checked_in_at is not None:
                return False
            self._by_id[attendee_id] = replace(current, checked_in_at=checked_in_at)
            return True

    def clear_checked_in(self, attendee_id: str) -> bool:
        self._maybe_fail()
        with self._lock:
            current = self._by_id.get(attendee_id)
            if current is None:
                return False
            self._by_id[attendee_id] = replace(current, checked_in_at=None)
            return True

    def __len__(self) -> int:
        return len(self._by_id)


class Clock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 3, 14, 9, 30, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock(fixed_now) -> Clock:
    return Clock(fixed_now)


@pytest.fixture
def attendees_repo() -> InMemoryAttendees:
    return InMemoryAttendees()


@pytest.fixture
def jane_form() -> dict:
    return {
        "name": "Jane Doe",
        "age": 25,
        "bloodGroup": "O+",
        "gender": "female",
        "job": "Nurse",
        "area": "Salmiya",
        "whatsappNumber": "99112233",
        "email": "jane@example.com",
    }
