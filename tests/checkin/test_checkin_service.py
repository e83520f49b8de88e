from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta

from src.event_checkin.event_checkin.attendees.service import RegistrationService
from src.event_checkin.event_checkin.checkin.service import CheckInService
from src.event_checkin.event_checkin.core.constants import CHECKIN_STORAGE_ERROR_MESSAGE, INVALID_CODE_MESSAGE
from src.event_checkin.event_checkin.core.enums import CheckInState
from src.event_checkin.event_checkin.core.exceptions import StorageError


def _register(repo, clock, form):
    return RegistrationService(repo, clock=clock).register(form).attendee


def test_jane_doe_checks_in_once(attendees_repo, clock, fixed_now, jane_form):
    jane = _register(attendees_repo, clock, jane_form)
    assert jane.checked_in_at is None
    assert jane.attendee_id in jane.code_payload

    clock.now = fixed_now + timedelta(hours=2)
    svc = CheckInService(attendees_repo, clock=clock)

    first = svc.check_in(jane.attendee_id)
    assert first.found
    assert not first.already_checked_in
    assert first.success
    assert first.attendee.checked_in_at == fixed_now + timedelta(hours=2)
    assert first.message == "Jane Doe checked in successfully."

    clock.now = fixed_now + timedelta(hours=3)
    second = svc.check_in(jane.attendee_id)
    assert second.found
    assert second.already_checked_in
    assert not second.success
    assert second.attendee.checked_in_at == first.attendee.checked_in_at
    assert second.message.startswith("This attendee has already been checked in at 2026-03-14 11:30:00")


def test_check_in_time_never_precedes_registration(attendees_repo, clock, fixed_now, jane_form):
    jane = _register(attendees_repo, clock, jane_form)
    clock.now = fixed_now - timedelta(minutes=10)

    result = CheckInService(attendees_repo, clock=clock).check_in(jane.attendee_id)

    assert result.success
    assert result.attendee.checked_in_at >= jane.registered_at
    assert attendees_repo.get_by_id(jane.attendee_id).checked_in_at == jane.registered_at


def test_check_in_unknown_id_does_not_mutate(attendees_repo, clock, jane_form):
    jane = _register(attendees_repo, clock, jane_form)

    result = CheckInService(attendees_repo, clock=clock).check_in("no-such-attendee")

    assert not result.found
    assert result.error is None
    assert result.message == "Attendee not found."
    assert attendees_repo.get_by_id(jane.attendee_id).checked_in_at is None


def test_clear_then_check_in_again(attendees_repo, clock, fixed_now, jane_form):
    jane = _register(attendees_repo, clock, jane_form)
    svc = CheckInService(attendees_repo, clock=clock)
    assert svc.check_in(jane.attendee_id).success

    cleared = svc.clear_check_in(jane.attendee_id)
    assert cleared.found
    assert cleared.attendee.state == CheckInState.REGISTERED

    clock.now = fixed_now + timedelta(minutes=45)
    again = svc.check_in(jane.attendee_id)
    assert again.success
    assert again.attendee.checked_in_at == fixed_now + timedelta(minutes=45)


def test_clear_unknown_id(attendees_repo, clock):
    result = CheckInService(attendees_repo, clock=clock).clear_check_in("missing")
    assert not result.found
    assert not result.storage_failed


def test_check_in_code_accepts_json_and_url(attendees_repo, clock, jane_form):
    a = _register(attendees_repo, clock, jane_form)
    b = _register(attendees_repo, clock, dict(jane_form, email="b@example.com"))
    svc = CheckInService(attendees_repo, clock=clock)

    assert svc.check_in_code(a.code_payload).success
    assert svc.check_in_code(f"https://event.example.com/participant/{b.attendee_id}").success


def test_check_in_code_rejects_garbage(attendees_repo, clock):
    result = CheckInService(attendees_repo, clock=clock).check_in_code('{"name": "x"}')

    assert not result.found
    assert result.error == INVALID_CODE_MESSAGE
    assert not result.storage_failed


def test_storage_failure_is_reported_not_raised(attendees_repo, clock, jane_form):
    jane = _register(attendees_repo, clock, jane_form)
    attendees_repo.fail_with = StorageError("Database operation failed: Lock wait timeout exceeded")

    result = CheckInService(attendees_repo, clock=clock).check_in(jane.attendee_id)

    assert not result.found
    assert result.storage_failed
    assert result.message == CHECKIN_STORAGE_ERROR_MESSAGE


def test_concurrent_check_ins_have_exactly_one_winner(attendees_repo, clock, jane_form):
    jane = _register(attendees_repo, clock, jane_form)
    svc = CheckInService(attendees_repo, clock=clock)

    n = 20
    with ThreadPoolExecutor(max_workers=n) as pool:
        results = list(pool.map(lambda _: svc.check_in(jane.attendee_id), range(n)))

    assert all(r.found for r in results)
    assert sum(1 for r in results if not r.already_checked_in) == 1
    stored = attendees_repo.get_by_id(jane.attendee_id).checked_in_at
    assert all(r.attendee.checked_in_at == stored for r in results)


def test_lost_race_reports_already_checked_in(attendees_repo, clock, fixed_now, jane_form):
    jane = _register(attendees_repo, clock, jane_form)

    class RacingRepo:
        """Another scanner wins between our read and our write."""

        def __init__(self, inner):
            self._inner = inner
            self._reads = 0

        def get_by_id(self, attendee_id):
            record = self._inner.get_by_id(attendee_id)
            self._reads += 1
            if self._reads == 1:
                self._inner.mark_checked_in(attendee_id, checked_in_at=fixed_now + timedelta(seconds=1))
            return record

        def mark_checked_in(self, attendee_id, *, checked_in_at):
            return self._inner.mark_checked_in(attendee_id, checked_in_at=checked_in_at)

    clock.now = fixed_now + timedelta(seconds=2)
    result = CheckInService(RacingRepo(attendees_repo), clock=clock).check_in(jane.attendee_id)

    assert result.found
    assert result.already_checked_in
    assert result.attendee.checked_in_at == fixed_now + timedelta(seconds=1)
