from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable

from ..attendees import codes
from ..attendees.repository import AttendeeRepository
from ..common.datetime_utils import utc_now
from ..core.constants import CHECKIN_STORAGE_ERROR_MESSAGE, INVALID_CODE_MESSAGE
from ..core.exceptions import StorageError
from .model import CheckInResult

logger = logging.getLogger(__name__)


class CheckInService:
    """Marks attendance exactly once per attendee.

    The write is delegated to the repository's compare-and-set, so any number
    of app instances can scan the same badge concurrently.
    """

    def __init__(self, attendees: AttendeeRepository, *, clock: Callable[[], datetime] = utc_now):
        self._attendees = attendees
        self._clock = clock

    def check_in(self, attendee_id: str) -> CheckInResult:
        attendee_id = (attendee_id or "").strip()
        if not attendee_id:
            return CheckInResult(found=False)

        try:
            return self._check_in(attendee_id)
        except StorageError:
            logger.exception("Check-in failed for %s", attendee_id)
            return CheckInResult(found=False, error=CHECKIN_STORAGE_ERROR_MESSAGE, storage_failed=True)

    def _check_in(self, attendee_id: str) -> CheckInResult:
        record = self._attendees.get_by_id(attendee_id)
        if record is None:
            logger.info("Check-in for unknown attendee %s", attendee_id)
            return CheckInResult(found=False)

        if record.checked_in_at is not None:
            return CheckInResult(found=True, already_checked_in=True, attendee=record)

        at = max(self._clock(), record.registered_at)
        if self._attendees.mark_checked_in(attendee_id, checked_in_at=at):
            logger.info("Checked in attendee %s", attendee_id)
            return CheckInResult(found=True, already_checked_in=False, attendee=replace(record, checked_in_at=at))

        # Lost the race: someone else's write landed between our read and CAS.
        current = self._attendees.get_by_id(attendee_id)
        if current is None:
            return CheckInResult(found=False)
        return CheckInResult(found=True, already_checked_in=True, attendee=current)

    def check_in_code(self, scanned_text: str) -> CheckInResult:
        attendee_id = codes.decode_payload(scanned_text)
        if attendee_id is None:
            logger.info("Rejected undecodable code")
            return CheckInResult(found=False, error=INVALID_CODE_MESSAGE)
        return self.check_in(attendee_id)

    def clear_check_in(self, attendee_id: str) -> CheckInResult:
        attendee_id = (attendee_id or "").strip()
        try:
            if not attendee_id or not self._attendees.clear_checked_in(attendee_id):
                return CheckInResult(found=False)
            record = self._attendees.get_by_id(attendee_id)
        except StorageError:
            logger.exception("Clearing check-in failed for %s", attendee_id)
            return CheckInResult(found=False, error=CHECKIN_STORAGE_ERROR_MESSAGE, storage_failed=True)

        if record is None:
            return CheckInResult(found=False)
        logger.info("Cleared check-in for attendee %s", attendee_id)
        return CheckInResult(found=True, attendee=record)
