from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Mapping, Optional, Sequence

from ..common.datetime_utils import utc_now
from ..core.constants import (
    ATTENDEE_ID_LENGTH,
    DEFAULT_QR_IMAGE_BASE_URL,
    REGISTRATION_STORAGE_ERROR_MESSAGE,
    STORAGE_ERROR_MESSAGE,
)
from ..core.enums import CheckInState
from ..core.exceptions import StorageError, ValidationError
from . import codes
from .model import Attendee, AttendeeProfile
from .repository import AttendeeRepository
from .validation import validate_profile

logger = logging.getLogger(__name__)

_SEARCH_FIELDS = ("name", "email", "job", "area", "blood_group", "gender", "whatsapp_number")


def new_attendee_id() -> str:
    # token_urlsafe(15) yields exactly 20 URL-safe characters.
    return secrets.token_urlsafe(ATTENDEE_ID_LENGTH * 3 // 4)


@dataclass(frozen=True)
class RegistrationResult:
    ok: bool
    attendee: Optional[Attendee] = None
    errors: dict[str, list[str]] = field(default_factory=dict)
    message: Optional[str] = None


@dataclass(frozen=True)
class LookupResult:
    found: bool
    attendee: Optional[Attendee] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class ListResult:
    attendees: Sequence[Attendee] = ()
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class SummaryResult:
    total: int = 0
    registered: int = 0
    checked_in: int = 0
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def counts(self) -> dict[str, int]:
        return {"total": self.total, "registered": self.registered, "checked_in": self.checked_in}


class RegistrationService:
    def __init__(
        self,
        attendees: AttendeeRepository,
        *,
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = new_attendee_id,
        qr_image_base_url: str = DEFAULT_QR_IMAGE_BASE_URL,
    ):
        self._attendees = attendees
        self._clock = clock
        self._id_factory = id_factory
        self._qr_image_base_url = qr_image_base_url

    def build_attendee(self, profile: AttendeeProfile, *, registered_at: Optional[datetime] = None) -> Attendee:
        """Turn a validated profile into a fresh, not yet persisted record."""
        attendee_id = self._id_factory()
        payload = codes.build_payload(attendee_id)
        return Attendee(
            attendee_id=attendee_id,
            name=profile.name,
            age=profile.age,
            blood_group=profile.blood_group,
            gender=profile.gender,
            job=profile.job,
            area=profile.area,
            whatsapp_number=profile.whatsapp_number,
            email=profile.email,
            code_payload=payload,
            qr_code_url=codes.qr_image_url(payload, base_url=self._qr_image_base_url),
            registered_at=registered_at or self._clock(),
            checked_in_at=None,
        )

    def register(self, form: Mapping[str, Any]) -> RegistrationResult:
        try:
            profile = validate_profile(form)
        except ValidationError as e:
            return RegistrationResult(ok=False, errors=e.errors, message=str(e))

        attendee = self.build_attendee(profile)
        try:
            self._attendees.create(attendee)
        except StorageError:
            logger.exception("Failed to store registration for %s", profile.email)
            return RegistrationResult(ok=False, message=REGISTRATION_STORAGE_ERROR_MESSAGE)

        logger.info("Registered attendee %s", attendee.attendee_id)
        return RegistrationResult(ok=True, attendee=attendee)

    def get_attendee(self, attendee_id: str) -> LookupResult:
        attendee_id = (attendee_id or "").strip()
        if not attendee_id:
            return LookupResult(found=False)
        try:
            attendee = self._attendees.get_by_id(attendee_id)
        except StorageError:
            logger.exception("Failed to load attendee %s", attendee_id)
            return LookupResult(found=False, error=STORAGE_ERROR_MESSAGE)
        return LookupResult(found=attendee is not None, attendee=attendee)

    def list_attendees(self, search: str = "", state: Optional[CheckInState] = None) -> ListResult:
        try:
            rows = self._attendees.list_all()
        except StorageError:
            logger.exception("Failed to list attendees")
            return ListResult(error=STORAGE_ERROR_MESSAGE)

        term = (search or "").strip().lower()
        selected = []
        for a in rows:
            if state is not None and a.state != state:
                continue
            if term and not any(term in str(getattr(a, f)).lower() for f in _SEARCH_FIELDS):
                continue
            selected.append(a)
        return ListResult(attendees=selected)

    def summary(self) -> SummaryResult:
        result = self.list_attendees()
        if not result.ok:
            return SummaryResult(error=result.error)
        checked_in = sum(1 for a in result.attendees if a.is_checked_in)
        total = len(result.attendees)
        return SummaryResult(total=total, registered=total - checked_in, checked_in=checked_in)
