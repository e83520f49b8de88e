from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from datetime import datetime
from typing import Any, Optional

from ..common.datetime_utils import to_iso
from ..core.enums import CheckInState


@dataclass(frozen=True)
class AttendeeProfile:
    """Validated registration data, before an id and timestamps exist."""

    name: str
    age: int
    blood_group: str
    gender: str
    job: str
    area: str
    whatsapp_number: str
    email: str


PROFILE_FIELDS: tuple[str, ...] = tuple(f.name for f in fields(AttendeeProfile))


@dataclass(frozen=True)
class Attendee:
    """Domain entity: one attendee's registration plus lifecycle timestamps."""

    attendee_id: str
    name: str
    age: int
    blood_group: str
    gender: str
    job: str
    area: str
    whatsapp_number: str
    email: str
    code_payload: str
    qr_code_url: str
    registered_at: datetime
    checked_in_at: Optional[datetime] = None

    @property
    def state(self) -> CheckInState:
        return CheckInState.CHECKED_IN if self.checked_in_at else CheckInState.REGISTERED

    @property
    def is_checked_in(self) -> bool:
        return self.checked_in_at is not None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["registered_at"] = to_iso(self.registered_at)
        data["checked_in_at"] = to_iso(self.checked_in_at)
        data["status"] = self.state.value
        return data
