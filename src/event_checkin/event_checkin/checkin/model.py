from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from ..attendees.model import Attendee


@dataclass(frozen=True)
class CheckInResult:
    """Outcome of a scan.

    ``found=False`` covers unknown ids, undecodable codes and storage failures
    (``error`` is set for the last two, ``storage_failed`` for the
    last one). A repeated scan is not an error.
    """

    found: bool
    already_checked_in: bool = False
    attendee: Optional[Attendee] = None
    error: Optional[str] = None
    storage_failed: bool = False

    @property
    def success(self) -> bool:
        return self.found and not self.already_checked_in and self.error is None

    @property
    def message(self) -> str:
        if self.error:
            return self.error
        if not self.found or self.attendee is None:
            return "Attendee not found."
        if self.already_checked_in:
            at = self.attendee.checked_in_at
            when = at.strftime("%Y-%m-%d %H:%M:%S UTC") if at else "an earlier time"
            return f"This attendee has already been checked in at {when}."
        if self.attendee.is_checked_in:
            return f"{self.attendee.name} checked in successfully."
        return f"{self.attendee.name} is registered."

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "found": self.found,
            "already_checked_in": self.already_checked_in,
            "message": self.message,
            "attendee": self.attendee.to_dict() if self.attendee else None,
        }
