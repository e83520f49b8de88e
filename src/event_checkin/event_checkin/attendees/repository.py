from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Protocol, Sequence

from .model import Attendee


class AttendeeRepository(Protocol):
    """Record store for attendees.

    Implementations raise ``StorageError`` on backend failures. The service
    layer relies on ``mark_checked_in`` being atomic per record.
    """

    def create(self, attendee: Attendee) -> str:
        raise NotImplementedError

    def create_many(self, attendees: Sequence[Attendee]) -> int:
        raise NotImplementedError

    def get_by_id(self, attendee_id: str) -> Optional[Attendee]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Attendee]:
        """All attendees, newest ``registered_at`` first."""

        raise NotImplementedError

    def update(self, attendee_id: str, **fields: Any) -> bool:
        raise NotImplementedError

    def mark_checked_in(self, attendee_id: str, *, checked_in_at: datetime) -> bool:
        """Compare-and-set: only succeeds while ``checked_in_at`` is still NULL.

        Returns True for the single caller whose write took effect.
        """

        raise NotImplementedError

    def clear_checked_in(self, attendee_id: str) -> bool:
        raise NotImplementedError
