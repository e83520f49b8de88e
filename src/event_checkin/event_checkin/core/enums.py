from __future__ import annotations

from enum import Enum


class CheckInState(str, Enum):
    """Lifecycle state of an attendee record."""

    REGISTERED = "registered"
    CHECKED_IN = "checked_in"


class ExportFormat(str, Enum):
    XLSX = "xlsx"
    CSV = "csv"
