from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

from ..attendees.repository import AttendeeRepository
from ..attendees.service import RegistrationService
from ..attendees.validation import describe_errors, validate_profile
from ..core.enums import ExportFormat
from ..core.exceptions import StorageError, ValidationError
from . import spreadsheet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImportReport:
    accepted: int = 0
    rejected: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"accepted": self.accepted, "rejected": list(self.rejected)}


class BulkService:
    def __init__(self, attendees: AttendeeRepository, registration: RegistrationService):
        self._attendees = attendees
        self._registration = registration

    def import_batch(self, rows: Sequence[Mapping[str, Any]]) -> ImportReport:
        """Register every valid row in one batch.

        Bad rows are reported with their 1-based position below the header
        (the sheet position from ``read_rows`` when present) and never stop
        the rest of the import. A storage failure aborts the whole batch and
        propagates as ``StorageError``.
        """
        accepted = []
        rejected: list[dict[str, Any]] = []

        for index, row in enumerate(rows, start=1):
            try:
                profile = validate_profile(row)
            except ValidationError as e:
                row_number = row.get(spreadsheet.ROW_NUMBER_KEY, index)
                rejected.append({"row": row_number, "reason": describe_errors(e.errors)})
                continue
            accepted.append(self._registration.build_attendee(profile))

        if accepted:
            self._attendees.create_many(accepted)

        logger.info("Imported %d attendees, rejected %d rows", len(accepted), len(rejected))
        return ImportReport(accepted=len(accepted), rejected=rejected)

    def import_file(self, stream, filename: str) -> ImportReport:
        return self.import_batch(spreadsheet.read_rows(stream, filename))

    def export(self, fmt: ExportFormat) -> bytes:
        result = self._registration.list_attendees()
        if not result.ok:
            raise StorageError(result.error or "Could not load attendees")
        return spreadsheet.write_rows(result.attendees, fmt)
