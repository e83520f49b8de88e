"""Spreadsheet <-> attendee rows.

Imports read the first sheet of an Excel workbook (or a CSV file) into plain
dicts keyed by profile field. Exports go through an in-memory buffer, the
file never touches disk.
"""
from __future__ import annotations

import io
import re
from pathlib import PurePath
from typing import IO, Any, Sequence

import pandas as pd

from ..attendees.model import PROFILE_FIELDS, Attendee
from ..common.datetime_utils import to_iso
from ..core.enums import ExportFormat

# Column titles used by the registration sheet handed to organizers.
EXPORT_HEADERS: dict[str, str] = {
    "name": "Full Name",
    "age": "Age",
    "blood_group": "Blood Group",
    "gender": "Gender",
    "job": "Job",
    "area": "Area in Kuwait",
    "whatsapp_number": "Whatsapp Number",
    "email": "Email address",
}

SUPPORTED_EXTENSIONS = (".xlsx", ".xls", ".csv")

ROW_NUMBER_KEY = "_row"


def _norm(header: Any) -> str:
    return re.sub(r"[\s_]+", "", str(header)).lower()


_HEADER_MAP: dict[str, str] = {}
for _field, _title in EXPORT_HEADERS.items():
    _HEADER_MAP[_norm(_title)] = _field
    _HEADER_MAP[_norm(_field)] = _field
_HEADER_MAP["contactnumber"] = "whatsapp_number"


class UnsupportedFileError(ValueError):
    pass


def map_header(header: Any) -> str | None:
    return _HEADER_MAP.get(_norm(header))


def read_rows(stream: IO[bytes], filename: str) -> list[dict[str, Any]]:
    """Parse an uploaded sheet into rows keyed by profile field.

    Unknown columns are dropped and empty cells come back as None. Each row
    carries its 1-based position below the header under ``ROW_NUMBER_KEY``,
    so rejections point at the line the user sees even when blank lines are
    skipped.
    """
    ext = PurePath(filename or "").suffix.lower()
    if ext not in SUPPORTED_EXTENSIONS:
        raise UnsupportedFileError(f"Unsupported file type '{ext or filename}'. Use .xlsx, .xls or .csv")

    if ext == ".csv":
        df = pd.read_csv(stream, dtype=str, keep_default_na=False, skip_blank_lines=False)
    else:
        df = pd.read_excel(stream, sheet_name=0, dtype=object)

    mapped = {col: map_header(col) for col in df.columns}
    df = df.astype(object).where(pd.notna(df), None)

    rows: list[dict[str, Any]] = []
    for position, record in enumerate(df.to_dict(orient="records"), start=1):
        values = {k: (None if isinstance(v, str) and not v.strip() else v) for k, v in record.items()}
        # Blank lines are judged on every column, recognised or not.
        if all(v is None for v in values.values()):
            continue
        row = {mapped[k]: v for k, v in values.items() if mapped[k]}
        row[ROW_NUMBER_KEY] = position
        rows.append(row)
    return rows


def _export_frame(attendees: Sequence[Attendee]) -> pd.DataFrame:
    data = []
    for a in attendees:
        row = {EXPORT_HEADERS[f]: getattr(a, f) for f in PROFILE_FIELDS}
        row["Registered At"] = to_iso(a.registered_at)
        row["Checked In At"] = to_iso(a.checked_in_at) or ""
        row["Status"] = a.state.value
        data.append(row)
    columns = [EXPORT_HEADERS[f] for f in PROFILE_FIELDS] + ["Registered At", "Checked In At", "Status"]
    return pd.DataFrame(data, columns=columns)


def write_rows(attendees: Sequence[Attendee], fmt: ExportFormat) -> bytes:
    df = _export_frame(attendees)
    output = io.BytesIO()
    if fmt == ExportFormat.CSV:
        df.to_csv(output, index=False, encoding="utf-8")
    else:
        with pd.ExcelWriter(output, engine="openpyxl") as writer:
            df.to_excel(writer, index=False, sheet_name="Attendees")
    return output.getvalue()
