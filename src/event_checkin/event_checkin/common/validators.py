from __future__ import annotations

from typing import Any

from email_validator import EmailNotValidError, validate_email

from ..core.exceptions import ValidationError


def _fail(field: str, message: str) -> ValidationError:
    return ValidationError(message, {field: [message]})


def as_text(value: Any) -> str:
    if value is None:
        return ""
    # Spreadsheet cells come back as floats for numeric columns ("99112233.0").
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def require_non_empty(value: Any, field: str, message: str) -> str:
    text = as_text(value)
    if not text:
        raise _fail(field, message)
    return text


def require_min_length(value: Any, field: str, min_len: int, message: str) -> str:
    text = as_text(value)
    if len(text) < min_len:
        raise _fail(field, message)
    return text


def require_int_between(value: Any, field: str, minimum: int, maximum: int, message: str) -> int:
    """Whole number in ``[minimum, maximum]``; "25" and "25.0" pass, "25.5" does not."""
    text = as_text(value)
    try:
        number = float(text)
    except ValueError:
        raise _fail(field, message)
    # NaN and infinities are not integral either.
    if not number.is_integer() or not minimum <= number <= maximum:
        raise _fail(field, message)
    return int(number)


def require_email(value: Any, field: str, message: str) -> str:
    text = as_text(value)
    try:
        result = validate_email(text, check_deliverability=False)
    except EmailNotValidError:
        raise _fail(field, message)
    return result.normalized
