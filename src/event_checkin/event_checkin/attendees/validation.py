from __future__ import annotations

from typing import Any, Callable, Mapping

from ..common import validators as v
from ..core.constants import (
    MAX_AGE,
    MIN_AGE,
    MIN_AREA_LENGTH,
    MIN_JOB_LENGTH,
    MIN_NAME_LENGTH,
    MIN_WHATSAPP_LENGTH,
)
from ..core.exceptions import ValidationError
from .model import AttendeeProfile

# Registration forms post camelCase keys; spreadsheets and the API use snake_case.
FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "name": ("name", "fullName", "full_name"),
    "age": ("age",),
    "blood_group": ("blood_group", "bloodGroup"),
    "gender": ("gender",),
    "job": ("job",),
    "area": ("area",),
    "whatsapp_number": ("whatsapp_number", "whatsappNumber", "contact_number", "contactNumber"),
    "email": ("email",),
}

_RULES: dict[str, Callable[[Any], Any]] = {
    "name": lambda x: v.require_min_length(
        x, "name", MIN_NAME_LENGTH, "Name must be at least 2 characters."
    ),
    "age": lambda x: v.require_int_between(
        x, "age", MIN_AGE, MAX_AGE, "Age must be a whole number between 1 and 150."
    ),
    "blood_group": lambda x: v.require_non_empty(x, "blood_group", "Please select a blood group."),
    "gender": lambda x: v.require_non_empty(x, "gender", "Please select a gender."),
    "job": lambda x: v.require_min_length(x, "job", MIN_JOB_LENGTH, "Job must be at least 2 characters."),
    "area": lambda x: v.require_min_length(x, "area", MIN_AREA_LENGTH, "Area must be at least 2 characters."),
    "whatsapp_number": lambda x: v.require_min_length(
        x, "whatsapp_number", MIN_WHATSAPP_LENGTH, "Please enter a valid WhatsApp number."
    ),
    "email": lambda x: v.require_email(x, "email", "Please enter a valid email address."),
}


def pick(form: Mapping[str, Any], field: str) -> Any:
    for key in FIELD_ALIASES[field]:
        if key in form and form[key] is not None:
            return form[key]
    return None


def validate_profile(form: Mapping[str, Any]) -> AttendeeProfile:
    """Validate a raw registration form.

    Every field is checked; a single ``ValidationError`` carries all failures.
    """

    values: dict[str, Any] = {}
    errors: dict[str, list[str]] = {}

    for field, rule in _RULES.items():
        try:
            values[field] = rule(pick(form, field))
        except ValidationError as e:
            for name, messages in e.errors.items():
                errors.setdefault(name, []).extend(messages)

    if errors:
        raise ValidationError("Please correct the highlighted fields.", errors)

    return AttendeeProfile(**values)


def describe_errors(errors: Mapping[str, list[str]]) -> str:
    return "; ".join(f"{field}: {' '.join(messages)}" for field, messages in errors.items())
