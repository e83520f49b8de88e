from __future__ import annotations

from typing import Mapping, Optional, Sequence


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid.

    ``errors`` maps a field name to its messages so callers can show them
    next to the offending input.
    """

    def __init__(self, message: str, errors: Optional[Mapping[str, Sequence[str]]] = None):
        super().__init__(message)
        self.errors: dict[str, list[str]] = {k: list(v) for k, v in (errors or {}).items()}


class StorageError(DomainError):
    """Raised when the backing store fails or times out."""
