from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules.

    ``errors`` maps form field names to messages so the form can be
    re-rendered with inline errors.
    """

    def __init__(self, message: str, errors: Optional[dict[str, str]] = None):
        super().__init__(message)
        self.errors = dict(errors or {})


class NotFoundError(DomainError):
    """Raised when a requested record does not exist."""

    def __init__(self, message: str = "The requested page does not exist."):
        super().__init__(message)


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class DuplicateAttendanceError(DomainError):
    """Raised by repositories when (customer, date) already has a row."""
