from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class FormValidationError(ValidationError):
    """Raised by services when a submitted form does not validate."""

    def __init__(self, errors):
        self.errors = errors
        first = errors.first_message() if errors else None
        super().__init__(first or "Invalid form data")


class DuplicateMarkError(ValidationError):
    """Raised when a student already has attendance for the day."""


class UnknownStudentError(ValidationError):
    """Raised when a mark targets a student outside the loaded roster."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class ApiError(DomainError):
    """Raised when the REST backend is unreachable or answers with an error."""

    def __init__(self, message: str, *, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class SaveTransportError(DomainError):
    """Raised when a batch save fails; staged marks are kept for a retry."""


class SaveInProgressError(DomainError):
    """Raised when a save is started while another one is still running."""
