from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class IdentifierError(ValidationError):
    """Raised when a typed member/employee code cannot be parsed."""


class NotFoundError(DomainError):
    """Raised when a referenced entity does not exist in the branch."""


class TerminalBusyError(DomainError):
    """Raised when a terminal submits while its previous check is still running."""


class ApiError(DomainError):
    """Raised when the backend request fails or answers with a non-success status."""

    def __init__(self, message: str, *, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ConfigurationError(Exception):
    """Raised at startup when settings cannot describe a working desk."""
