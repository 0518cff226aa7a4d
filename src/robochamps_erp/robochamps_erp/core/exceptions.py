from __future__ import annotations

from typing import Mapping, Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid.

    ``field_errors`` maps each failing field to its message so callers can
    report every problem at once.
    """

    def __init__(self, message: str, field_errors: Optional[Mapping[str, str]] = None):
        super().__init__(message)
        self.field_errors = dict(field_errors or {})


class AuthenticationError(DomainError):
    """Raised when there is no valid caller identity."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class BusinessRuleViolation(DomainError):
    """Raised when a well-formed request breaks a workflow rule.

    ``code`` is stable and meant for client branching.
    """

    def __init__(self, message: str, code: str):
        super().__init__(message)
        self.code = code


class NotFoundError(DomainError):
    """Raised when operating on an entity that does not exist."""


class DependencyError(DomainError):
    """Raised when the database or blob storage cannot be reached."""
