from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    def __init__(self, message: str, *, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class AuthenticationError(DomainError):
    """Raised when there is no valid login for the request."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    def __init__(self, message: str = "Access denied"):
        super().__init__(message)


class NotFoundError(DomainError):
    """Raised when a referenced record is absent or outside the caller's school."""


class ConflictError(DomainError):
    """Raised when a write loses a uniqueness race and cannot be applied."""


class DuplicateRecordError(DomainError):
    """Raised by repositories when the store rejects a duplicate natural key."""
