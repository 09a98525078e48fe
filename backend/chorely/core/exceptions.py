"""
Custom exceptions for the application.
"""

from typing import Any, Optional


class ChorelyError(Exception):
    """Base exception for chorely."""

    def __init__(self, message: str, details: Optional[Any] = None):
        self.message = message
        self.details = details
        super().__init__(message)


class NotFoundError(ChorelyError):
    """Resource not found."""

    pass


class DuplicateError(ChorelyError):
    """Unique constraint violated (member already joined, category name taken...)."""

    pass


class ValidationError(ChorelyError):
    """Validation error."""

    pass


class AuthenticationError(ChorelyError):
    """Authentication failed."""

    pass


class AuthorizationError(ChorelyError):
    """Authorization failed."""

    pass


class ForbiddenError(AuthorizationError):
    """Forbidden operation (authorization denied)."""

    pass


class InfrastructureError(ChorelyError):
    """Infrastructure-related error (database unavailable, locked, etc.)."""

    pass


class BusinessLogicError(ChorelyError):
    """Business logic constraint violation."""

    pass
