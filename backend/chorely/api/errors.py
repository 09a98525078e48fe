"""
Mapping of domain errors to HTTP responses.
"""

from fastapi import HTTPException, status

from chorely.core.exceptions import (
    AuthenticationError,
    BusinessLogicError,
    ChorelyError,
    DuplicateError,
    ForbiddenError,
    InfrastructureError,
    NotFoundError,
    ValidationError,
)

_STATUS_BY_ERROR: list[tuple[type[ChorelyError], int]] = [
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ForbiddenError, status.HTTP_403_FORBIDDEN),
    (DuplicateError, status.HTTP_409_CONFLICT),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (BusinessLogicError, status.HTTP_400_BAD_REQUEST),
    (AuthenticationError, status.HTTP_401_UNAUTHORIZED),
    (InfrastructureError, status.HTTP_503_SERVICE_UNAVAILABLE),
]


def status_code_for(exc: ChorelyError) -> int:
    for error_type, code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def to_http_exception(exc: ChorelyError) -> HTTPException:
    """Convert a domain error into an HTTPException carrying its message."""
    return HTTPException(status_code=status_code_for(exc), detail=exc.message)
