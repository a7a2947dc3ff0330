"""Translation of domain exceptions into HTTP errors at the router boundary."""

from fastapi import HTTPException, status

from formhistory.domain.exceptions import (
    EntityNotFoundError,
    InvalidVersionError,
    MissingActorError,
    VersionConflictError,
    VersionNotFoundError,
)

DOMAIN_ERRORS = (
    EntityNotFoundError,
    InvalidVersionError,
    MissingActorError,
    VersionConflictError,
    VersionNotFoundError,
)

_STATUS_BY_ERROR: dict[type[Exception], int] = {
    InvalidVersionError: status.HTTP_400_BAD_REQUEST,
    MissingActorError: status.HTTP_401_UNAUTHORIZED,
    EntityNotFoundError: status.HTTP_404_NOT_FOUND,
    VersionNotFoundError: status.HTTP_404_NOT_FOUND,
    VersionConflictError: status.HTTP_409_CONFLICT,
}


def http_error(e: Exception) -> HTTPException:
    """Map a domain exception onto the status code the API contract promises."""
    for error_type, status_code in _STATUS_BY_ERROR.items():
        if isinstance(e, error_type):
            return HTTPException(status_code=status_code, detail=str(e))
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error"
    )
