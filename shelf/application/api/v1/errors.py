"""Centralized error transformation for API routes.

Maps Shelf errors (domain and infrastructure) to HTTPException responses
carrying the ``{"status": "error", ...}`` envelope.
"""

from typing import Any

from fastapi import HTTPException

from shelf.domain.shared.error import (
    DomainError,
    ForbiddenError,
    InfrastructureError,
    NotFoundError,
    ShelfError,
    ValidationError,
)

DOMAIN_ERROR_STATUS_MAP: dict[type[DomainError], int] = {
    NotFoundError: 404,
    ValidationError: 400,
    ForbiddenError: 403,
}

GENERIC_MESSAGE = "Internal server error"


def _status_for(error: DomainError) -> int:
    for error_type in type(error).__mro__:
        if error_type in DOMAIN_ERROR_STATUS_MAP:
            return DOMAIN_ERROR_STATUS_MAP[error_type]
    return 400


def map_shelf_error(error: ShelfError) -> HTTPException:
    """Map a Shelf error to an HTTPException.

    Args:
        error: The Shelf error to map.

    Returns:
        HTTPException with appropriate status code and detail.
    """
    if isinstance(error, InfrastructureError):
        # Never leak storage paths or driver messages to the caller
        return HTTPException(
            status_code=500,
            detail={"status": "error", "code": "internal_error", "message": GENERIC_MESSAGE},
        )

    detail: dict[str, Any] = {
        "status": "error",
        "code": error.code,
        "message": error.message,
    }

    if isinstance(error, DomainError):
        if isinstance(error, ValidationError) and error.errors:
            detail["errors"] = [{"field": e.field, "message": e.message} for e in error.errors]
        return HTTPException(status_code=_status_for(error), detail=detail)

    # Fallback for unknown ShelfError subclasses
    return HTTPException(status_code=500, detail=detail)
