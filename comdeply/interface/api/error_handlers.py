"""Exception handlers mapping domain errors to JSON responses."""

import logfire
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse, Response

from comdeply.domain.error import (
    AlreadyDeletedError,
    CannotEditDeletedError,
    DepthInvariantViolationError,
    DomainError,
    NotFoundError,
    NotOwnerError,
    QuotaExceededError,
    ReactionConflictError,
    SiteInactiveError,
    SortKeyConflictError,
)

# Checked in order, first match wins
_DOMAIN_ERROR_STATUS: list[tuple[type[DomainError], int, str]] = [
    (NotFoundError, status.HTTP_404_NOT_FOUND, "not_found"),
    (NotOwnerError, status.HTTP_403_FORBIDDEN, "not_owner"),
    (SiteInactiveError, status.HTTP_403_FORBIDDEN, "site_inactive"),
    (AlreadyDeletedError, status.HTTP_409_CONFLICT, "already_deleted"),
    (CannotEditDeletedError, status.HTTP_409_CONFLICT, "comment_deleted"),
    (SortKeyConflictError, status.HTTP_409_CONFLICT, "sort_key_conflict"),
    (ReactionConflictError, status.HTTP_409_CONFLICT, "reaction_conflict"),
    (QuotaExceededError, status.HTTP_429_TOO_MANY_REQUESTS, "quota_exceeded"),
    (
        DepthInvariantViolationError,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "invariant_violation",
    ),
]


def create_json_error_response(
    status_code: int, message: str, error_type: str | None = None
) -> JSONResponse:
    """Create JSON error response with optional type for machine parsing."""
    content = {"message": message}
    if error_type:
        content["type"] = error_type
    return JSONResponse(status_code=status_code, content=content)


async def domain_error_handler(_: Request, exc: Exception) -> Response:
    """Handle all DomainError subclasses with appropriate status codes."""
    for error_class, status_code, error_type in _DOMAIN_ERROR_STATUS:
        if isinstance(exc, error_class):
            break
    else:
        status_code, error_type = status.HTTP_400_BAD_REQUEST, "bad_request"

    if status_code >= 500:
        logfire.error("Domain invariant violated", error=str(exc))
    else:
        logfire.info(
            "Request rejected", error_type=error_type, status_code=status_code
        )
    return create_json_error_response(status_code, str(exc), error_type)


async def value_error_handler(_: Request, exc: Exception) -> Response:
    """Handle malformed identifiers and values (400)."""
    return create_json_error_response(
        status.HTTP_400_BAD_REQUEST, str(exc), "validation_error"
    )


async def general_exception_handler(_: Request, exc: Exception) -> Response:
    """Handle unexpected errors (500)."""
    logfire.exception("Unexpected error", error=str(exc))
    return create_json_error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "An unexpected error occurred.",
        "internal_server_error",
    )


def register_error_handlers(app: FastAPI) -> None:
    """Register the handlers on the application."""
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(ValueError, value_error_handler)
    app.add_exception_handler(Exception, general_exception_handler)
