"""Mapping of domain errors onto HTTP responses."""

import logfire
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from remark.domain.error import (
    BannedError,
    CommentDeletedError,
    ConflictError,
    DepthLimitExceededError,
    DomainError,
    InvalidCredentialError,
    MediaMismatchError,
    MutedError,
    NotFoundError,
    PermissionDeniedError,
    RateLimitedError,
    ValidationError,
)
from remark.interface.error import AuthenticationRequiredError

# Most specific first; the first matching class wins
ERROR_STATUS: list[tuple[type[Exception], int]] = [
    (AuthenticationRequiredError, status.HTTP_401_UNAUTHORIZED),
    (InvalidCredentialError, status.HTTP_401_UNAUTHORIZED),
    (RateLimitedError, status.HTTP_429_TOO_MANY_REQUESTS),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (PermissionDeniedError, status.HTTP_403_FORBIDDEN),
    (BannedError, status.HTTP_403_FORBIDDEN),
    (MutedError, status.HTTP_403_FORBIDDEN),
    (ConflictError, status.HTTP_409_CONFLICT),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (DepthLimitExceededError, status.HTTP_400_BAD_REQUEST),
    (MediaMismatchError, status.HTTP_400_BAD_REQUEST),
    (CommentDeletedError, status.HTTP_400_BAD_REQUEST),
]


def status_for(exc: Exception) -> int:
    """Return the HTTP status code for an error raised by a use case."""
    for error_type, status_code in ERROR_STATUS:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_400_BAD_REQUEST


def error_body(exc: Exception) -> dict:
    """Build the JSON body for an error response."""
    body: dict = {"error": type(exc).__name__, "detail": str(exc)}
    if isinstance(exc, RateLimitedError):
        body["retry_after"] = exc.retry_after
    elif isinstance(exc, (BannedError, MutedError)) and exc.until:
        body["until"] = exc.until.isoformat()
    return body


async def handle_error(request: Request, exc: Exception) -> JSONResponse:
    """Turn a domain or interface error into a JSON response."""
    status_code = status_for(exc)
    logfire.warn(
        "Request rejected",
        error=type(exc).__name__,
        detail=str(exc),
        status_code=status_code,
        path=request.url.path,
        method=request.method,
    )

    headers = None
    if isinstance(exc, RateLimitedError):
        headers = {"Retry-After": str(exc.retry_after)}
    elif status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}

    return JSONResponse(
        status_code=status_code, content=error_body(exc), headers=headers
    )


def register_error_handlers(app: FastAPI) -> None:
    """Register the error handlers on an application.

    Args:
        app: FastAPI application
    """
    app.add_exception_handler(DomainError, handle_error)
    app.add_exception_handler(AuthenticationRequiredError, handle_error)
