"""Global exception handlers.

This module maps repository error kinds to HTTP status codes and provides
FastAPI exception handlers that render every failure in the same error
envelope.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import HTTPException, RequestValidationError
from fastapi.responses import JSONResponse

from .repositories.user_repository import (
    DatabaseError,
    DuplicateEntryError,
    MissingDataError,
    UserBadRequestError,
    UserRepositoryError,
)

logger = logging.getLogger(__name__)


# Status code and machine-readable code per repository error kind
REPOSITORY_ERROR_RESPONSES: dict[type[UserRepositoryError], tuple[int, str]] = {
    MissingDataError: (status.HTTP_400_BAD_REQUEST, "missing_data_error"),
    UserBadRequestError: (status.HTTP_400_BAD_REQUEST, "bad_request_error"),
    DuplicateEntryError: (status.HTTP_409_CONFLICT, "duplicate_entry_error"),
    DatabaseError: (status.HTTP_500_INTERNAL_SERVER_ERROR, "database_error"),
}


def create_error_response(
    status_code: int,
    message: str,
    error_code: str,
    details: dict[str, Any] | None = None,
    request_id: str | None = None,
) -> JSONResponse:
    """Create standardized error response.

    Args:
        status_code: HTTP status code
        message: Error message
        error_code: Machine-readable error code
        details: Additional error details
        request_id: Request ID for tracking

    Returns:
        JSONResponse: Standardized error response
    """
    error_data = {
        "error": {"code": error_code, "message": message, "status_code": status_code}
    }

    if details:
        error_data["error"]["details"] = details

    if request_id:
        error_data["error"]["request_id"] = request_id

    return JSONResponse(status_code=status_code, content=error_data)


def _request_context(request: Request) -> dict[str, Any]:
    return {
        "path": request.url.path,
        "method": request.method,
        "client_ip": request.client.host if request.client else None,
    }


async def repository_exception_handler(
    request: Request, exc: UserRepositoryError
) -> JSONResponse:
    """Handle user repository errors.

    Args:
        request: FastAPI request object
        exc: Repository error instance

    Returns:
        JSONResponse: Error response with the status code of the error kind
    """
    status_code, error_code = REPOSITORY_ERROR_RESPONSES.get(
        type(exc), (status.HTTP_500_INTERNAL_SERVER_ERROR, "database_error")
    )

    level = logging.ERROR if status_code >= 500 else logging.WARNING
    logger.log(
        level,
        f"Repository error: {error_code} - {exc.message}",
        extra={
            "error_code": error_code,
            "status_code": status_code,
            "cause": type(exc.original_error).__name__ if exc.original_error else None,
            **_request_context(request),
        },
    )

    return create_error_response(
        status_code=status_code,
        message=exc.message,
        error_code=error_code,
        request_id=getattr(request.state, "request_id", None),
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle FastAPI HTTP exceptions."""
    logger.warning(
        f"HTTP Exception: {exc.status_code} - {exc.detail}",
        extra={"status_code": exc.status_code, **_request_context(request)},
    )

    return create_error_response(
        status_code=exc.status_code,
        message=str(exc.detail),
        error_code="http_error",
        request_id=getattr(request.state, "request_id", None),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle request body validation errors.

    Input values are left out of the details since request bodies carry
    raw passwords and email addresses.
    """
    validation_errors = [
        {
            "field": " -> ".join(str(loc) for loc in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]

    logger.warning(
        f"Validation Error: {len(validation_errors)} field(s) failed validation",
        extra={"validation_errors": validation_errors, **_request_context(request)},
    )

    return create_error_response(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        message="Validation failed",
        error_code="validation_error",
        details={"validation_errors": validation_errors},
        request_id=getattr(request.state, "request_id", None),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions without exposing internal details."""
    logger.error(
        f"Unexpected Exception: {type(exc).__name__} - {str(exc)}",
        exc_info=True,
        extra={"exception_type": type(exc).__name__, **_request_context(request)},
    )

    return create_error_response(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        message="Internal server error",
        error_code="internal_error",
        request_id=getattr(request.state, "request_id", None),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the application.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(UserRepositoryError, repository_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    # Must be last
    app.add_exception_handler(Exception, generic_exception_handler)
