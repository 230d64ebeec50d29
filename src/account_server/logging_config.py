"""Logging configuration for structured logging.

This module configures the account server's loggers, formats records as
JSON outside debug mode, logs HTTP requests with a generated request ID, and
provides helpers for security events and database operations.
"""

import json
import logging
import logging.config
import sys
import time
import uuid
from datetime import datetime, timezone

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from .config import Settings

# Attributes every LogRecord carries; anything else was passed via ``extra``.
_RECORD_ATTRIBUTES = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime"}


class JSONFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging.

    Each record becomes one JSON object with timestamp, level, logger and
    location, plus an ``exception`` block and an ``extra`` block when present.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON.

        Args:
            record: Log record to format

        Returns:
            JSON formatted log string
        """
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            exc_type, exc_value, _ = record.exc_info
            log_data["exception"] = {
                "type": exc_type.__name__ if exc_type else None,
                "message": str(exc_value) if exc_value else None,
                "traceback": self.formatException(record.exc_info),
            }

        extra_fields = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRIBUTES
        }
        if extra_fields:
            log_data["extra"] = extra_fields

        return json.dumps(log_data, default=str, ensure_ascii=False)


class RequestContextFilter(logging.Filter):
    """Logging filter that guarantees request context attributes exist.

    Records logged outside a request get ``None`` for the request ID, path
    and method so formatters can rely on the attributes.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        for attribute in ("request_id", "path", "method"):
            if not hasattr(record, attribute):
                setattr(record, attribute, None)
        return True


def setup_logging(settings: Settings) -> None:
    """Setup logging configuration based on settings.

    Args:
        settings: Application settings containing logging configuration
    """
    # Determine log level
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    # Create logging configuration
    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "()": JSONFormatter,
            },
            "simple": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "filters": {
            "request_context": {
                "()": RequestContextFilter,
            }
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": log_level,
                "formatter": "json" if not settings.debug else "simple",
                "filters": ["request_context"],
                "stream": sys.stdout,
            }
        },
        "loggers": {
            # Application loggers
            "account_server": {
                "level": log_level,
                "handlers": ["console"],
                "propagate": False,
            },
            # FastAPI and Uvicorn loggers
            "uvicorn": {"level": "INFO", "handlers": ["console"], "propagate": False},
            "uvicorn.access": {
                "level": "INFO" if settings.debug else "WARNING",
                "handlers": ["console"],
                "propagate": False,
            },
            "fastapi": {
                "level": log_level,
                "handlers": ["console"],
                "propagate": False,
            },
            # Database loggers
            "sqlalchemy.engine": {
                "level": "INFO" if settings.debug else "WARNING",
                "handlers": ["console"],
                "propagate": False,
            },
            "sqlalchemy.pool": {
                "level": "WARNING",
                "handlers": ["console"],
                "propagate": False,
            },
            # Hashing backend warns about bcrypt version probing
            "passlib": {"level": "ERROR", "handlers": ["console"], "propagate": False},
        },
        "root": {"level": "WARNING", "handlers": ["console"]},
    }

    # Apply logging configuration
    logging.config.dictConfig(logging_config)

    # Set up application logger
    logger = logging.getLogger("account_server")
    logger.info(
        "Logging configured",
        extra={
            "log_level": settings.log_level,
            "debug_mode": settings.debug,
            "formatter": "json" if not settings.debug else "simple",
        },
    )


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for request/response logging.

    Assigns every request an ID (exposed on ``request.state`` and echoed in
    the ``X-Request-ID`` response header) and logs start, completion and
    failure with timing information.
    """

    def __init__(self, app: ASGIApp, logger_name: str = "account_server.requests") -> None:
        super().__init__(app)
        self.logger = logging.getLogger(logger_name)

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id

        client_ip = request.client.host if request.client else None
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            client_ip = forwarded_for.split(",")[0].strip()

        context = {
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "client_ip": client_ip,
        }
        start_time = time.perf_counter()

        self.logger.info(
            f"Request started: {request.method} {request.url.path}",
            extra={**context, "event_type": "request_started"},
        )

        try:
            response = await call_next(request)
        except Exception as exc:
            self.logger.error(
                f"Request failed: {request.method} {request.url.path} - {type(exc).__name__}",
                exc_info=True,
                extra={
                    **context,
                    "exception_type": type(exc).__name__,
                    "process_time": round(time.perf_counter() - start_time, 4),
                    "event_type": "request_failed",
                },
            )
            raise

        self.logger.info(
            f"Request completed: {request.method} {request.url.path} - {response.status_code}",
            extra={
                **context,
                "status_code": response.status_code,
                "process_time": round(time.perf_counter() - start_time, 4),
                "event_type": "request_completed",
            },
        )
        response.headers["X-Request-ID"] = request_id
        return response


class SecurityLoggingMixin:
    """Mixin for security-related logging.

    This mixin provides methods for logging security events like
    login attempts and email verification attempts. Raw credentials
    are never passed to these methods.
    """

    def __init__(self) -> None:
        self.security_logger = logging.getLogger("account_server.security")

    def log_authentication_attempt(
        self,
        name: str | None = None,
        user_id: str | None = None,
        success: bool = True,
        reason: str | None = None,
        event_type: str = "authentication_attempt",
    ) -> None:
        """Log authentication attempt.

        Args:
            name: Login handle the attempt was made for
            user_id: Internal user ID (when resolved)
            success: Whether authentication was successful
            reason: Reason for failure (if applicable)
            event_type: Event tag, e.g. ``authentication_attempt`` or
                ``email_verification``
        """
        level = logging.INFO if success else logging.WARNING
        message = (
            "Authentication successful"
            if success
            else f"Authentication failed: {reason}"
        )

        self.security_logger.log(
            level,
            message,
            extra={
                "event_type": event_type,
                "user_name": name,
                "user_id": user_id,
                "success": success,
                "reason": reason,
            },
        )


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance with the specified name.

    Args:
        name: Logger name (should start with 'account_server.')

    Returns:
        Logger instance
    """
    if not name.startswith("account_server."):
        name = f"account_server.{name}"

    return logging.getLogger(name)


def log_database_operation(
    operation: str,
    table: str,
    success: bool = True,
    duration: float | None = None,
    error: str | None = None,
    **kwargs,
) -> None:
    """Log database operation.

    Args:
        operation: Type of operation (SELECT, INSERT, UPDATE, DELETE)
        table: Database table name
        success: Whether operation was successful
        duration: Operation duration in seconds
        error: Error message (if applicable)
        **kwargs: Additional context data
    """
    logger = get_logger("database")
    level = logging.INFO if success else logging.ERROR
    message = f"Database {operation} on {table}"

    if not success and error:
        message += f" failed: {error}"

    extra_data = {
        "event_type": "database_operation",
        "operation": operation,
        "table": table,
        "success": success,
        "duration": duration,
    }

    if error:
        extra_data["error"] = error

    extra_data.update(kwargs)

    logger.log(level, message, extra=extra_data)
