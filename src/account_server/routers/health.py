"""Health check router for account server monitoring.

This module provides health check endpoints for monitoring the server
status and database connectivity.
"""

from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from ..config import Settings
from ..database import check_database_connection, get_database_info
from ..dependencies import get_app_settings

SERVICE_NAME = "account-server"
SERVICE_VERSION = "1.0.0"

router = APIRouter(
    prefix="/api/health",
    tags=["health"],
    responses={503: {"description": "Service unavailable"}},
)


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@router.get(
    "",
    response_model=dict[str, Any],
    summary="Basic health check",
)
async def health_check() -> dict[str, Any]:
    """Basic health check endpoint.

    Example:
        {
            "status": "healthy",
            "timestamp": "2024-01-01T12:00:00Z",
            "service": "account-server",
            "version": "1.0.0"
        }
    """
    return {
        "status": "healthy",
        "timestamp": _timestamp(),
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
    }


@router.get(
    "/detailed",
    response_model=dict[str, Any],
    summary="Detailed health check with database connectivity",
)
async def detailed_health_check(
    settings: Settings = Depends(get_app_settings),
) -> dict[str, Any]:
    """Detailed health check with database connectivity.

    Raises:
        HTTPException: 503 if the database cannot be reached
    """
    if not check_database_connection():
        raise HTTPException(
            status_code=503, detail="Service unavailable - database connectivity issues"
        )

    return {
        "status": "healthy",
        "timestamp": _timestamp(),
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "environment": settings.environment,
        "database": {"status": "connected", "info": get_database_info()},
    }


@router.get(
    "/live",
    response_model=dict[str, Any],
    summary="Liveness probe",
)
async def liveness_probe() -> dict[str, Any]:
    """Liveness probe for container health checks."""
    return {"alive": True, "timestamp": _timestamp()}
