"""FastAPI application entry point.

This module initializes the FastAPI application with routers, middleware,
database lifecycle management, configuration, logging and global exception
handlers.
"""

import logging
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .config import settings
from .database import lifespan
from .exceptions import register_exception_handlers
from .logging_config import LoggingMiddleware, setup_logging
from .routers import health_router, users_router

# Configure logger for this module
logger = logging.getLogger(__name__)

# Initialize logging before creating the app
setup_logging(settings)


def create_app() -> FastAPI:
    """Create and configure FastAPI application.

    Returns:
        FastAPI: Configured FastAPI application instance
    """
    app = FastAPI(
        title="Account Server",
        description="User account persistence with hashed credentials",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
        docs_url="/docs" if settings.debug else None,  # Disable docs in production
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
    )

    configure_middleware(app)
    register_exception_handlers(app)
    configure_routers(app)
    configure_root_endpoints(app)

    logger.info("FastAPI application configuration completed")
    return app


def configure_middleware(app: FastAPI) -> None:
    """Configure middleware stack for the application.

    Args:
        app: FastAPI application instance
    """
    # Development allows any origin for easier testing
    allowed_origins = ["*"] if settings.is_development else settings.cors_origins

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )
    app.add_middleware(LoggingMiddleware)

    logger.info(f"Middleware configured with CORS origins: {allowed_origins}")


def configure_routers(app: FastAPI) -> None:
    """Configure and register API routers.

    Args:
        app: FastAPI application instance
    """
    app.include_router(health_router)
    app.include_router(users_router)


def configure_root_endpoints(app: FastAPI) -> None:
    """Configure root and utility endpoints.

    Args:
        app: FastAPI application instance
    """

    @app.get("/", tags=["root"], summary="API Information")
    async def root() -> dict[str, Any]:
        """Root endpoint providing API information."""
        return {
            "message": "Account Server is running",
            "version": __version__,
            "environment": settings.environment,
            "endpoints": {
                "health": "/api/health",
                "users": "/api/users",
            },
        }


# Create the FastAPI application instance
app = create_app()

logger.info(
    "FastAPI application initialized successfully",
    extra={
        "environment": settings.environment,
        "debug": settings.debug,
        "database_url": settings.database_url.split("@")[-1]
        if "@" in settings.database_url
        else settings.database_url,
    },
)
