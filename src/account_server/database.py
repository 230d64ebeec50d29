"""Database connection and session management.

This module provides SQLModel engine setup, session management and database
initialization utilities for the account server.
"""

from typing import Any, AsyncIterator, Generator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from sqlalchemy import text
from sqlalchemy.pool import QueuePool
from sqlmodel import SQLModel, create_engine, Session

from .config import settings
from .logging_config import get_logger
# Import models to register them with SQLModel
from .models import Thread, ThreadMessage, User  # noqa: F401

logger = get_logger("database")


engine = create_engine(
    settings.database_url,
    echo=settings.debug,  # Log SQL statements in debug mode
    pool_size=10,
    max_overflow=20,
    pool_timeout=30,
    pool_recycle=3600,
    poolclass=QueuePool,
    connect_args={
        "check_same_thread": False  # Required for SQLite, ignored elsewhere
    } if settings.database_url.startswith("sqlite") else {}
)


def get_session() -> Generator[Session, None, None]:
    """Dependency to get database session.

    The session is owned by the request; repositories open and close their
    own transactions on it.

    Yields:
        Session: SQLModel database session
    """
    with Session(engine) as session:
        try:
            yield session
        except Exception:
            session.rollback()
            raise


def create_db_and_tables() -> None:
    """Create database tables based on SQLModel definitions.

    Note:
        This function is idempotent - it won't recreate existing tables.
    """
    SQLModel.metadata.create_all(engine)


def drop_db_and_tables() -> None:
    """Drop all database tables.

    Warning:
        This function will permanently delete all data in the database.
        Only use for testing or development purposes.
    """
    SQLModel.metadata.drop_all(engine)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """FastAPI lifespan context manager for database initialization."""
    create_db_and_tables()
    logger.info("Database tables ready")
    yield
    engine.dispose()


def get_database_info() -> dict[str, Any]:
    """Get database connection information for health checks.

    Returns:
        dict: Database URL (credentials stripped) and pool status
    """
    return {
        "url": settings.database_url.split("@")[-1] if "@" in settings.database_url else settings.database_url,
        "pool_size": engine.pool.size(),
        "checked_in": engine.pool.checkedin(),
        "checked_out": engine.pool.checkedout(),
        "overflow": engine.pool.overflow(),
    }


def check_database_connection() -> bool:
    """Run a trivial query against the database.

    Returns:
        bool: True if connection is successful, False otherwise
    """
    try:
        with Session(engine) as session:
            session.exec(text("SELECT 1"))
            return True
    except Exception as e:
        logger.warning(f"Database connectivity check failed: {e}")
        return False
