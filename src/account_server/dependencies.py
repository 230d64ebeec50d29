"""FastAPI dependencies for database access and services.

This module provides dependency injection functions for FastAPI endpoints,
including settings, the hashing service and the user repository.
"""

from typing import Annotated

from fastapi import Depends
from sqlmodel import Session

from .config import Settings, settings
from .database import get_session
from .repositories.user_repository import UserRepository
from .services.hashing_service import HashingService


# Dependency for getting application settings
def get_app_settings() -> Settings:
    """Get the application settings loaded at process start.

    Returns:
        Settings: Application configuration
    """
    return settings


# Dependency for getting the hashing service
def get_hashing_service(
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> HashingService:
    """Get hashing service configured with the application cost factor.

    Args:
        settings: Application settings

    Returns:
        HashingService: Hashing service instance
    """
    return HashingService.from_settings(settings)


# Dependency for getting the user repository
def get_user_repository(
    session: Annotated[Session, Depends(get_session)],
    hashing_service: Annotated[HashingService, Depends(get_hashing_service)],
) -> UserRepository:
    """Get user repository bound to the request's session.

    Args:
        session: Database session
        hashing_service: Hashing service

    Returns:
        UserRepository: User repository instance
    """
    return UserRepository(session, hashing_service)


# Type aliases for common dependency patterns
UserRepositoryDep = Annotated[UserRepository, Depends(get_user_repository)]
