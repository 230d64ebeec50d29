"""Data access layer.

This module provides the user account repository, its error kinds and the
statement builders it relies on.
"""

from .statements import UserField, build_user_update
from .user_repository import (
    DatabaseError,
    DuplicateEntryError,
    MissingDataError,
    UserBadRequestError,
    UserRepository,
    UserRepositoryError,
)

__all__ = [
    "UserRepository",
    "UserRepositoryError",
    "MissingDataError",
    "DuplicateEntryError",
    "UserBadRequestError",
    "DatabaseError",
    "UserField",
    "build_user_update",
]
