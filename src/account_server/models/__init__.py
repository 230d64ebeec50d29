"""SQLModel data models.

This module exports all database models and schemas for the account server.
Import models from here to ensure proper initialization and relationships.
"""

from .thread import Thread, ThreadMessage
from .user import (
    EmailVerificationRequest,
    EmailVerificationResponse,
    User,
    UserCreate,
    UserCreatedResponse,
    UserIdResponse,
    UserLogin,
    UserUpdate,
)

__all__ = [
    # User models
    "User",
    "UserCreate",
    "UserUpdate",
    "UserLogin",
    "EmailVerificationRequest",
    "UserCreatedResponse",
    "UserIdResponse",
    "EmailVerificationResponse",
    # Thread models
    "Thread",
    "ThreadMessage",
]
