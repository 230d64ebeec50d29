"""User account router.

This module exposes the user repository operations over HTTP. Repository
errors are not caught here; the global exception handlers turn them into
400, 409 or 500 responses.
"""

from fastapi import APIRouter, status

from ..dependencies import UserRepositoryDep
from ..models.user import (
    EmailVerificationRequest,
    EmailVerificationResponse,
    UserCreate,
    UserCreatedResponse,
    UserIdResponse,
    UserLogin,
    UserUpdate,
)

router = APIRouter(
    prefix="/api/users",
    tags=["users"],
    responses={
        400: {"description": "Missing data or invalid credentials"},
        409: {"description": "Duplicate entry"},
        500: {"description": "Database error"},
    },
)


@router.post(
    "",
    response_model=UserCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create user",
)
async def create_user(
    user_data: UserCreate, repository: UserRepositoryDep
) -> UserCreatedResponse:
    """Create a user account.

    The response echoes the submitted email and password so the caller can
    use them (for example in a confirmation message); only hashes are stored.

    Example:
        POST /api/users
        {"name": "alice", "email": "alice@example.com", "password": "s3cret"}

        Response (201):
        {"id": "6f1c...", "name": "alice", "email": "alice@example.com", "password": "s3cret"}
    """
    return await repository.create(user_data.name, user_data.email, user_data.password)


@router.post(
    "/login",
    response_model=UserIdResponse,
    summary="Log in",
)
async def login(credentials: UserLogin, repository: UserRepositoryDep) -> UserIdResponse:
    """Check a name/password pair and return the user ID."""
    return await repository.login(credentials.name, credentials.password)


@router.post(
    "/verify-email",
    response_model=EmailVerificationResponse,
    summary="Verify email",
)
async def verify_email(
    request: EmailVerificationRequest, repository: UserRepositoryDep
) -> EmailVerificationResponse:
    """Check an email address against the one stored for the user."""
    return await repository.verify_email(request.name, request.email)


@router.patch(
    "/{user_id}",
    response_model=UserIdResponse,
    summary="Update user",
)
async def update_user(
    user_id: str, user_data: UserUpdate, repository: UserRepositoryDep
) -> UserIdResponse:
    """Update the provided fields of a user."""
    return await repository.update(user_id, user_data)


@router.delete(
    "/{user_id}",
    response_model=UserIdResponse,
    summary="Delete user",
)
async def delete_user(user_id: str, repository: UserRepositoryDep) -> UserIdResponse:
    """Delete a user with their threads and messages."""
    return await repository.delete(user_id)
