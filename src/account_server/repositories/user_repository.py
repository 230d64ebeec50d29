"""User repository for account persistence.

This module provides the data access layer for user accounts: creating,
updating, deleting, logging in and verifying the email of users, with
credentials hashed before they reach the database and every failure
reported as one of the repository error kinds.
"""

import uuid
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import delete, insert
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from ..logging_config import SecurityLoggingMixin, get_logger, log_database_operation
from ..models.thread import Thread, ThreadMessage
from ..models.user import (
    EmailVerificationResponse,
    User,
    UserCreatedResponse,
    UserIdResponse,
    UserUpdate,
)
from ..services.hashing_service import HashingService
from .statements import UserField, build_user_update

logger = get_logger("user_repository")


class UserRepositoryError(Exception):
    """Base exception for user repository errors."""

    def __init__(self, message: str, original_error: Optional[Exception] = None) -> None:
        self.message = message
        self.original_error = original_error
        super().__init__(self.message)


class MissingDataError(UserRepositoryError):
    """Exception raised when a required input is absent or empty."""
    pass


class DuplicateEntryError(UserRepositoryError):
    """Exception raised when a user with the same name already exists."""
    pass


class UserBadRequestError(UserRepositoryError):
    """Exception raised when a password or email does not match the stored one."""
    pass


class DatabaseError(UserRepositoryError):
    """Exception raised for any other failure while talking to the database."""
    pass


class UserRepository(SecurityLoggingMixin):
    """Repository for user account operations.

    The repository works on a caller-owned session and controls the
    transaction boundaries itself: write operations run inside
    ``transaction()``, lookups run without one.
    """

    def __init__(self, session: Session, hashing_service: HashingService) -> None:
        """Initialize user repository.

        Args:
            session: SQLModel database session owned by the caller
            hashing_service: Service used to hash and compare credentials
        """
        super().__init__()  # Initialize SecurityLoggingMixin
        self.session = session
        self.hashing_service = hashing_service

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """Run a unit of work in a transaction.

        Commits when the block completes. Any exception raised inside the
        block, or by the commit itself, rolls the transaction back once and
        is re-raised unchanged.

        Yields:
            Session: The repository session
        """
        try:
            if not self.session.in_transaction():
                self.session.begin()
            yield self.session
            self.session.commit()
        except Exception:
            self.session.rollback()
            logger.debug("Transaction rolled back")
            raise

    async def create(self, name: str, email: str, password: str) -> UserCreatedResponse:
        """Create a new user.

        Args:
            name: Unique login handle, stored as given
            email: Raw email address, stored hashed
            password: Raw password, stored hashed

        Returns:
            The generated ID together with the caller's original values

        Raises:
            MissingDataError: If any input is empty
            DuplicateEntryError: If a user with the same name already exists
            DatabaseError: If the database operation fails
        """
        if not name or not email or not password:
            raise MissingDataError("Missing data")

        try:
            with self.transaction():
                self.session.exec(
                    insert(User).values(
                        name=name,
                        email=self.hashing_service.hash(email),
                        password=self.hashing_service.hash(password),
                    )
                )
                user_id = self.session.exec(
                    select(User.id).where(User.name == name)
                ).one()
        except IntegrityError as e:
            log_database_operation(
                operation="INSERT", table="user", success=False, error="duplicate entry"
            )
            raise DuplicateEntryError("Duplicate entry", original_error=e) from e
        except Exception as e:
            log_database_operation(
                operation="INSERT", table="user", success=False, error=type(e).__name__
            )
            raise DatabaseError("Error creating user", original_error=e) from e

        log_database_operation(operation="INSERT", table="user", user_id=str(user_id))
        return UserCreatedResponse(
            id=str(user_id), name=name, email=email, password=password
        )

    async def update(self, user_id: str, user_data: UserUpdate) -> UserIdResponse:
        """Update user information.

        Only the fields present in ``user_data`` are written; fields that
        are ``None`` or empty are left untouched.

        Args:
            user_id: ID of user to update
            user_data: New values

        Returns:
            The ID of the updated user

        Raises:
            MissingDataError: If the ID is empty or no field is provided
            DatabaseError: If the database operation fails
        """
        try:
            with self.transaction():
                if not user_id:
                    raise MissingDataError("Missing data")

                changes = self._collect_changes(user_data)
                if not changes:
                    raise MissingDataError("Missing data")

                self.session.exec(build_user_update(uuid.UUID(user_id), changes))
        except MissingDataError:
            raise
        except Exception as e:
            log_database_operation(
                operation="UPDATE", table="user", success=False, error=type(e).__name__
            )
            raise DatabaseError("Error updating user", original_error=e) from e

        log_database_operation(
            operation="UPDATE",
            table="user",
            user_id=user_id,
            fields=sorted(field.value for field in changes),
        )
        return UserIdResponse(id=user_id)

    def _collect_changes(self, user_data: UserUpdate) -> dict[UserField, str]:
        changes = {}
        if user_data.name:
            changes[UserField.NAME] = user_data.name
        if user_data.email:
            changes[UserField.EMAIL] = self.hashing_service.hash(user_data.email)
        if user_data.password:
            changes[UserField.PASSWORD] = self.hashing_service.hash(user_data.password)
        return changes

    async def delete(self, user_id: str) -> UserIdResponse:
        """Delete a user together with their threads and messages.

        Messages go first, then threads, then the user row, so no foreign
        key is left pointing at a deleted row. Deleting an unknown ID is not
        an error.

        Args:
            user_id: ID of user to delete

        Returns:
            The ID that was deleted

        Raises:
            MissingDataError: If the ID is empty
            DatabaseError: If the database operation fails
        """
        if not user_id:
            raise MissingDataError("Missing data")

        try:
            with self.transaction():
                target = uuid.UUID(user_id)
                self.session.exec(
                    delete(ThreadMessage).where(ThreadMessage.id_user == target)
                )
                self.session.exec(delete(Thread).where(Thread.user_id == target))
                self.session.exec(delete(User).where(User.id == target))
        except Exception as e:
            log_database_operation(
                operation="DELETE", table="user", success=False, error=type(e).__name__
            )
            raise DatabaseError("Error deleting user", original_error=e) from e

        log_database_operation(operation="DELETE", table="user", user_id=user_id)
        return UserIdResponse(id=user_id)

    async def login(self, name: str, password: str) -> UserIdResponse:
        """Check a user's password.

        Args:
            name: Login handle
            password: Raw password to check

        Returns:
            The ID of the authenticated user

        Raises:
            MissingDataError: If any input is empty
            UserBadRequestError: If the password does not match
            DatabaseError: If the user does not exist or the lookup fails
        """
        if not name or not password:
            raise MissingDataError("Missing data")

        try:
            row = self.session.exec(
                select(User.id, User.password).where(User.name == name)
            ).first()
            # Unknown names are reported like any other lookup failure.
            if row is None:
                raise DatabaseError("Error logging in user")
            if not self.hashing_service.compare(password, row.password):
                raise UserBadRequestError("Invalid password")
        except UserRepositoryError as e:
            self.log_authentication_attempt(name=name, success=False, reason=e.message)
            raise
        except Exception as e:
            self.log_authentication_attempt(
                name=name, success=False, reason=type(e).__name__
            )
            raise DatabaseError("Error logging in user", original_error=e) from e

        self.log_authentication_attempt(name=name, user_id=str(row.id))
        return UserIdResponse(id=str(row.id))

    async def verify_email(self, name: str, email: str) -> EmailVerificationResponse:
        """Check a user's email address against the stored hash.

        Comparison is exact: a change in case or formatting is a mismatch.

        Args:
            name: Login handle
            email: Raw email address to check

        Returns:
            The checked email flagged as verified

        Raises:
            MissingDataError: If any input is empty
            UserBadRequestError: If the email does not match
            DatabaseError: If the user does not exist or the lookup fails
        """
        if not name or not email:
            raise MissingDataError("Missing data")

        try:
            stored_email = self.session.exec(
                select(User.email).where(User.name == name)
            ).first()
            if stored_email is None:
                raise DatabaseError("Error invalid or not found email")
            if not self.hashing_service.compare(email, stored_email):
                raise UserBadRequestError("Invalid email")
        except UserRepositoryError as e:
            self.log_authentication_attempt(
                name=name,
                success=False,
                reason=e.message,
                event_type="email_verification",
            )
            raise
        except Exception as e:
            self.log_authentication_attempt(
                name=name,
                success=False,
                reason=type(e).__name__,
                event_type="email_verification",
            )
            raise DatabaseError("Error invalid or not found email", original_error=e) from e

        self.log_authentication_attempt(name=name, event_type="email_verification")
        return EmailVerificationResponse(email=email)
