"""User model and account schemas.

This module defines the User SQLModel for storing accounts with hashed
credentials, along with the request and response schemas used by the
account operations.
"""

import uuid
from typing import Optional

from pydantic import BaseModel
from pydantic import Field as PydanticField
from sqlalchemy import Uuid
from sqlmodel import SQLModel, Field, Column, String


class User(SQLModel, table=True):
    """User model for database storage.

    The name is stored as provided; email and password only ever hold
    bcrypt hashes of the raw values.

    Attributes:
        id: Primary key (UUID generated on insert)
        name: Unique login handle
        email: Hash of the email address
        password: Hash of the password
    """

    __tablename__ = "user"

    id: Optional[uuid.UUID] = Field(
        default=None,
        description="Primary key (generated on insert)",
        sa_column=Column(Uuid, primary_key=True, default=uuid.uuid4)
    )
    name: str = Field(
        description="Unique login handle",
        sa_column=Column(String(100), unique=True, nullable=False)
    )
    email: str = Field(
        description="Hashed email address",
        sa_column=Column(String(255), nullable=False)
    )
    password: str = Field(
        description="Hashed password",
        sa_column=Column(String(255), nullable=False)
    )


class UserCreate(SQLModel):
    """Schema for creating a new user.

    Fields default to empty strings so that missing values reach the
    repository and are reported as missing data rather than a schema error.
    """

    name: str = Field(default="", max_length=100, description="Login handle")
    email: str = Field(default="", description="Raw email address")
    password: str = Field(default="", description="Raw password")


class UserUpdate(SQLModel):
    """Schema for updating user information.

    All fields are optional to support partial updates.
    """

    name: Optional[str] = Field(default=None, max_length=100, description="Updated login handle")
    email: Optional[str] = Field(default=None, description="Updated raw email address")
    password: Optional[str] = Field(default=None, description="Updated raw password")


class UserLogin(SQLModel):
    """Schema for login requests."""

    name: str = ""
    password: str = ""


class EmailVerificationRequest(SQLModel):
    """Schema for email verification requests."""

    name: str = ""
    email: str = ""


class UserCreatedResponse(SQLModel):
    """Result of creating a user.

    Carries the caller's original plaintext email and password back (for
    example to send a confirmation message), never the stored hashes.
    """

    id: str = Field(description="User ID")
    name: str
    email: str
    password: str


class UserIdResponse(SQLModel):
    """Result of operations that only report the affected user ID."""

    id: str = Field(description="User ID")


class EmailVerificationResponse(BaseModel):
    """Result of a successful email verification."""

    email: str
    email_verified: bool = PydanticField(default=True, serialization_alias="emailVerified")
