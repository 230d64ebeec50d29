"""Thread and thread message models.

Threads and their messages belong to a user and are removed together with
the account that owns them.
"""

import uuid
from typing import Optional
from datetime import datetime, timezone

from sqlalchemy import Uuid, func
from sqlmodel import SQLModel, Field, Column, DateTime, ForeignKey, Text, String, Index


class Thread(SQLModel, table=True):
    """Conversation thread started by a user.

    Attributes:
        id: Primary key (UUID generated on insert)
        user_id: Owning user
        title: Thread title
        created_at: Timestamp when the thread was created
    """

    __tablename__ = "thread"

    id: Optional[uuid.UUID] = Field(
        default=None,
        sa_column=Column(Uuid, primary_key=True, default=uuid.uuid4)
    )
    user_id: uuid.UUID = Field(
        sa_column=Column(Uuid, ForeignKey("user.id"), nullable=False)
    )
    title: str = Field(
        sa_column=Column(String(200), nullable=False)
    )
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    )

    __table_args__ = (
        Index("idx_thread_user_id", "user_id"),
    )


class ThreadMessage(SQLModel, table=True):
    """Message posted by a user inside a thread."""

    __tablename__ = "thread_msg"

    id: Optional[uuid.UUID] = Field(
        default=None,
        sa_column=Column(Uuid, primary_key=True, default=uuid.uuid4)
    )
    thread_id: uuid.UUID = Field(
        sa_column=Column(Uuid, ForeignKey("thread.id"), nullable=False)
    )
    id_user: uuid.UUID = Field(
        sa_column=Column(Uuid, ForeignKey("user.id"), nullable=False)
    )
    content: str = Field(
        sa_column=Column(Text, nullable=False)
    )
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    )

    __table_args__ = (
        Index("idx_thread_msg_id_user", "id_user"),
    )
