"""Chat thread and chat message models and schemas."""

from datetime import datetime, UTC
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict
from sqlalchemy import Boolean, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from db import Base


def _new_id() -> str:
    return str(uuid4())


class ChatThread(Base):
    """Chat thread ORM model."""

    __tablename__ = "chat_threads"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False, default="New chat")
    # Hashed user identifier; user_name is kept for threads created before hashing
    user_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, index=True)
    user_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    is_deleted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
        index=True,
    )
    last_message_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )


class ChatMessage(Base):
    """Chat message ORM model."""

    __tablename__ = "chat_messages"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_id)
    thread_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("chat_threads.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    role: Mapped[str] = mapped_column(String(50), nullable=False)  # user, assistant, system, tool
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
    )


# Pydantic schemas
class ChatThreadResponse(BaseModel):
    """Schema for chat thread response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    user_id: str | None
    user_name: str | None
    is_deleted: bool
    created_at: datetime
    last_message_at: datetime | None = None


class ChatMessageResponse(BaseModel):
    """Schema for chat message response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    thread_id: str
    user_id: str | None
    role: str
    content: str
    created_at: datetime


class ThreadActivity(BaseModel):
    """Minimal thread projection used for weekly aggregation."""

    model_config = ConfigDict(from_attributes=True)

    created_at: datetime
    user_id: str | None = None
    user_name: str | None = None

    @property
    def user_key(self) -> str | None:
        """Identifier used to count distinct users."""
        return self.user_id or self.user_name or None


class WeeklySummary(BaseModel):
    """Thread activity for one UTC Monday-to-Sunday week."""

    week_start: datetime  # Monday 00:00:00.000Z
    week_end: datetime  # Sunday 23:59:59.999Z
    unique_users: int
    conversations: int
