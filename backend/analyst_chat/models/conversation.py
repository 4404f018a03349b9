"""Chat session and conversation models for chat history persistence."""

from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import JSON, Column, UniqueConstraint
from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ChatSession(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    session_id: str = Field(index=True, unique=True)
    student_id: Optional[str] = Field(default=None, index=True)
    message_count: int = Field(default=0)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: Optional[datetime] = None


class Conversation(SQLModel, table=True):
    __table_args__ = (UniqueConstraint("student_id", "session_id"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    student_id: str = Field(index=True)
    session_id: str
    title: str = Field(default="Untitled Conversation")
    # Full transcript as [{"role": "user" | "ai", "text": "..."}]
    messages: list[dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON))
    # Nullable so rows imported without timestamps still load
    created_at: Optional[datetime] = Field(default_factory=utcnow)
    updated_at: Optional[datetime] = Field(default_factory=utcnow)
