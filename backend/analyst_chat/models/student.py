"""Student profile model. Opaque blobs are passed through unvalidated."""

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel

from analyst_chat.models.conversation import utcnow


class Student(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    student_id: str = Field(index=True, unique=True)
    name: str
    last_login: datetime = Field(default_factory=utcnow)
    created_at: datetime = Field(default_factory=utcnow)

    profile: Optional[Any] = Field(default=None, sa_column=Column(JSON))
    attendance: Optional[Any] = Field(default=None, sa_column=Column(JSON))
    enrollment: Optional[Any] = Field(default=None, sa_column=Column(JSON))
    scores: Optional[Any] = Field(default=None, sa_column=Column(JSON))
    assignments: Optional[Any] = Field(default=None, sa_column=Column(JSON))
    examlist: Optional[Any] = Field(default=None, sa_column=Column(JSON))


# Fields a login or profile refresh may overwrite
STUDENT_BLOB_FIELDS = ("profile", "attendance", "enrollment", "scores", "assignments", "examlist")
