"""Persistence for students, chat sessions and conversation transcripts.

Every write is an upsert keyed by a stable identifier:

- students by ``student_id``
- sessions by ``session_id``
- conversations by ``(student_id, session_id)``

``save_conversation`` always receives the full transcript and overwrites the
stored one, so two concurrent saves to the same session resolve as
last-write-wins.
"""

import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Sequence

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from analyst_chat.core.errors import PersistenceError
from analyst_chat.models.conversation import ChatSession, Conversation, utcnow
from analyst_chat.models.student import STUDENT_BLOB_FIELDS, Student

logger = logging.getLogger(__name__)

TITLE_MAX_CHARS = 40
DEFAULT_TITLE = "Untitled Conversation"


def _as_utc(value: datetime | None) -> datetime | None:
    # SQLite drops tzinfo on the way back
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def derive_title(messages: Sequence[dict[str, Any]], title: str | None = None) -> str:
    """Use the explicit title, else the first user message, else a fallback."""
    if title:
        return title
    for message in messages:
        if message.get("role") == "user" and message.get("text"):
            return str(message["text"])[:TITLE_MAX_CHARS]
    return DEFAULT_TITLE


@dataclass
class StudentRecord:
    student_id: str
    name: str
    last_login: datetime
    created_at: datetime
    profile: Any = None


@dataclass
class ConversationRecord:
    id: int
    student_id: str
    session_id: str
    title: str
    created_at: datetime | None
    updated_at: datetime | None
    messages: list[dict[str, Any]] = field(default_factory=list)


class ConversationStore:
    def __init__(self, engine: Engine, clock: Callable[[], datetime] = utcnow):
        self.engine = engine
        self.clock = clock

    def upsert_student(
        self,
        student_id: str,
        name: str,
        last_login: datetime | None = None,
        **blobs: Any,
    ) -> None:
        unknown = set(blobs) - set(STUDENT_BLOB_FIELDS)
        if unknown:
            raise TypeError(f"Unknown student fields: {', '.join(sorted(unknown))}")

        now = self.clock()
        try:
            with Session(self.engine) as session:
                student = session.exec(
                    select(Student).where(Student.student_id == student_id)
                ).first()
                if student is None:
                    student = Student(student_id=student_id, name=name, created_at=now)
                student.name = name
                student.last_login = last_login or now
                for blob in STUDENT_BLOB_FIELDS:
                    setattr(student, blob, blobs.get(blob))
                session.add(student)
                session.commit()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to upsert student {student_id}: {e}") from e

    def get_student(self, student_id: str) -> StudentRecord | None:
        try:
            with Session(self.engine) as session:
                student = session.exec(
                    select(Student).where(Student.student_id == student_id)
                ).first()
                if student is None:
                    return None
                return StudentRecord(
                    student_id=student.student_id,
                    name=student.name,
                    last_login=_as_utc(student.last_login),  # type: ignore[arg-type]
                    created_at=_as_utc(student.created_at),  # type: ignore[arg-type]
                    profile=student.profile,
                )
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to load student {student_id}: {e}") from e

    def create_session(self, student_id: str) -> str:
        """Insert a fresh session for the student and return its id."""
        session_id = str(uuid.uuid4())
        chat_session = ChatSession(
            session_id=session_id,
            student_id=student_id,
            message_count=0,
            created_at=self.clock(),
        )
        try:
            with Session(self.engine) as session:
                session.add(chat_session)
                session.commit()
            return session_id
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to create session for {student_id}: {e}") from e

    def get_message_count(self, session_id: str) -> int | None:
        try:
            with Session(self.engine) as session:
                chat_session = session.exec(
                    select(ChatSession).where(ChatSession.session_id == session_id)
                ).first()
                return chat_session.message_count if chat_session else None
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to read message count for {session_id}: {e}") from e

    def save_conversation(
        self,
        student_id: str,
        session_id: str,
        messages: Sequence[dict[str, Any]],
        title: str | None = None,
    ) -> None:
        now = self.clock()
        transcript = [dict(m) for m in messages]
        try:
            with Session(self.engine) as session:
                conv = session.exec(
                    select(Conversation).where(
                        Conversation.student_id == student_id,
                        Conversation.session_id == session_id,
                    )
                ).first()
                if conv is None:
                    conv = Conversation(student_id=student_id, session_id=session_id, created_at=now)
                conv.title = derive_title(transcript, title)
                conv.messages = transcript
                conv.updated_at = now
                session.add(conv)
                session.commit()
            logger.debug(f"Saved conversation {student_id}/{session_id} ({len(transcript)} messages)")
        except SQLAlchemyError as e:
            raise PersistenceError(
                f"Failed to save conversation {student_id}/{session_id}: {e}"
            ) from e

    def increment_message_count(self, session_id: str) -> None:
        now = self.clock()
        try:
            with Session(self.engine) as session:
                chat_session = session.exec(
                    select(ChatSession).where(ChatSession.session_id == session_id)
                ).first()
                if chat_session is None:
                    chat_session = ChatSession(session_id=session_id, created_at=now)
                chat_session.message_count += 1
                chat_session.updated_at = now
                session.add(chat_session)
                session.commit()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to bump message count for {session_id}: {e}") from e

    def list_conversations(self, student_id: str) -> list[ConversationRecord]:
        """All conversations for a student, most recently updated first."""
        try:
            with Session(self.engine) as session:
                rows = session.exec(
                    select(Conversation)
                    .where(Conversation.student_id == student_id)
                    .order_by(Conversation.updated_at.desc())  # type: ignore
                ).all()
                return [
                    ConversationRecord(
                        id=c.id,  # type: ignore[arg-type]
                        student_id=c.student_id,
                        session_id=c.session_id,
                        title=c.title,
                        created_at=_as_utc(c.created_at),
                        updated_at=_as_utc(c.updated_at),
                        messages=list(c.messages or []),
                    )
                    for c in rows
                ]
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to list conversations for {student_id}: {e}") from e
