"""REST API for per-student conversation history."""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from analyst_chat.api.deps import get_store
from analyst_chat.core.errors import ValidationError
from analyst_chat.services.conversation_store import TITLE_MAX_CHARS, ConversationRecord, ConversationStore

router = APIRouter()
logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class ConversationCreate(BaseModel):
    studentId: str | int | None = None
    messages: list[dict[str, Any]] | None = None
    title: str | None = None
    sessionId: str | None = None


def _display_title(conv: ConversationRecord, index: int) -> str:
    title = (conv.title or "").strip()
    if title:
        return title
    if conv.messages and conv.messages[0].get("text"):
        return str(conv.messages[0]["text"])[:TITLE_MAX_CHARS]
    return f"Conversation {index + 1}"


def _normalize(conv: ConversationRecord, index: int) -> dict[str, Any]:
    updated_at = conv.updated_at or conv.created_at or EPOCH
    created_at = conv.created_at or conv.updated_at or EPOCH
    return {
        "id": str(conv.id if conv.id is not None else index + 1),
        "title": _display_title(conv, index),
        "updatedAt": updated_at,
        "createdAt": created_at,
        "sessionId": conv.session_id,
        "messages": conv.messages or [],
        "date": updated_at,
    }


@router.get("")
async def list_history(
    id: str | None = None,
    studentId: str | None = None,
    store: ConversationStore = Depends(get_store),
):
    student_id = id or studentId
    if not student_id:
        raise ValidationError("Missing student ID")

    conversations = [_normalize(c, i) for i, c in enumerate(store.list_conversations(student_id))]
    conversations.sort(key=lambda c: c["updatedAt"], reverse=True)
    return {
        "success": True,
        "conversations": [
            {
                **c,
                "updatedAt": c["updatedAt"].isoformat(),
                "createdAt": c["createdAt"].isoformat(),
                "date": c["date"].isoformat(),
            }
            for c in conversations
        ],
    }


@router.post("")
async def save_history(body: ConversationCreate, store: ConversationStore = Depends(get_store)):
    if body.studentId is None or str(body.studentId).strip() == "" or body.messages is None:
        raise ValidationError("Missing fields")
    student_id = str(body.studentId).strip()

    session_id = body.sessionId or str(uuid.uuid4())
    store.save_conversation(student_id, session_id, body.messages, title=body.title)
    logger.debug(f"Saved conversation for {student_id} in session {session_id}")
    return {"success": True, "sessionId": session_id}
