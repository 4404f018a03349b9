"""Name + numeric ID login. No credential verification is performed."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from analyst_chat.api.deps import get_store
from analyst_chat.core.errors import NotFoundError, ValidationError
from analyst_chat.services.conversation_store import ConversationStore
from analyst_chat.services.identity import validate_name, validate_student_id

router = APIRouter()
logger = logging.getLogger(__name__)


class LoginRequest(BaseModel):
    id: str | int | float | None = None
    studentId: str | int | float | None = None
    name: str | int | None = None


@router.post("")
async def login(body: LoginRequest, store: ConversationStore = Depends(get_store)):
    raw_id = body.id if body.id is not None else body.studentId
    if raw_id is None or str(raw_id).strip() == "" or not body.name:
        raise ValidationError("ID and name are required")

    student_id = validate_student_id(raw_id)
    name = validate_name(body.name)

    now = datetime.now(timezone.utc)
    try:
        store.upsert_student(student_id, name, last_login=now)
        session_id = store.create_session(student_id)
    except Exception:
        logger.exception(f"Authentication error for student {student_id}")
        return JSONResponse(
            status_code=500,
            content={"success": False, "message": "Internal server error"},
        )

    logger.info(f"Student {student_id} logged in, session {session_id}")
    return {
        "success": True,
        "student": {
            "studentId": student_id,
            "name": name,
            "lastLogin": now.isoformat(),
        },
        "sessionId": session_id,
    }


@router.get("")
async def get_student(
    id: str | None = None,
    studentId: str | None = None,
    store: ConversationStore = Depends(get_store),
):
    student_id = id or studentId
    if not student_id:
        raise ValidationError("ID is required")

    student = store.get_student(student_id)
    if student is None:
        logger.debug(f"Student {student_id} not found")
        raise NotFoundError("Student not found")

    return {
        "success": True,
        "student": {
            "studentId": student.student_id,
            "name": student.name,
            "lastLogin": student.last_login.isoformat(),
            "profile": student.profile,
        },
    }
