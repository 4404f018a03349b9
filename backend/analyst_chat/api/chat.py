import logging
from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from analyst_chat.api.deps import get_store
from analyst_chat.core.errors import AppError
from analyst_chat.services.context_loader import ContextLoader, get_context_loader
from analyst_chat.services.conversation_store import ConversationStore
from analyst_chat.services.model_gateway import ModelGateway, get_model_gateway
from analyst_chat.services.prompt_builder import build_prompt
from analyst_chat.services.reply_formatter import format_reply

router = APIRouter()
logger = logging.getLogger(__name__)


class ChatRequest(BaseModel):
    message: str | int | float | None = None
    id: str | int | None = None
    studentId: str | int | None = None
    sessionId: str | None = None
    messages: list[dict[str, Any]] | None = None


def _reply(text: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"reply": f"⚠️ {text}"})


@router.post("")
async def chat(
    body: ChatRequest,
    store: ConversationStore = Depends(get_store),
    gateway: ModelGateway = Depends(get_model_gateway),
    context_loader: ContextLoader = Depends(get_context_loader),
):
    if body.message is None or str(body.message).strip() == "":
        return _reply("Message is required.", 400)
    message = str(body.message)

    try:
        gateway.ensure_configured()
        context = await context_loader.load()
        logger.info(f"Spreadsheet context ready, {len(context)} chars")
        reply_text = await gateway.complete(build_prompt(context, message))
    except AppError as e:
        if e.status_code >= 500:
            logger.error(f"Chat failed ({type(e).__name__}): {e.detail}")
        return _reply(e.message, e.status_code)

    formatted_reply = format_reply(reply_text)

    # Best effort: a storage failure never costs the user their answer
    student_id = body.studentId if body.studentId is not None else body.id
    if student_id is not None and body.sessionId and body.messages is not None:
        transcript = [
            *body.messages,
            {"role": "user", "text": message},
            {"role": "ai", "text": formatted_reply},
        ]
        try:
            store.save_conversation(str(student_id), body.sessionId, transcript)
            store.increment_message_count(body.sessionId)
        except Exception as e:
            logger.warning(f"Failed to persist conversation: {e}")

    return {"reply": formatted_reply}


@router.get("")
async def chat_status():
    return {"ok": True}
