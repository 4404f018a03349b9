"""Shared FastAPI dependencies."""

from analyst_chat.core import database
from analyst_chat.services.conversation_store import ConversationStore

_store: ConversationStore | None = None


def get_store() -> ConversationStore:
    """Process-wide store, built on first use and reused afterwards."""
    global _store
    if _store is None:
        _store = ConversationStore(database.engine)
    return _store
