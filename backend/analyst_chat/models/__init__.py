from analyst_chat.models.conversation import ChatSession, Conversation
from analyst_chat.models.student import Student

__all__ = ["ChatSession", "Conversation", "Student"]
