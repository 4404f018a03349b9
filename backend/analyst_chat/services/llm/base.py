"""Abstract LLM provider interface and the reply shapes providers return.

A reply is one of three variants:

- ``PlainReply``: the provider handed back a bare string
- ``FieldReply``: a structured object carrying a ``text`` field
- ``PartsReply``: a sequence of typed parts, e.g. text mixed with tool calls

``extract_reply_text`` turns any of them into plain text and never raises.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

NO_RESPONSE = "⚠️ No response from the model."


@dataclass(frozen=True)
class ReplyPart:
    type: str
    text: str | None = None


@dataclass(frozen=True)
class PlainReply:
    text: str


@dataclass(frozen=True)
class FieldReply:
    fields: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class PartsReply:
    parts: list[ReplyPart] = field(default_factory=list)


ProviderReply = PlainReply | FieldReply | PartsReply


def extract_reply_text(reply: ProviderReply | None) -> str:
    if isinstance(reply, PartsReply):
        for part in reply.parts:
            if part.type == "text" and isinstance(part.text, str):
                return part.text
        return ""
    if isinstance(reply, PlainReply) and isinstance(reply.text, str):
        return reply.text
    if isinstance(reply, FieldReply) and isinstance(reply.fields.get("text"), str):
        return reply.fields["text"]
    return NO_RESPONSE


class BaseLLMProvider(ABC):
    @abstractmethod
    async def generate(self, prompt: str) -> ProviderReply:
        """Send a single prompt and return the provider's reply."""
        ...
