"""Tests for the deadline-bounded model gateway and reply extraction."""

import asyncio

import pytest

from analyst_chat.core.errors import ConfigurationError, ModelTimeoutError, UpstreamError
from analyst_chat.services.llm.base import (
    NO_RESPONSE,
    BaseLLMProvider,
    FieldReply,
    PartsReply,
    PlainReply,
    ReplyPart,
    extract_reply_text,
)
from analyst_chat.services.model_gateway import ModelGateway


class FakeProvider(BaseLLMProvider):
    def __init__(self, reply=None, error=None):
        self.reply = reply or PlainReply("ok")
        self.error = error
        self.prompts = []

    async def generate(self, prompt):
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return self.reply


class HangingProvider(BaseLLMProvider):
    def __init__(self):
        self.cancelled = False

    async def generate(self, prompt):
        try:
            await asyncio.sleep(60)
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        return PlainReply("too late")


def test_extract_plain_text():
    assert extract_reply_text(PlainReply("hello")) == "hello"


def test_extract_text_field():
    assert extract_reply_text(FieldReply({"text": "from field", "other": 1})) == "from field"


def test_extract_first_text_part():
    reply = PartsReply([ReplyPart("function_call"), ReplyPart("text", "first"), ReplyPart("text", "second")])
    assert extract_reply_text(reply) == "first"


def test_extract_parts_without_text_is_empty():
    assert extract_reply_text(PartsReply([ReplyPart("function_call")])) == ""


def test_extract_unknown_shapes_fail_soft():
    assert extract_reply_text(FieldReply({"text": None})) == NO_RESPONSE
    assert extract_reply_text(None) == NO_RESPONSE


def test_complete_returns_reply_text():
    provider = FakeProvider(PlainReply("analysis"))
    gateway = ModelGateway("key", provider_factory=lambda key: provider)
    assert asyncio.run(gateway.complete("prompt")) == "analysis"
    assert provider.prompts == ["prompt"]


def test_missing_key_fails_before_building_provider():
    calls = []

    def factory(key):
        calls.append(key)
        return FakeProvider()

    gateway = ModelGateway("", provider_factory=factory)
    with pytest.raises(ConfigurationError):
        asyncio.run(gateway.complete("prompt"))
    assert calls == []


def test_deadline_raises_timeout_and_cancels_call():
    provider = HangingProvider()
    gateway = ModelGateway("key", provider_factory=lambda key: provider)
    with pytest.raises(ModelTimeoutError):
        asyncio.run(gateway.complete("prompt", timeout=0.05))
    assert provider.cancelled


def test_provider_failure_becomes_upstream_error():
    provider = FakeProvider(error=ConnectionError("network down"))
    gateway = ModelGateway("key", provider_factory=lambda key: provider)
    with pytest.raises(UpstreamError) as exc_info:
        asyncio.run(gateway.complete("prompt"))
    assert "network down" not in exc_info.value.message
