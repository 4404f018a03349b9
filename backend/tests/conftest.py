"""Shared test fixtures for backend tests."""

from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine

from analyst_chat.api.deps import get_store
from analyst_chat.services.context_loader import ContextLoader, get_context_loader
from analyst_chat.services.conversation_store import ConversationStore
from analyst_chat.services.llm.base import BaseLLMProvider, PlainReply, ProviderReply
from analyst_chat.services.model_gateway import ModelGateway, get_model_gateway


class FakeClock:
    """Deterministic clock that advances one minute per reading."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
        self.readings: list[datetime] = []

    def __call__(self) -> datetime:
        value = self.now
        self.readings.append(value)
        self.now = self.now + timedelta(minutes=1)
        return value


class FakeProvider(BaseLLMProvider):
    def __init__(self, reply: ProviderReply | None = None, error: Exception | None = None):
        self.reply = reply or PlainReply("important: revenue is up.\n\nnote: costs are flat.")
        self.error = error
        self.prompts: list[str] = []

    async def generate(self, prompt: str) -> ProviderReply:
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return self.reply


@pytest.fixture
def engine():
    # In-memory SQLite with StaticPool so all connections (including threads) share one DB
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    import analyst_chat.models  # noqa: F401 - register models
    SQLModel.metadata.create_all(test_engine)
    yield test_engine
    SQLModel.metadata.drop_all(test_engine)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(engine, clock):
    return ConversationStore(engine, clock=clock)


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def gateway(provider):
    return ModelGateway(api_key="test-key", timeout_seconds=5, provider_factory=lambda key: provider)


@pytest.fixture
def context_loader(tmp_path):
    return ContextLoader(data_dir=tmp_path, files=["3103.xlsx", "Expense Code Mapping Logic.xlsx"])


@pytest.fixture
def client(engine, store, gateway, context_loader):
    """FastAPI TestClient with all external deps swapped out."""
    with patch("analyst_chat.core.database.engine", engine):
        from analyst_chat.main import app

        app.dependency_overrides[get_store] = lambda: store
        app.dependency_overrides[get_model_gateway] = lambda: gateway
        app.dependency_overrides[get_context_loader] = lambda: context_loader

        with TestClient(app) as c:
            yield c

        app.dependency_overrides.clear()
