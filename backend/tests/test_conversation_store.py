"""Tests for the upsert-based conversation store."""

import pytest
from sqlmodel import Session, select

from analyst_chat.core.errors import PersistenceError
from analyst_chat.models import ChatSession, Conversation, Student
from analyst_chat.services.conversation_store import DEFAULT_TITLE, ConversationStore, derive_title


def test_save_conversation_twice_keeps_one_record(store, clock):
    first_turn = [{"role": "user", "text": "What drove Q3 costs?"}, {"role": "ai", "text": "<p>Travel.</p>"}]
    store.save_conversation("1001", "sess-a", first_turn)
    first_time = clock.readings[-1]

    second_turn = first_turn + [{"role": "user", "text": "And Q4?"}, {"role": "ai", "text": "<p>Payroll.</p>"}]
    store.save_conversation("1001", "sess-a", second_turn)
    second_time = clock.readings[-1]

    conversations = store.list_conversations("1001")
    assert len(conversations) == 1
    conv = conversations[0]
    assert conv.messages == second_turn
    assert conv.created_at == first_time
    assert conv.updated_at == second_time
    assert conv.title == "What drove Q3 costs?"


def test_title_derivation():
    long_text = "x" * 100
    assert derive_title([{"role": "ai", "text": "hi"}, {"role": "user", "text": long_text}]) == "x" * 40
    assert derive_title([{"role": "user", "text": "hello"}], title="Explicit") == "Explicit"
    assert derive_title([]) == DEFAULT_TITLE
    assert derive_title([{"role": "ai", "text": "only ai"}]) == DEFAULT_TITLE


def test_list_conversations_newest_first(store):
    store.save_conversation("1001", "old", [{"role": "user", "text": "first"}])
    store.save_conversation("1001", "new", [{"role": "user", "text": "second"}])
    store.save_conversation("2002", "other", [{"role": "user", "text": "not mine"}])

    sessions = [c.session_id for c in store.list_conversations("1001")]
    assert sessions == ["new", "old"]

    # Touching the older one moves it to the front
    store.save_conversation("1001", "old", [{"role": "user", "text": "first"}, {"role": "ai", "text": "ok"}])
    assert [c.session_id for c in store.list_conversations("1001")] == ["old", "new"]


def test_create_session_never_collides(store):
    first = store.create_session("1001")
    second = store.create_session("1001")
    assert first != second
    assert store.get_message_count(first) == 0
    assert store.get_message_count(second) == 0


def test_increment_message_count(store):
    session_id = store.create_session("1001")
    store.increment_message_count(session_id)
    store.increment_message_count(session_id)
    assert store.get_message_count(session_id) == 2


def test_increment_message_count_upserts_unknown_session(store):
    store.increment_message_count("never-created")
    assert store.get_message_count("never-created") == 1


def test_upsert_student_creates_then_updates(store, engine, clock):
    store.upsert_student("1001", "Ada Lovelace")
    created = clock.readings[-1]
    store.upsert_student("1001", "Ada King", profile={"dept": "Finance"})

    with Session(engine) as session:
        students = session.exec(select(Student)).all()
    assert len(students) == 1

    student = store.get_student("1001")
    assert student.name == "Ada King"
    assert student.profile == {"dept": "Finance"}
    assert student.created_at == created
    assert student.last_login == clock.readings[-1]


def test_get_student_missing(store):
    assert store.get_student("404") is None


def test_upsert_student_rejects_unknown_fields(store):
    with pytest.raises(TypeError):
        store.upsert_student("1001", "Ada Lovelace", password="nope")


def test_storage_failure_becomes_persistence_error(engine):
    store = ConversationStore(engine)
    Conversation.__table__.drop(engine)  # type: ignore[attr-defined]
    with pytest.raises(PersistenceError):
        store.save_conversation("1001", "sess", [{"role": "user", "text": "hi"}])
    Conversation.__table__.create(engine)  # type: ignore[attr-defined]


def test_message_count_storage_failure_becomes_persistence_error(engine):
    store = ConversationStore(engine)
    ChatSession.__table__.drop(engine)  # type: ignore[attr-defined]
    with pytest.raises(PersistenceError):
        store.get_message_count("sess")
    ChatSession.__table__.create(engine)  # type: ignore[attr-defined]
