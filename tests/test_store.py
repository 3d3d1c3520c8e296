import datetime as dt

import pytest

from lumai.conversation import ConversationMessage, ConversationState, MessageMetadata
from lumai.store import InMemoryConversationStore, SqliteConversationStore


def _state(user_id: str, count: int) -> ConversationState:
    messages = [
        ConversationMessage(role="user" if index % 2 == 0 else "assistant", content=f"m{index}")
        for index in range(count)
    ]
    return ConversationState(
        user_id=user_id,
        summary="- Weight 72.4 kg",
        topics=["weight"],
        messages=messages,
        updated_at=dt.datetime(2020, 1, 1, tzinfo=dt.timezone.utc),
    )


@pytest.fixture(params=["memory", "sqlite"])
def store(request, tmp_path):
    if request.param == "memory":
        return InMemoryConversationStore(max_stored_messages=30)
    return SqliteConversationStore(tmp_path / "db" / "conversations.db", max_stored_messages=30)


def test_load_unknown_user_is_empty(store):
    state = store.load("new-user")
    assert state.user_id == "new-user"
    assert state.summary is None
    assert state.messages == []


def test_save_and_load_round_trip(store):
    state = _state("u1", 4)
    message = ConversationMessage(
        role="assistant",
        content="Here is your chart.",
        metadata=MessageMetadata(visualizations=[{"type": "weight_trend"}], topics=["visualization"]),
    )
    state.messages.append(message)
    store.save(state)
    loaded = store.load("u1")
    assert loaded.summary == "- Weight 72.4 kg"
    assert loaded.topics == ["weight"]
    assert [m.content for m in loaded.messages] == ["m0", "m1", "m2", "m3", "Here is your chart."]
    assert loaded.messages[-1] == message


def test_save_caps_messages_and_stamps_time(store):
    saved = store.save(_state("u2", 35))
    assert saved.updated_at.year > 2020
    loaded = store.load("u2")
    assert len(loaded.messages) == 30
    assert loaded.messages[0].content == "m5"


def test_memory_store_returns_copies():
    store = InMemoryConversationStore()
    store.save(_state("u3", 2))
    loaded = store.load("u3")
    loaded.messages.clear()
    assert len(store.load("u3").messages) == 2
    assert "u3" in store
