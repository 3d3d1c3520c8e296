"""Conversation persistence backends."""

from __future__ import annotations

import json
import sqlite3
import threading
from abc import ABC, abstractmethod
from pathlib import Path

from lumai.conversation import ConversationState, utc_now
from lumai.util.logging import get_logger

logger = get_logger(__name__)

MAX_STORED_MESSAGES = 30


class ConversationStore(ABC):
    @abstractmethod
    def load(self, user_id: str) -> ConversationState:
        """Return the stored state, or an empty one for a new user."""
        raise NotImplementedError

    @abstractmethod
    def save(self, state: ConversationState) -> ConversationState:
        """Replace the stored document and return what was written."""
        raise NotImplementedError


def _prepare(state: ConversationState, max_stored_messages: int) -> ConversationState:
    messages = state.messages[-max_stored_messages:] if max_stored_messages > 0 else []
    return state.model_copy(update={"messages": list(messages), "updated_at": utc_now()})


class InMemoryConversationStore(ConversationStore):
    def __init__(self, max_stored_messages: int = MAX_STORED_MESSAGES) -> None:
        self.max_stored_messages = max_stored_messages
        self._documents: dict[str, ConversationState] = {}
        self._lock = threading.Lock()

    def load(self, user_id: str) -> ConversationState:
        with self._lock:
            state = self._documents.get(user_id)
        if state is None:
            return ConversationState.empty(user_id)
        return state.model_copy(deep=True)

    def save(self, state: ConversationState) -> ConversationState:
        stored = _prepare(state, self.max_stored_messages)
        with self._lock:
            self._documents[state.user_id] = stored.model_copy(deep=True)
        logger.debug("Saved conversation for %s (%s messages).", state.user_id, len(stored.messages))
        return stored

    def __contains__(self, user_id: object) -> bool:
        return user_id in self._documents


class SqliteConversationStore(ConversationStore):
    """One JSON document per user in a single sqlite table."""

    def __init__(self, db_path: Path | str, max_stored_messages: int = MAX_STORED_MESSAGES) -> None:
        self.db_path = Path(db_path)
        self.max_stored_messages = max_stored_messages
        self._init_db()

    def _init_db(self) -> None:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        with sqlite3.connect(self.db_path) as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS assistant_conversations (
                    user_id TEXT PRIMARY KEY,
                    updated_at TEXT,
                    payload_json TEXT
                )
                """
            )
            conn.commit()

    def load(self, user_id: str) -> ConversationState:
        with sqlite3.connect(self.db_path) as conn:
            row = conn.execute(
                "SELECT payload_json FROM assistant_conversations WHERE user_id = ?",
                (user_id,),
            ).fetchone()
        if not row:
            return ConversationState.empty(user_id)
        return ConversationState.model_validate(json.loads(row[0]))

    def save(self, state: ConversationState) -> ConversationState:
        stored = _prepare(state, self.max_stored_messages)
        payload = stored.model_dump(mode="json")
        with sqlite3.connect(self.db_path) as conn:
            conn.execute(
                "INSERT OR REPLACE INTO assistant_conversations (user_id, updated_at, payload_json) "
                "VALUES (?, ?, ?)",
                (stored.user_id, payload["updated_at"], json.dumps(payload, ensure_ascii=False)),
            )
            conn.commit()
        logger.debug("Saved conversation for %s (%s messages).", state.user_id, len(stored.messages))
        return stored
