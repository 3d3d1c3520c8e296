"""Conversation state records."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Literal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

MessageRole = Literal["user", "assistant"]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class MessageMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    visualizations: list[dict[str, Any]] = Field(default_factory=list)
    topics: list[str] = Field(default_factory=list)


class ConversationMessage(BaseModel):
    """One stored chat message. Instances are immutable."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid4()))
    role: MessageRole
    content: str
    created_at: datetime = Field(default_factory=utc_now)
    metadata: MessageMetadata | None = None

    def to_chat(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}

    def serialize(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class ConversationState(BaseModel):
    """Per-user conversation document, replaced wholesale on save."""

    user_id: str
    summary: str | None = None
    topics: list[str] = Field(default_factory=list)
    messages: list[ConversationMessage] = Field(default_factory=list)
    updated_at: datetime = Field(default_factory=utc_now)

    @classmethod
    def empty(cls, user_id: str) -> "ConversationState":
        return cls(user_id=user_id)


def serialize_messages(messages: list[ConversationMessage]) -> list[dict[str, Any]]:
    return [message.serialize() for message in messages]
