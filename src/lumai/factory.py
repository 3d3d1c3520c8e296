"""Shared construction helpers for models, functions, storage and turns."""

from __future__ import annotations

import json

from lumai.config import Settings
from lumai.memory import ConversationMemory
from lumai.models.base import BaseChatModel
from lumai.models.mock import MockChatModel
from lumai.models.openai_compat import OpenAICompatChatModel
from lumai.orchestrator import TurnOrchestrator
from lumai.services.base import Services
from lumai.store import ConversationStore, InMemoryConversationStore, SqliteConversationStore
from lumai.tools.builtins import BUILTIN_SPECS
from lumai.tools.registry import FunctionRegistry


def build_model(settings: Settings, use_mock: bool = False) -> BaseChatModel:
    if use_mock or not settings.openai_api_key:
        return MockChatModel()
    extra_headers = None
    if settings.openai_extra_headers:
        extra_headers = json.loads(settings.openai_extra_headers)
    return OpenAICompatChatModel(
        base_url=settings.openai_base_url,
        api_key=settings.openai_api_key,
        model=settings.openai_model,
        timeout_seconds=settings.openai_timeout_seconds,
        extra_headers=extra_headers,
    )


def build_registry() -> FunctionRegistry:
    return FunctionRegistry(BUILTIN_SPECS)


def build_store(settings: Settings) -> ConversationStore:
    if settings.conversation_db_path:
        return SqliteConversationStore(
            settings.conversation_db_path, max_stored_messages=settings.max_stored_messages
        )
    return InMemoryConversationStore(max_stored_messages=settings.max_stored_messages)


def build_memory(
    settings: Settings, model: BaseChatModel, store: ConversationStore | None = None
) -> ConversationMemory:
    return ConversationMemory(store or build_store(settings), model, settings)


def build_orchestrator(
    settings: Settings,
    services: Services,
    *,
    model: BaseChatModel | None = None,
    store: ConversationStore | None = None,
    registry: FunctionRegistry | None = None,
) -> TurnOrchestrator:
    model = model or build_model(settings)
    return TurnOrchestrator(
        registry=registry or build_registry(),
        model=model,
        memory=build_memory(settings, model, store),
        services=services,
        settings=settings,
    )
