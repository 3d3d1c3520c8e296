"""Mock chat model for offline testing."""

from __future__ import annotations

from typing import Any, Callable

from lumai.models.base import BaseChatModel, GenerationParams, ModelResponse

Responder = Callable[[list[dict[str, Any]], list[dict[str, Any]] | None], ModelResponse]


class MockChatModel(BaseChatModel):
    """Deterministic model: scripted responses first, then a responder or echo."""

    def __init__(
        self,
        scripted: list[ModelResponse] | None = None,
        responder: Responder | None = None,
    ) -> None:
        self._scripted = list(scripted or [])
        self._responder = responder
        self.calls: list[dict[str, Any]] = []

    def chat(
        self,
        messages: list[dict[str, Any]],
        tools: list[dict[str, Any]] | None,
        params: GenerationParams,
    ) -> ModelResponse:
        self.calls.append({"messages": list(messages), "tools": tools, "params": params})
        if self._scripted:
            return self._scripted.pop(0)
        if self._responder is not None:
            return self._responder(messages, tools)
        last_user = next(
            (message.get("content") for message in reversed(messages) if message.get("role") == "user"),
            "",
        )
        return ModelResponse(content=f"Mock response to: {last_user}")
