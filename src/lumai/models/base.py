"""Base model interfaces."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, Field


class ToolCall(BaseModel):
    id: str | None = None
    name: str
    arguments: dict[str, Any] = Field(default_factory=dict)


class GenerationParams(BaseModel):
    temperature: float = 0.2
    top_p: float = 0.9
    max_tokens: int = 750


class ModelResponse(BaseModel):
    content: str = ""
    tool_calls: list[ToolCall] = Field(default_factory=list)
    usage: dict[str, Any] | None = None

    def to_message(self) -> dict[str, Any]:
        """Assistant message echoing this response back to the model."""
        message: dict[str, Any] = {"role": "assistant", "content": self.content}
        if self.tool_calls:
            message["tool_calls"] = [
                {
                    "id": call.id,
                    "type": "function",
                    "function": {"name": call.name, "arguments": _dump_arguments(call.arguments)},
                }
                for call in self.tool_calls
            ]
        return message


def _dump_arguments(arguments: dict[str, Any]) -> str:
    return json.dumps(arguments, ensure_ascii=False)


class BaseChatModel(ABC):
    """Abstract chat model interface."""

    @abstractmethod
    def chat(
        self,
        messages: list[dict[str, Any]],
        tools: list[dict[str, Any]] | None,
        params: GenerationParams,
    ) -> ModelResponse:
        """Send one chat request and return the model response."""
        raise NotImplementedError
