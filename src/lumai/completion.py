"""Model completion loop with function calling and retries."""

from __future__ import annotations

import json
import time
from dataclasses import dataclass, field
from typing import Any, Callable
from uuid import uuid4

from lumai.errors import ProviderExhausted, ProviderFailure
from lumai.models.base import BaseChatModel, GenerationParams, ModelResponse
from lumai.tools.base import FunctionContext, FunctionDefinition
from lumai.util.logging import get_logger

logger = get_logger(__name__)

FunctionExecutor = Callable[[str, dict[str, Any], FunctionContext | None], Any]


@dataclass
class CompletionRequest:
    messages: list[dict[str, Any]]
    temperature: float = 0.2
    top_p: float = 0.9
    max_tokens: int = 750
    retry_count: int = 1
    functions: list[FunctionDefinition] = field(default_factory=list)
    execute_function: FunctionExecutor | None = None
    function_context: FunctionContext | None = None
    max_tool_depth: int = 5
    backoff_seconds: float = 0.5

    def params(self) -> GenerationParams:
        return GenerationParams(
            temperature=self.temperature, top_p=self.top_p, max_tokens=self.max_tokens
        )

    def tool_schemas(self) -> list[dict[str, Any]] | None:
        if not self.functions:
            return None
        return [definition.openai_schema() for definition in self.functions]


@dataclass
class CompletionResult:
    content: str
    usage: dict[str, Any] | None = None
    tool_rounds: int = 0


def run_model_completion(model: BaseChatModel, request: CompletionRequest) -> CompletionResult:
    """Run the model until it stops requesting functions.

    Every function the model asks for goes through
    ``request.execute_function``. A failing call is reported back to the
    model as an error result. Each retry starts again from the original
    messages; the last failure is raised as ``ProviderFailure``.
    """
    attempts = max(0, request.retry_count) + 1
    for attempt in range(attempts - 1):
        try:
            return _run_attempt(model, request)
        except ProviderFailure as exc:
            logger.warning(
                "Completion attempt %s/%s failed: %s", attempt + 1, attempts, exc
            )
            if request.backoff_seconds > 0:
                time.sleep(request.backoff_seconds * (attempt + 1))
    return _run_attempt(model, request)


def _run_attempt(model: BaseChatModel, request: CompletionRequest) -> CompletionResult:
    conversation = list(request.messages)
    tools = request.tool_schemas()
    params = request.params()
    last_content = ""
    for depth in range(max(1, request.max_tool_depth)):
        response = model.chat(conversation, tools, params)
        last_content = response.content or ""
        execute = request.execute_function
        if not response.tool_calls or execute is None:
            return CompletionResult(content=last_content, usage=response.usage, tool_rounds=depth)
        response = _with_call_ids(response)
        conversation.append(response.to_message())
        conversation.extend(_run_tool_calls(response, execute, request.function_context))
    if last_content.strip():
        logger.warning("Tool depth %s exhausted; using partial content.", request.max_tool_depth)
        return CompletionResult(content=last_content, tool_rounds=request.max_tool_depth)
    raise ProviderExhausted("Assistant exceeded maximum tool depth")


def _with_call_ids(response: ModelResponse) -> ModelResponse:
    calls = [
        call if call.id else call.model_copy(update={"id": f"call-{uuid4().hex[:12]}"})
        for call in response.tool_calls
    ]
    return response.model_copy(update={"tool_calls": calls})


def _run_tool_calls(
    response: ModelResponse, execute: FunctionExecutor, context: FunctionContext | None
) -> list[dict[str, Any]]:
    messages: list[dict[str, Any]] = []
    for call in response.tool_calls:
        try:
            result = execute(call.name, call.arguments, context)
        except Exception as exc:
            result = {"status": "error", "message": str(exc) or "Failed to execute function call"}
        messages.append(
            {
                "role": "tool",
                "name": call.name,
                "tool_call_id": call.id,
                "content": json.dumps(result if result is not None else {}, ensure_ascii=False, default=str),
            }
        )
    return messages
