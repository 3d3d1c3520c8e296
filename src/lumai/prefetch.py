"""Execution of prefetch calls and their synthetic tool exchanges."""

from __future__ import annotations

import json
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any
from uuid import uuid4

from lumai.executor import TracedExecutor
from lumai.intents import ToolCallRequest, ToolIntent
from lumai.tools.base import FunctionContext
from lumai.util.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class PrefetchOutcome:
    request: ToolCallRequest
    result: Any = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def tool_exchange(request: ToolCallRequest, result: Any) -> list[dict[str, Any]]:
    """Build the assistant tool-call message and matching tool result message."""
    call_id = f"prefetch-{uuid4().hex[:12]}"
    return [
        {
            "role": "assistant",
            "content": "",
            "tool_calls": [
                {
                    "id": call_id,
                    "type": "function",
                    "function": {
                        "name": request.name,
                        "arguments": json.dumps(request.arguments),
                    },
                }
            ],
        },
        {
            "role": "tool",
            "tool_call_id": call_id,
            "name": request.name,
            "content": json.dumps(result if result is not None else {}, ensure_ascii=False, default=str),
        },
    ]


def run_prefetch(
    intents: list[ToolIntent],
    executor: TracedExecutor,
    context: FunctionContext,
    max_workers: int = 1,
) -> list[PrefetchOutcome]:
    """Execute each intent's call; failures are recorded, never raised.

    With ``max_workers > 1`` the calls run concurrently. Outcomes always come
    back in intent order.
    """
    requests = [intent.to_call() for intent in intents]
    if not requests:
        return []

    def run_one(request: ToolCallRequest) -> PrefetchOutcome:
        try:
            result = executor.execute(request.name, request.arguments, context)
        except Exception as exc:
            logger.warning("Prefetch call %s failed: %s", request.name, exc)
            return PrefetchOutcome(request=request, error=str(exc) or "Unknown error")
        return PrefetchOutcome(request=request, result=result)

    if max_workers <= 1 or len(requests) == 1:
        return [run_one(request) for request in requests]
    with ThreadPoolExecutor(max_workers=min(max_workers, len(requests))) as pool:
        return list(pool.map(run_one, requests))


def prefetch_messages(outcomes: list[PrefetchOutcome]) -> list[dict[str, Any]]:
    messages: list[dict[str, Any]] = []
    for outcome in outcomes:
        if outcome.ok:
            messages.extend(tool_exchange(outcome.request, outcome.result))
    return messages
