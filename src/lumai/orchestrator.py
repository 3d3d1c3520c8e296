"""Turn orchestration: one user message in, one grounded assistant reply out."""

from __future__ import annotations

import re
import threading
from contextlib import contextmanager
from enum import Enum
from typing import Any, Iterator

from pydantic import BaseModel, Field

from lumai.completion import CompletionRequest, run_model_completion
from lumai.config import DEFAULT_SETTINGS, Settings
from lumai.conversation import (
    ConversationMessage,
    ConversationState,
    MessageMetadata,
    serialize_messages,
)
from lumai.errors import ProviderFailure, ValidationError
from lumai.executor import TracedExecutor
from lumai.intents import detect_intents, intent_topics, response_mode, tool_intents
from lumai.memory import ConversationMemory
from lumai.models.base import BaseChatModel
from lumai.prefetch import prefetch_messages, run_prefetch
from lumai.prompts import (
    FEW_SHOT_MESSAGES,
    build_system_prompt,
    mode_instruction,
    summary_context_message,
)
from lumai.sanitizer import sanitize_reply
from lumai.services.base import Services
from lumai.tools.base import FunctionContext
from lumai.tools.registry import FunctionRegistry
from lumai.trace import TurnTrace
from lumai.util.logging import get_logger, loggable, redact

logger = get_logger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")


class TurnState(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    PREFETCHING = "prefetching"
    INVOKING = "invoking"
    SANITIZING = "sanitizing"
    PERSISTING = "persisting"
    DONE = "done"
    FAILED = "failed"


_TRANSITIONS: dict[TurnState, tuple[TurnState, ...]] = {
    TurnState.IDLE: (TurnState.VALIDATING,),
    TurnState.VALIDATING: (TurnState.PREFETCHING, TurnState.FAILED),
    TurnState.PREFETCHING: (TurnState.INVOKING,),
    TurnState.INVOKING: (TurnState.SANITIZING, TurnState.FAILED),
    TurnState.SANITIZING: (TurnState.PERSISTING,),
    TurnState.PERSISTING: (TurnState.DONE,),
    TurnState.DONE: (),
    TurnState.FAILED: (),
}


class TurnStateMachine:
    """Forward-only state tracker for a single turn."""

    def __init__(self, user_id: str) -> None:
        self.user_id = user_id
        self.state = TurnState.IDLE
        self.history: list[TurnState] = [TurnState.IDLE]

    def advance(self, target: TurnState) -> None:
        if target not in _TRANSITIONS[self.state]:
            raise RuntimeError(f"Invalid turn transition {self.state.value} -> {target.value}")
        logger.debug("Turn for %s: %s -> %s", self.user_id, self.state.value, target.value)
        self.state = target
        self.history.append(target)


class TurnResult(BaseModel):
    summary: str | None = None
    message: dict[str, Any]
    messages: list[dict[str, Any]] = Field(default_factory=list)
    trace: TurnTrace


def normalize_message(text: str | None) -> str:
    return _WHITESPACE_RE.sub(" ", text or "").strip()


def merge_topics(existing: list[str], new: list[str], limit: int) -> list[str]:
    """Ordered unique topics with the most recent last, keeping at most ``limit``."""
    merged = [topic for topic in existing if topic not in new]
    merged.extend(new)
    return merged[-limit:] if limit > 0 else []


class _UserLocks:
    """Per-user locks, dropped once no turn holds or waits on them."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, tuple[threading.Lock, int]] = {}

    def __len__(self) -> int:
        return len(self._locks)

    @contextmanager
    def hold(self, user_id: str) -> Iterator[None]:
        with self._guard:
            lock, users = self._locks.get(user_id, (threading.Lock(), 0))
            self._locks[user_id] = (lock, users + 1)
        try:
            with lock:
                yield
        finally:
            with self._guard:
                _, users = self._locks[user_id]
                if users <= 1:
                    del self._locks[user_id]
                else:
                    self._locks[user_id] = (lock, users - 1)


class TurnOrchestrator:
    """Runs assistant turns against a registry, a chat model and conversation memory."""

    def __init__(
        self,
        registry: FunctionRegistry,
        model: BaseChatModel,
        memory: ConversationMemory,
        services: Services,
        settings: Settings | None = None,
    ) -> None:
        self.registry = registry
        self.model = model
        self.memory = memory
        self.services = services
        self.settings = settings or DEFAULT_SETTINGS
        self._locks = _UserLocks()

    def run_turn(self, user_id: str, message: str | None, user_name: str | None = None) -> TurnResult:
        machine = TurnStateMachine(user_id)
        machine.advance(TurnState.VALIDATING)
        text = normalize_message(message)
        if not text:
            machine.advance(TurnState.FAILED)
            raise ValidationError("Message cannot be empty.")
        if not self.settings.serialize_turns:
            return self._run(machine, user_id, text, user_name)
        with self._locks.hold(user_id):
            return self._run(machine, user_id, text, user_name)

    def snapshot(self, user_id: str) -> dict[str, Any]:
        state = self.memory.load(user_id)
        return {"summary": state.summary, "messages": serialize_messages(state.messages)}

    def _run(
        self, machine: TurnStateMachine, user_id: str, text: str, user_name: str | None
    ) -> TurnResult:
        logger.info("Turn started for %s: %s", user_id, loggable(text))
        state = self.memory.load(user_id)
        trace = TurnTrace(request=text, user_display_name=user_name)
        executor = TracedExecutor(self.registry, trace)
        context = FunctionContext(user_id=user_id, services=self.services, user_name=user_name)

        machine.advance(TurnState.PREFETCHING)
        intents = detect_intents(text)
        outcomes = run_prefetch(
            tool_intents(intents), executor, context, max_workers=self.settings.prefetch_workers
        )
        history = self.memory.context_messages(state)
        request_messages = self._request_messages(
            state, history, prefetch_messages(outcomes), text, user_name, intents
        )

        machine.advance(TurnState.INVOKING)
        request = CompletionRequest(
            messages=request_messages,
            temperature=self.settings.temperature,
            top_p=self.settings.top_p,
            max_tokens=self.settings.max_tokens,
            retry_count=self.settings.retry_count,
            functions=self.registry.list(),
            execute_function=executor.execute,
            function_context=context,
            max_tool_depth=self.settings.max_tool_depth,
            backoff_seconds=self.settings.retry_backoff_seconds,
        )
        try:
            completion = run_model_completion(self.model, request)
        except ProviderFailure as exc:
            machine.advance(TurnState.FAILED)
            logger.error("Turn failed for %s: %s", user_id, redact(str(exc)))
            raise

        machine.advance(TurnState.SANITIZING)
        content = sanitize_reply(completion.content, self.settings.reply_prefix)
        trace.response_plan = content
        topics = intent_topics(intents)
        visualizations = executor.take_visualizations()
        metadata = None
        if visualizations or topics:
            metadata = MessageMetadata(visualizations=visualizations, topics=topics)
        user_message = ConversationMessage(role="user", content=text)
        assistant_message = ConversationMessage(role="assistant", content=content, metadata=metadata)

        machine.advance(TurnState.PERSISTING)
        retained = state.messages[-self.settings.context_window :] if self.settings.context_window > 0 else []
        messages, summary = self.memory.rotate(
            [*retained, user_message, assistant_message], state.summary
        )
        saved = self.memory.save(
            ConversationState(
                user_id=user_id,
                summary=summary,
                topics=merge_topics(state.topics, topics, self.settings.max_tracked_topics),
                messages=messages,
            )
        )

        machine.advance(TurnState.DONE)
        logger.info(
            "Turn finished for %s with %s function call(s).", user_id, len(trace.function_calls)
        )
        return TurnResult(
            summary=saved.summary,
            message=assistant_message.serialize(),
            messages=serialize_messages(saved.messages),
            trace=trace,
        )

    def _request_messages(
        self,
        state: ConversationState,
        history: list[dict[str, str]],
        tool_exchanges: list[dict[str, Any]],
        text: str,
        user_name: str | None,
        intents: list[Any],
    ) -> list[dict[str, Any]]:
        messages: list[dict[str, Any]] = [
            {"role": "system", "content": build_system_prompt(user_name)}
        ]
        summary_message = summary_context_message(state.summary)
        if summary_message is not None:
            messages.append(summary_message)
        instruction = mode_instruction(response_mode(intents))
        if instruction is not None:
            messages.append(instruction)
        messages.extend(FEW_SHOT_MESSAGES)
        messages.extend(history)
        messages.extend(tool_exchanges)
        messages.append({"role": "user", "content": text})
        return messages
