"""Traced function execution shared by prefetch and model-driven calls."""

from __future__ import annotations

import json
import threading
from typing import Any

from lumai.tools.base import FunctionContext
from lumai.tools.registry import FunctionRegistry
from lumai.trace import TurnTrace
from lumai.util.logging import get_logger

logger = get_logger(__name__)

PREVIEW_LIMIT = 200
STRING_PREVIEW_LIMIT = 160


def preview_result(result: Any) -> str:
    """Short printable form of a function result."""
    if result is None:
        return "Empty result"
    if isinstance(result, str):
        return result[:STRING_PREVIEW_LIMIT]
    try:
        serialized = json.dumps(result, ensure_ascii=False)
    except (TypeError, ValueError):
        return "Result could not be serialized"
    if len(serialized) > PREVIEW_LIMIT:
        return f"{serialized[: PREVIEW_LIMIT - 3]}..."
    return serialized


def extract_visualization(result: Any) -> dict[str, Any] | None:
    if not isinstance(result, dict):
        return None
    visualization = result.get("visualization")
    if isinstance(visualization, dict) and isinstance(visualization.get("type"), str):
        return visualization
    return None


class TracedExecutor:
    """Runs registry functions while recording each call in the turn trace."""

    def __init__(self, registry: FunctionRegistry, trace: TurnTrace) -> None:
        self.registry = registry
        self.trace = trace
        self.pending_visualizations: list[dict[str, Any]] = []
        self._lock = threading.Lock()

    def execute(
        self, name: str, args: dict[str, Any] | None, context: FunctionContext | None
    ) -> Any:
        arguments = dict(args or {})
        with self._lock:
            entry = self.trace.start_call(name, arguments)
        try:
            result = self.registry.dispatch(name, arguments, context)
        except Exception as exc:
            message = str(exc) or "Unknown error"
            with self._lock:
                entry.fail(message, debug={"error_type": type(exc).__name__})
            logger.info("Function %s failed: %s", name, message)
            raise
        visualization = extract_visualization(result)
        with self._lock:
            entry.complete(preview_result(result), visualization)
            if visualization is not None:
                self.pending_visualizations.append(visualization)
        logger.info("Function %s completed.", name)
        return result

    def take_visualizations(self) -> list[dict[str, Any]]:
        with self._lock:
            taken = self.pending_visualizations
            self.pending_visualizations = []
        return taken
