"""Per-turn audit log of function calls."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

CallStatus = Literal["pending", "ok", "error"]


class FunctionCallTrace(BaseModel):
    """One function invocation.

    Created as ``pending`` and moved exactly once to ``ok`` or ``error``.
    """

    name: str
    arguments: dict[str, Any] = Field(default_factory=dict)
    status: CallStatus = "pending"
    result_preview: str | None = None
    visualization: dict[str, Any] | None = None
    debug: dict[str, Any] | None = None

    def complete(
        self, preview: str, visualization: dict[str, Any] | None = None
    ) -> None:
        self._ensure_pending()
        self.status = "ok"
        self.result_preview = preview
        self.visualization = visualization

    def fail(self, message: str, debug: dict[str, Any] | None = None) -> None:
        self._ensure_pending()
        self.status = "error"
        self.result_preview = message
        self.debug = debug

    def _ensure_pending(self) -> None:
        if self.status != "pending":
            raise RuntimeError(f"Trace entry for {self.name} already finalized as {self.status}")


class TurnTrace(BaseModel):
    """Ordered, append-only record of one turn."""

    request: str
    user_display_name: str | None = None
    response_plan: str | None = None
    function_calls: list[FunctionCallTrace] = Field(default_factory=list)

    def start_call(self, name: str, arguments: dict[str, Any]) -> FunctionCallTrace:
        entry = FunctionCallTrace(name=name, arguments=dict(arguments))
        self.function_calls.append(entry)
        return entry

    def pending_calls(self) -> list[FunctionCallTrace]:
        return [entry for entry in self.function_calls if entry.status == "pending"]

    def calls_named(self, name: str) -> list[FunctionCallTrace]:
        return [entry for entry in self.function_calls if entry.name == name]
