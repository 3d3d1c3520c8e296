"""Function registry."""

from __future__ import annotations

from typing import Any, Iterable

from lumai.errors import ToolExecutionError, UnsupportedFunction
from lumai.tools.base import FunctionContext, FunctionDefinition, FunctionSpec


class FunctionRegistry:
    """Fixed mapping from function name to definition and handler."""

    def __init__(self, specs: Iterable[FunctionSpec] = ()) -> None:
        self._specs: dict[str, FunctionSpec] = {}
        for spec in specs:
            self.register(spec)

    def register(self, spec: FunctionSpec) -> None:
        if spec.name in self._specs:
            raise ValueError(f"Function already registered: {spec.name}")
        if not callable(spec.handler):
            raise ValueError(f"Handler for {spec.name} is not callable")
        self._specs[spec.name] = spec

    def get(self, name: str) -> FunctionSpec | None:
        return self._specs.get(name)

    def names(self) -> list[str]:
        return list(self._specs)

    def list(self) -> list[FunctionDefinition]:
        return [spec.definition for spec in self._specs.values()]

    def openai_schemas(self) -> list[dict[str, Any]]:
        return [spec.definition.openai_schema() for spec in self._specs.values()]

    def dispatch(
        self, name: str, args: dict[str, Any] | None, context: FunctionContext | None
    ) -> Any:
        spec = self._specs.get(name)
        if spec is None or context is None:
            raise UnsupportedFunction(name)
        try:
            return spec.handler(dict(args or {}), context)
        except ToolExecutionError:
            raise
        except Exception as exc:
            raise ToolExecutionError(name, str(exc)) from exc
