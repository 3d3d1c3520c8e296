"""Function definitions and call context."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Literal

from pydantic import BaseModel, Field

from lumai.services.base import Services


class PropertyDefinition(BaseModel):
    """Single property inside a JSON Schema ``properties`` block."""

    type: str
    description: str = ""
    enum: list[str] | None = None
    items: dict[str, Any] | None = None


class ParametersDefinition(BaseModel):
    type: Literal["object"] = "object"
    properties: dict[str, PropertyDefinition] = Field(default_factory=dict)
    required: list[str] = Field(default_factory=list)


class FunctionDefinition(BaseModel):
    """Name, description and parameter contract of a callable function."""

    name: str
    description: str = ""
    parameters: ParametersDefinition = Field(default_factory=ParametersDefinition)

    def openai_schema(self) -> dict[str, Any]:
        """Return OpenAI-compatible tool schema."""
        return {
            "type": "function",
            "function": self.model_dump(exclude_none=True),
        }


@dataclass(frozen=True)
class FunctionContext:
    """Caller identity plus the collaborators handlers may consult."""

    user_id: str
    services: Services
    user_name: str | None = None


FunctionHandler = Callable[[dict[str, Any], FunctionContext], Any]


@dataclass(frozen=True)
class FunctionSpec:
    definition: FunctionDefinition
    handler: FunctionHandler

    @property
    def name(self) -> str:
        return self.definition.name


def string_arg(params: dict[str, Any], key: str) -> str | None:
    value = params.get(key)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None
