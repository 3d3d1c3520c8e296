"""Error taxonomy for assistant turns."""

from __future__ import annotations


class AssistantError(Exception):
    """Base class for errors raised by the assistant core."""


class ValidationError(AssistantError):
    """Raised when a turn is rejected before any state is touched."""


class UnsupportedFunction(AssistantError):
    """Raised when a function name is unknown or no call context was given."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unsupported function: {name}")
        self.name = name


class ToolExecutionError(AssistantError):
    """Raised when a function handler fails."""

    def __init__(self, name: str, message: str) -> None:
        super().__init__(message)
        self.name = name


class ProviderFailure(AssistantError):
    """Raised when the completion provider cannot produce a reply."""


class ProviderExhausted(ProviderFailure):
    """Raised when the tool round-trip limit is reached without any content."""
