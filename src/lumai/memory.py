"""Conversation memory: context window, rolling summary, persistence."""

from __future__ import annotations

from lumai.completion import CompletionRequest, run_model_completion
from lumai.config import DEFAULT_SETTINGS, Settings
from lumai.conversation import ConversationMessage, ConversationState
from lumai.errors import ProviderFailure
from lumai.models.base import BaseChatModel
from lumai.prompts import summary_request_messages
from lumai.store import ConversationStore
from lumai.util.logging import get_logger, redact

logger = get_logger(__name__)

MIN_RETAINED_MESSAGES = 2


class ConversationMemory:
    """Loads and saves conversation state and rotates long histories into a summary."""

    def __init__(
        self,
        store: ConversationStore,
        model: BaseChatModel,
        settings: Settings | None = None,
    ) -> None:
        self.store = store
        self.model = model
        self.settings = settings or DEFAULT_SETTINGS

    @property
    def retained_after_summary(self) -> int:
        return max(MIN_RETAINED_MESSAGES, self.settings.retained_after_summary)

    def load(self, user_id: str) -> ConversationState:
        return self.store.load(user_id)

    def save(self, state: ConversationState) -> ConversationState:
        return self.store.save(state)

    def context_messages(self, state: ConversationState) -> list[dict[str, str]]:
        window = max(0, self.settings.context_window)
        recent = state.messages[-window:] if window else []
        return [message.to_chat() for message in recent]

    def rotate(
        self, messages: list[ConversationMessage], summary: str | None
    ) -> tuple[list[ConversationMessage], str | None]:
        """Summarize and trim once the history reaches the rotation threshold.

        The previous summary is kept when the model returns nothing or the
        call fails; the history is trimmed either way.
        """
        if len(messages) < self.settings.summary_threshold:
            return messages, summary
        updated = self.summarize(messages, summary)
        return messages[-self.retained_after_summary :], updated

    def summarize(
        self, messages: list[ConversationMessage], previous_summary: str | None
    ) -> str | None:
        source = messages[-self.settings.summary_source_messages :]
        request = CompletionRequest(
            messages=summary_request_messages(
                previous_summary, [message.to_chat() for message in source]
            ),
            temperature=self.settings.summary_temperature,
            top_p=self.settings.summary_top_p,
            max_tokens=self.settings.summary_max_tokens,
            retry_count=0,
        )
        try:
            result = run_model_completion(self.model, request)
        except ProviderFailure as exc:
            logger.warning("Summarization failed, keeping previous summary: %s", redact(str(exc)))
            return previous_summary
        content = result.content.strip()
        if not content:
            logger.warning("Summarization returned no content, keeping previous summary.")
            return previous_summary
        return content
