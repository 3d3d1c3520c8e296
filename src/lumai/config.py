"""Configuration settings for the Lumai assistant core."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or overrides."""

    model_config = SettingsConfigDict(
        env_prefix="", case_sensitive=False, populate_by_name=True
    )

    openai_api_key: str | None = Field(default=None, validation_alias="OPENAI_API_KEY")
    openai_base_url: str = Field(
        default="https://api.openai.com/v1", validation_alias="OPENAI_BASE_URL"
    )
    openai_model: str = Field(default="gpt-4.1-mini", validation_alias="OPENAI_MODEL")
    openai_timeout_seconds: int = Field(
        default=35, validation_alias="OPENAI_TIMEOUT_SECONDS"
    )
    openai_extra_headers: str | None = Field(
        default=None, validation_alias="OPENAI_EXTRA_HEADERS"
    )

    reply_prefix: str = Field(default="Lumai ✦︎", validation_alias="LUMAI_REPLY_PREFIX")
    context_window: int = Field(default=12, validation_alias="LUMAI_CONTEXT_WINDOW")
    summary_threshold: int = Field(default=14, validation_alias="LUMAI_SUMMARY_THRESHOLD")
    summary_source_messages: int = Field(
        default=10, validation_alias="LUMAI_SUMMARY_SOURCE_MESSAGES"
    )
    retained_after_summary: int = Field(
        default=8, validation_alias="LUMAI_RETAINED_AFTER_SUMMARY"
    )
    max_stored_messages: int = Field(default=30, validation_alias="LUMAI_MAX_STORED_MESSAGES")
    max_tracked_topics: int = Field(default=10, validation_alias="LUMAI_MAX_TRACKED_TOPICS")

    temperature: float = Field(default=0.3, validation_alias="LUMAI_TEMPERATURE")
    top_p: float = Field(default=0.85, validation_alias="LUMAI_TOP_P")
    max_tokens: int = Field(default=650, validation_alias="LUMAI_MAX_TOKENS")
    retry_count: int = Field(default=1, validation_alias="LUMAI_RETRY_COUNT")
    summary_temperature: float = Field(
        default=0.2, validation_alias="LUMAI_SUMMARY_TEMPERATURE"
    )
    summary_top_p: float = Field(default=0.7, validation_alias="LUMAI_SUMMARY_TOP_P")
    summary_max_tokens: int = Field(default=220, validation_alias="LUMAI_SUMMARY_MAX_TOKENS")
    max_tool_depth: int = Field(default=5, validation_alias="LUMAI_MAX_TOOL_DEPTH")
    retry_backoff_seconds: float = Field(
        default=0.5, validation_alias="LUMAI_RETRY_BACKOFF_SECONDS"
    )

    prefetch_workers: int = Field(default=1, validation_alias="LUMAI_PREFETCH_WORKERS")
    serialize_turns: bool = Field(default=True, validation_alias="LUMAI_SERIALIZE_TURNS")
    conversation_db_path: str | None = Field(
        default=None, validation_alias="LUMAI_CONVERSATION_DB"
    )


DEFAULT_SETTINGS = Settings()
