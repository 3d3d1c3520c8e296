"""Cleanup of raw model output before it is shown or stored."""

from __future__ import annotations

import re

from lumai.util.braces import strip_marked_blocks

FALLBACK_REPLY = "I could not generate a response."
DEFAULT_PREFIX = "Lumai ✦︎"

_CHANNEL_MARKER_RE = re.compile(r"<\|[^>]+>")
_ROLE_MISLABEL_RE = re.compile(r"commentaryassistant", re.IGNORECASE)
_TOOL_PREAMBLE_RE = re.compile(
    r"(?:assistant)?commentary\s+to=functions\.[\w.-]+(?:\s*commentary)?\s*json",
    re.IGNORECASE,
)
_CHART_URL_RE = re.compile(r"\{[^}]*\"chart_url\"[^}]*\}", re.IGNORECASE)
_MARKDOWN_IMAGE_RE = re.compile(r"!\[[^\]]*\]\([^)]*\)")
_WHITESPACE_RE = re.compile(r"\s+")


def strip_tool_call_artifacts(text: str, marker: re.Pattern[str] = _TOOL_PREAMBLE_RE) -> str:
    return strip_marked_blocks(text, marker)


def _clean_once(text: str) -> str:
    cleaned = _CHANNEL_MARKER_RE.sub("", text)
    cleaned = _ROLE_MISLABEL_RE.sub("assistant", cleaned)
    cleaned = strip_tool_call_artifacts(cleaned)
    cleaned = _CHART_URL_RE.sub("", cleaned)
    cleaned = _MARKDOWN_IMAGE_RE.sub("", cleaned)
    return _WHITESPACE_RE.sub(" ", cleaned).strip()


def clean_model_output(text: str | None) -> str:
    """Strip channel markers, leaked tool calls, chart payloads and images.

    Never raises; returns ``FALLBACK_REPLY`` when nothing is left.
    """
    if not text:
        return FALLBACK_REPLY
    cleaned = text
    # Removing one artifact can expose another. After the first pass whitespace
    # is normalized and any change shortens the text, so len(text) + 2 passes
    # always reach a stable result.
    for _ in range(len(text) + 2):
        updated = _clean_once(cleaned)
        if updated == cleaned:
            break
        cleaned = updated
    return cleaned or FALLBACK_REPLY


def ensure_prefix(text: str, prefix: str = DEFAULT_PREFIX) -> str:
    """Return ``prefix`` + newline + body with the prefix present exactly once."""
    marker = prefix.strip()
    body = text.strip()
    lowered = marker.lower()
    while marker and body.lower().startswith(lowered):
        body = body[len(marker) :].strip()
    if not body:
        body = FALLBACK_REPLY
    return f"{marker}\n{body}"


def sanitize_reply(text: str | None, prefix: str = DEFAULT_PREFIX) -> str:
    return ensure_prefix(clean_model_output(text), prefix)
