"""Logging helpers that keep secrets and contact details out of log lines."""

from __future__ import annotations

import logging
import os
import re
from typing import Iterable

_SECRET_PATTERNS = (
    re.compile(r"Bearer\s+[A-Za-z0-9\-_.]+"),
    re.compile(r"sk-[A-Za-z0-9\-_]+"),
)
_EMAIL_RE = re.compile(r"[\w.+-]+@[\w-]+\.[\w.-]+")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def redact(text: str, extra_secrets: Iterable[str] | None = None) -> str:
    """Mask API keys, bearer tokens, email addresses and ``extra_secrets``."""
    redacted = text
    for pattern in _SECRET_PATTERNS:
        redacted = pattern.sub("[REDACTED]", redacted)
    redacted = _EMAIL_RE.sub("[EMAIL]", redacted)
    for secret in extra_secrets or ():
        if secret:
            redacted = redacted.replace(secret, "[REDACTED]")
    return redacted


def clip(text: str, limit: int = 120) -> str:
    if len(text) <= limit:
        return text
    return f"{text[: limit - 3]}..."


def loggable(text: str | None, limit: int = 120) -> str:
    """Redacted, shortened form of user or model text."""
    return clip(redact(text or ""), limit)


def get_logger(name: str) -> logging.Logger:
    """Module logger with one stream handler; level from ``LUMAI_LOG_LEVEL``."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.setLevel(os.getenv("LUMAI_LOG_LEVEL", "INFO").upper())
    return logger
