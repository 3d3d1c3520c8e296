import logging

from lumai.util.logging import clip, get_logger, loggable, redact


def test_redact_secrets_and_emails():
    text = "Authorization: Bearer abc.def key sk-live-123 mail sam@example.com"
    assert redact(text) == "Authorization: [REDACTED] key [REDACTED] mail [EMAIL]"
    assert redact("token hunter2", extra_secrets=["hunter2", ""]) == "token [REDACTED]"


def test_clip_and_loggable():
    assert clip("short") == "short"
    assert clip("x" * 200, limit=10) == "xxxxxxx..."
    assert loggable(None) == ""
    assert loggable("reach me at a@b.io") == "reach me at [EMAIL]"


def test_get_logger_configures_once(monkeypatch):
    monkeypatch.setenv("LUMAI_LOG_LEVEL", "debug")
    logger = get_logger("lumai.tests.logging_probe")
    assert logger.level == logging.DEBUG
    assert len(get_logger("lumai.tests.logging_probe").handlers) == 1
