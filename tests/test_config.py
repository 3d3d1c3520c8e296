from lumai.config import Settings


def test_defaults():
    settings = Settings(_env_file=None)
    assert settings.context_window == 12
    assert settings.summary_threshold == 14
    assert settings.retained_after_summary == 8
    assert (settings.temperature, settings.top_p, settings.max_tokens) == (0.3, 0.85, 650)
    assert settings.max_tool_depth == 5
    assert settings.serialize_turns is True


def test_environment_aliases(monkeypatch):
    monkeypatch.setenv("OPENAI_MODEL", "gpt-test")
    monkeypatch.setenv("LUMAI_CONTEXT_WINDOW", "6")
    monkeypatch.setenv("LUMAI_SERIALIZE_TURNS", "false")
    monkeypatch.setenv("LUMAI_REPLY_PREFIX", "Coach:")
    settings = Settings()
    assert settings.openai_model == "gpt-test"
    assert settings.context_window == 6
    assert settings.serialize_turns is False
    assert settings.reply_prefix == "Coach:"


def test_keyword_overrides():
    settings = Settings(prefetch_workers=4, conversation_db_path="/tmp/x.db")
    assert settings.prefetch_workers == 4
    assert settings.conversation_db_path == "/tmp/x.db"
