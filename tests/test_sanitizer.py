from __future__ import annotations

import re

import pytest

from lumai.sanitizer import (
    DEFAULT_PREFIX,
    FALLBACK_REPLY,
    clean_model_output,
    ensure_prefix,
    sanitize_reply,
    strip_tool_call_artifacts,
)

SAMPLES = [
    "Your weight is **72.4 kg**.",
    "",
    "   \n\t  ",
    "<|start|>assistant<|channel|>final<|message|>Hello Sam",
    "Lumai ✦︎ Lumai ✦︎ duplicated prefix",
    "lumai ✦︎\nlowercase prefix",
    'assistantcommentary to=functions.get_weight json {"metric_type": {"x": 1}} Your weight is 72 kg.',
    'Before commentary to=functions.get_chart commentary json {"a": 1} after',
    'Chart: {"chart_url": "https://example.com/c.png"} done',
    "Look ![chart](https://example.com/c.png) here",
    "commentaryassistant text with { an unmatched brace",
    '<|channel|>commentary to=functions.get_bmi <|constrain|>json<|message|>{"x": {"y": 2}}',
]


@pytest.mark.parametrize("text", SAMPLES)
def test_sanitize_is_idempotent(text):
    once = sanitize_reply(text)
    assert sanitize_reply(once) == once


@pytest.mark.parametrize("text", SAMPLES)
def test_prefix_appears_exactly_once(text):
    reply = sanitize_reply(text)
    assert reply.startswith(f"{DEFAULT_PREFIX}\n")
    assert reply.lower().count(DEFAULT_PREFIX.lower()) == 1


def test_marked_span_removed_with_custom_marker():
    marker = re.compile("CALL", re.IGNORECASE)
    assert strip_tool_call_artifacts('prefixCALL {"a":{"b":1}} suffix', marker) == "prefix  suffix"


def test_unmatched_brace_leaves_text_untouched():
    marker = re.compile("CALL", re.IGNORECASE)
    text = 'prefixCALL {"a":{"b":1} suffix'
    assert strip_tool_call_artifacts(text, marker) == text


def test_clean_strips_leaked_tool_call_and_channel_markers():
    text = (
        "<|start|>assistantcommentary to=functions.get_weight json "
        '{"metric_type": "weight"}<|end|> Your weight is 72.4 kg.'
    )
    assert clean_model_output(text) == "Your weight is 72.4 kg."


def test_clean_removes_chart_payloads_and_images():
    text = 'Here {"chart_url": "https://x/c.png", "w": 1} is ![alt](https://x/c.png) your chart.'
    assert clean_model_output(text) == "Here is your chart."


def test_empty_output_uses_fallback():
    assert clean_model_output(None) == FALLBACK_REPLY
    assert clean_model_output("<|end|>") == FALLBACK_REPLY
    assert sanitize_reply("") == f"{DEFAULT_PREFIX}\n{FALLBACK_REPLY}"


def test_ensure_prefix_keeps_existing_prefix_once():
    assert ensure_prefix("Lumai ✦︎\nHi there") == f"{DEFAULT_PREFIX}\nHi there"
    assert ensure_prefix("LUMAI ✦︎ LUMAI ✦︎ Hi") == f"{DEFAULT_PREFIX}\nHi"
    assert ensure_prefix("Hi", prefix="Coach:") == "Coach:\nHi"


@pytest.mark.parametrize(
    "text",
    [
        "<" * 9 + "<|x>" + "|y>" * 9 + " hello",
        "!" * 9 + "![a](b)" + "[a](b)" * 9 + " hello",
        "<" * 30 + "<|x>" + "|y>" * 30 + " " + "!" * 12 + "![a](b)" + "[a](b)" * 12 + " hello",
    ],
)
def test_deeply_nested_artifacts_are_fully_removed(text):
    once = sanitize_reply(text)
    assert once == f"{DEFAULT_PREFIX}\nhello"
    assert sanitize_reply(once) == once
