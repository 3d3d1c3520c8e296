from __future__ import annotations

import json

import pytest

import httpx

from lumai.errors import ProviderFailure
from lumai.models.base import GenerationParams
from lumai.models.openai_compat import OpenAICompatChatModel

PARAMS = GenerationParams(temperature=0.3, top_p=0.85, max_tokens=650)
TOOLS = [{"type": "function", "function": {"name": "get_goal_progress", "parameters": {}}}]


def _client(handler, **kwargs) -> OpenAICompatChatModel:
    options = {"base_url": "https://example.com/v1/", "api_key": "test-key", "model": "gpt-test"}
    options.update(kwargs)
    return OpenAICompatChatModel(transport=httpx.MockTransport(handler), **options)


def test_openai_base_url_and_payload():
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(
            200,
            json={"choices": [{"message": {"content": "ok", "tool_calls": []}}], "usage": {"total_tokens": 5}},
        )

    response = _client(handler).chat([{"role": "user", "content": "hi"}], TOOLS, PARAMS)
    assert response.content == "ok"
    assert response.tool_calls == []
    assert response.usage == {"total_tokens": 5}
    assert requests[0].url == httpx.URL("https://example.com/v1/chat/completions")
    assert requests[0].headers["Authorization"] == "Bearer test-key"
    data = json.loads(requests[0].content.decode())
    assert data["model"] == "gpt-test"
    assert (data["temperature"], data["top_p"], data["max_tokens"]) == (0.3, 0.85, 650)
    assert data["tools"] == TOOLS


@pytest.mark.parametrize(
    ("base_url", "expected"),
    [
        ("https://example.com", "https://example.com/v1/chat/completions"),
        ("example.com:8080/proxy", "http://example.com:8080/proxy/v1/chat/completions"),
        ("https://example.com/v1/chat/completions", "https://example.com/v1/chat/completions"),
    ],
)
def test_url_normalization(base_url, expected):
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return httpx.Response(200, json={"choices": [{"message": {"content": "ok"}}]})

    _client(handler, base_url=base_url).chat([], None, PARAMS)
    assert seen == [expected]


def test_extra_headers_and_no_tools_key():
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"choices": [{"message": {"content": "ok"}}]})

    _client(handler, extra_headers={"X-Test": "yes"}).chat([], None, PARAMS)
    assert requests[0].headers["X-Test"] == "yes"
    assert "tools" not in json.loads(requests[0].content.decode())


def test_structured_tool_calls_parsed():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={
                "choices": [
                    {
                        "message": {
                            "content": None,
                            "tool_calls": [
                                {
                                    "id": "call_1",
                                    "type": "function",
                                    "function": {
                                        "name": "get_health_metrics",
                                        "arguments": '{"metric_type": "bmi"}',
                                    },
                                },
                                {"id": "call_2", "function": {"name": "get_goal_progress", "arguments": "{oops"}},
                            ],
                        }
                    }
                ]
            },
        )

    response = _client(handler).chat([], TOOLS, PARAMS)
    assert response.content == ""
    assert [(call.id, call.name, call.arguments) for call in response.tool_calls] == [
        ("call_1", "get_health_metrics", {"metric_type": "bmi"}),
        ("call_2", "get_goal_progress", {}),
    ]


def test_legacy_function_call_parsed():
    def handler(request: httpx.Request) -> httpx.Response:
        message = {"content": "", "function_call": {"name": "get_meal_plan", "arguments": "{}"}}
        return httpx.Response(200, json={"choices": [{"message": message}]})

    [call] = _client(handler).chat([], TOOLS, PARAMS).tool_calls
    assert call.name == "get_meal_plan"


def test_leaked_channel_call_parsed():
    content = (
        "<|channel|>commentary to=functions.get_bmi <|constrain|>json<|message|>{}<|call|>"
    )

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"choices": [{"message": {"content": content}}]})

    response = _client(handler).chat([], TOOLS, PARAMS)
    assert response.content == ""
    [call] = response.tool_calls
    assert call.name == "get_health_metrics"
    assert call.arguments == {"metric_type": "bmi", "time_period": "current"}


def test_missing_api_key_fails():
    client = _client(lambda request: httpx.Response(200), api_key=None)
    with pytest.raises(ProviderFailure, match="not configured"):
        client.chat([], None, PARAMS)


def test_http_error_status_fails():
    client = _client(lambda request: httpx.Response(503, text="overloaded"))
    with pytest.raises(ProviderFailure, match="503"):
        client.chat([], None, PARAMS)


def test_transport_error_fails():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(ProviderFailure):
        _client(handler).chat([], None, PARAMS)


def test_malformed_json_fails():
    client = _client(lambda request: httpx.Response(200, text="not json"))
    with pytest.raises(ProviderFailure, match="Malformed"):
        client.chat([], None, PARAMS)


def test_oversized_response_fails():
    client = _client(
        lambda request: httpx.Response(200, json={"choices": [{"message": {"content": "x" * 100}}]}),
        max_response_bytes=50,
    )
    with pytest.raises(ProviderFailure, match="too large"):
        client.chat([], None, PARAMS)


@pytest.mark.parametrize(
    "body",
    [
        ["not", "an", "object"],
        {"choices": ["text"]},
        {"choices": {"message": {}}},
        {"choices": [{"message": "hello"}]},
        {"choices": [{"message": {"content": "", "tool_calls": ["get_goal_progress"]}}]},
    ],
)
def test_unexpected_json_shapes_fail(body):
    client = _client(lambda request: httpx.Response(200, json=body))
    with pytest.raises(ProviderFailure, match="Malformed"):
        client.chat([], TOOLS, PARAMS)


def test_tool_calls_with_bad_fields_are_skipped_or_cleaned():
    message = {
        "content": "",
        "tool_calls": [
            {"id": 7, "function": {"name": "get_goal_progress", "arguments": "{}"}},
            {"id": "x", "function": {"name": 42}},
            {"id": "y", "function": "get_meal_plan"},
        ],
    }
    client = _client(lambda request: httpx.Response(200, json={"choices": [{"message": message}]}))
    [call] = client.chat([], TOOLS, PARAMS).tool_calls
    assert (call.id, call.name) == (None, "get_goal_progress")
