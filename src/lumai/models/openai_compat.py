"""OpenAI-compatible chat model client."""

from __future__ import annotations

import json
from typing import Any
from urllib.parse import urlparse, urlunparse

import httpx

from lumai.errors import ProviderFailure
from lumai.models.base import BaseChatModel, GenerationParams, ModelResponse, ToolCall
from lumai.models.leaked_calls import extract_leaked_calls


class OpenAICompatChatModel(BaseChatModel):
    """HTTP client for OpenAI-compatible chat/completions."""

    def __init__(
        self,
        base_url: str,
        api_key: str | None,
        model: str,
        timeout_seconds: int = 35,
        max_response_bytes: int = 2_000_000,
        extra_headers: dict[str, str] | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        normalized = base_url.strip()
        if not normalized.startswith(("http://", "https://")):
            normalized = f"http://{normalized}"
        self.base_url = normalized.rstrip("/")
        self.api_key = api_key
        self.model = model
        self.timeout_seconds = timeout_seconds
        self.max_response_bytes = max_response_bytes
        self.extra_headers = extra_headers or {}
        self.transport = transport

    def _request_payload(
        self,
        messages: list[dict[str, Any]],
        tools: list[dict[str, Any]] | None,
        params: GenerationParams,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": params.temperature,
            "top_p": params.top_p,
            "max_tokens": params.max_tokens,
        }
        if tools:
            payload["tools"] = tools
        return payload

    def _build_url(self) -> str:
        parsed = urlparse(self.base_url)
        path = parsed.path or ""
        if path in {"", "/"}:
            base_path = "/v1"
        else:
            base_path = path.rstrip("/")
            segments = [segment for segment in base_path.split("/") if segment]
            if "v1" not in segments:
                base_path = f"{base_path}/v1"
        if base_path.endswith("/chat/completions"):
            final_path = base_path
        else:
            final_path = f"{base_path}/chat/completions"
        return urlunparse(parsed._replace(path=final_path, params="", query="", fragment=""))

    def chat(
        self,
        messages: list[dict[str, Any]],
        tools: list[dict[str, Any]] | None,
        params: GenerationParams,
    ) -> ModelResponse:
        if not self.api_key:
            raise ProviderFailure("AI provider not configured")
        url = self._build_url()
        headers = {"Authorization": f"Bearer {self.api_key}", **self.extra_headers}
        payload = self._request_payload(messages, tools, params)
        timeout = httpx.Timeout(self.timeout_seconds)
        try:
            with httpx.Client(timeout=timeout, transport=self.transport) as client:
                response = client.post(url, headers=headers, json=payload)
        except httpx.HTTPError as exc:
            raise ProviderFailure(f"Chat completion request failed: {exc}") from exc
        if response.status_code >= 400:
            raise ProviderFailure(
                f"Chat completion error {response.status_code}: {response.text[:200]}"
            )
        if len(response.content) > self.max_response_bytes:
            raise ProviderFailure("Response too large")
        try:
            data = response.json()
        except json.JSONDecodeError as exc:
            raise ProviderFailure("Malformed JSON response") from exc
        if not isinstance(data, dict):
            raise ProviderFailure("Malformed JSON response")
        choices = data.get("choices") or [{}]
        if not isinstance(choices, list) or not isinstance(choices[0], dict):
            raise ProviderFailure("Malformed JSON response")
        message = choices[0].get("message") or {}
        if not isinstance(message, dict):
            raise ProviderFailure("Malformed JSON response")
        usage = data.get("usage")
        return _parse_message(message, usage if isinstance(usage, dict) else None)


def _parse_message(message: dict[str, Any], usage: dict[str, Any] | None) -> ModelResponse:
    raw_content = message.get("content")
    content = raw_content if isinstance(raw_content, str) else ""
    leaked, remaining = extract_leaked_calls(content)
    if leaked:
        return ModelResponse(content=remaining, tool_calls=leaked, usage=usage)
    return ModelResponse(content=content, tool_calls=_structured_calls(message), usage=usage)


def _structured_calls(message: dict[str, Any]) -> list[ToolCall]:
    raw_calls = message.get("tool_calls")
    if isinstance(raw_calls, list):
        calls = []
        for raw in raw_calls:
            if not isinstance(raw, dict):
                raise ProviderFailure("Malformed JSON response")
            function = raw.get("function") or {}
            name = function.get("name") if isinstance(function, dict) else None
            if not isinstance(name, str) or not name:
                continue
            call_id = raw.get("id")
            calls.append(
                ToolCall(
                    id=call_id if isinstance(call_id, str) else None,
                    name=name,
                    arguments=_parse_arguments(function.get("arguments")),
                )
            )
        return calls
    function_call = message.get("function_call")
    if isinstance(function_call, dict) and function_call.get("name"):
        return [
            ToolCall(
                id=message.get("id"),
                name=function_call["name"],
                arguments=_parse_arguments(function_call.get("arguments")),
            )
        ]
    return []


def _parse_arguments(raw: Any) -> dict[str, Any]:
    if isinstance(raw, dict):
        return raw
    if not raw:
        return {}
    try:
        parsed = json.loads(raw)
    except (TypeError, json.JSONDecodeError):
        return {}
    return parsed if isinstance(parsed, dict) else {}
