"""Recovery of tool calls that a model wrote into its text content.

Some open-weight models emit function calls as channel-tagged text
instead of structured ``tool_calls``. Those spans are parsed into
``ToolCall`` objects, mapped onto registry names, and cut from the text.
"""

from __future__ import annotations

import json
import re
from datetime import date
from typing import Any, Callable
from uuid import uuid4

from lumai.models.base import ToolCall
from lumai.util.braces import find_marked_block

_CHANNEL_CALL_RE = re.compile(
    r"<\|channel\|>commentary to=functions\.([^\s<]+)\s+<\|constrain\|>json<\|message\|>"
    r"(\{[\s\S]*?\})(?:<\|call\|>(?:assistant)?)?",
    re.IGNORECASE,
)
_LEGACY_CALL_RE = re.compile(r"assistantcommentary to=functions\.([^\s{]+)", re.IGNORECASE)

ArgumentTransform = Callable[[dict[str, Any]], dict[str, Any]]


def _fixed(arguments: dict[str, Any]) -> ArgumentTransform:
    return lambda _args: dict(arguments)


def _today_meal_plan(args: dict[str, Any]) -> dict[str, Any]:
    day = args.get("day")
    if isinstance(day, str) and day.strip():
        return dict(args)
    return {**args, "day": date.today().isoformat()}


ALIASES: dict[str, tuple[str, ArgumentTransform | None]] = {
    "get_health_metrics": ("get_health_metrics", None),
    "get_weight": ("get_health_metrics", _fixed({"metric_type": "weight", "time_period": "current"})),
    "get_height": ("get_health_metrics", _fixed({"metric_type": "height", "time_period": "current"})),
    "get_bmi": ("get_health_metrics", _fixed({"metric_type": "bmi", "time_period": "current"})),
    "get_wellness_score": (
        "get_health_metrics",
        _fixed({"metric_type": "wellness_score", "time_period": "30d"}),
    ),
    "get_goal_progress": ("get_goal_progress", None),
    "get_meal_plan": ("get_meal_plan", None),
    "get_meal_plan_today": ("get_meal_plan", _today_meal_plan),
    "get_nutrition_snapshot": ("get_nutrition_snapshot", None),
    "get_nutrition_summary": ("get_nutrition_snapshot", None),
    "get_weekly_nutrition": ("get_nutrition_snapshot", _fixed({"time_period": "7d"})),
    "get_recipe_details": ("get_recipe_details", None),
    "get_recipe": ("get_recipe_details", None),
    "get_visualization": ("get_visualization", None),
    "get_chart": ("get_visualization", None),
}


def visualization_type_from_slug(slug: str, args: dict[str, Any]) -> str:
    normalized = slug.lower()
    if "sleep" in normalized:
        return "sleep_vs_target"
    if "protein" in normalized:
        return "protein_vs_target"
    if "macro" in normalized or "breakdown" in normalized:
        return "macro_breakdown"
    if "weight" in normalized:
        return "weight_trend"
    provided = args.get("visualization_type")
    if isinstance(provided, str) and provided.strip():
        return provided.strip()
    return "weight_trend"


def _parse_arguments(raw: str) -> dict[str, Any]:
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        return {}
    return parsed if isinstance(parsed, dict) else {}


def map_function(raw_name: str, arguments: dict[str, Any]) -> tuple[str, dict[str, Any]]:
    """Map a leaked function name and its arguments onto a registry call."""
    normalized = re.sub(r"^functions\.", "", raw_name.strip(), flags=re.IGNORECASE)
    alias = ALIASES.get(normalized.lower())
    if alias is not None:
        name, transform = alias
        return name, transform(arguments) if transform else arguments
    if normalized.startswith("visualize_"):
        slug = normalized[len("visualize_") :]
        return "get_visualization", {
            **arguments,
            "visualization_type": visualization_type_from_slug(slug, arguments),
        }
    return normalized, arguments


def _new_call_id() -> str:
    return f"leaked-{uuid4().hex[:12]}"


def extract_leaked_calls(content: str) -> tuple[list[ToolCall], str]:
    """Return recovered tool calls and the content with their spans removed."""
    matches = list(_CHANNEL_CALL_RE.finditer(content))
    if matches:
        calls: list[ToolCall] = []
        remaining = content
        for match in matches:
            remaining = remaining.replace(match.group(0), "", 1)
            name, arguments = map_function(match.group(1), _parse_arguments(match.group(2)))
            calls.append(ToolCall(id=_new_call_id(), name=name, arguments=arguments))
        return calls, remaining.strip()
    return _extract_legacy_calls(content)


def _extract_legacy_calls(content: str, max_calls: int = 16) -> tuple[list[ToolCall], str]:
    working = content
    calls: list[ToolCall] = []
    for _ in range(max_calls):
        found = find_marked_block(working, _LEGACY_CALL_RE)
        if found is None:
            break
        match, json_start, json_end = found
        parsed = _parse_arguments(working[json_start : json_end + 1])
        nested = parsed.get("arguments")
        arguments = nested if isinstance(nested, dict) else parsed
        name, arguments = map_function(match.group(1), arguments)
        calls.append(ToolCall(id=_new_call_id(), name=name, arguments=arguments))
        working = f"{working[: match.start()]} {working[json_end + 1 :]}".strip()
    return calls, working
