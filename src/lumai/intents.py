"""Rules-based intent detection run before the model sees a turn.

Every detector is independent: one message can ask for metrics, goals and
a chart at once. The result is a plain list of intents, with no side
effects, so the orchestrator decides what to execute.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Literal, Union

ResponseMode = Literal["concise", "detailed"]

_METRIC_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("weight", re.compile(r"\bweights?\b", re.IGNORECASE)),
    ("height", re.compile(r"\bheights?\b", re.IGNORECASE)),
    ("bmi", re.compile(r"\bbmi\b|\bbody\s+mass\s+index\b", re.IGNORECASE)),
    ("wellness_score", re.compile(r"\bwellness\b", re.IGNORECASE)),
)
_PERIOD_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    (
        "90d",
        re.compile(
            r"\b(?:last|past)\s+(?:quarter|three\s+months|3\s+months|90\s+days|ninety\s+days)\b",
            re.IGNORECASE,
        ),
    ),
    (
        "30d",
        re.compile(
            r"\b(?:last|past|this)\s+month\b|\b(?:last|past)\s+(?:30|thirty)\s+days\b",
            re.IGNORECASE,
        ),
    ),
    (
        "7d",
        re.compile(
            r"\b(?:last|past|this)\s+week\b|\b(?:last|past)\s+(?:7|seven)\s+days\b",
            re.IGNORECASE,
        ),
    ),
)
_GOAL_RE = re.compile(r"\bgoals?\b|\bmilestones?\b|\bon\s+track\b|\btargets?\b", re.IGNORECASE)
_CHART_RE = re.compile(r"\bcharts?\b|\bgraphs?\b|\bplots?\b|\bvisual", re.IGNORECASE)
_CHART_SUBTYPES: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("protein_vs_target", re.compile(r"\bprotein\b", re.IGNORECASE)),
    ("macro_breakdown", re.compile(r"\bmacros?\b", re.IGNORECASE)),
    ("sleep_vs_target", re.compile(r"\bsleep", re.IGNORECASE)),
    ("weight_trend", re.compile(r"\bweights?\b", re.IGNORECASE)),
)
_CONCISE_RE = re.compile(
    r"\bconcise\b|\bbrief\b|\bshort\s+version\b|\btl;?dr\b|\bsummary\b", re.IGNORECASE
)
_DETAILED_RE = re.compile(
    r"\bdetailed\b|\bin[-\s]depth\b|\belaborate\b|\bexplain\s+more\b|\blong[-\s]form\b",
    re.IGNORECASE,
)

_METRIC_TOPICS = {
    "weight": "weight",
    "height": "height",
    "bmi": "bmi",
    "wellness_score": "wellness",
}


@dataclass(frozen=True)
class ToolCallRequest:
    name: str
    arguments: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class MetricIntent:
    metrics: tuple[str, ...]
    time_period: str

    def to_call(self) -> ToolCallRequest:
        arguments: dict[str, Any] = {"metric_type": self.metrics[0]}
        if len(self.metrics) > 1:
            arguments["metrics"] = list(self.metrics)
        arguments["time_period"] = self.time_period
        return ToolCallRequest(name="get_health_metrics", arguments=arguments)

    def topics(self) -> list[str]:
        return [_METRIC_TOPICS[metric] for metric in self.metrics]


@dataclass(frozen=True)
class GoalIntent:
    def to_call(self) -> ToolCallRequest:
        return ToolCallRequest(name="get_goal_progress")

    def topics(self) -> list[str]:
        return ["goals"]


@dataclass(frozen=True)
class VisualizationIntent:
    visualization_type: str
    time_period: str | None = None

    def to_call(self) -> ToolCallRequest:
        arguments: dict[str, Any] = {"visualization_type": self.visualization_type}
        if self.time_period is not None:
            arguments["time_period"] = self.time_period
        return ToolCallRequest(name="get_visualization", arguments=arguments)

    def topics(self) -> list[str]:
        return ["visualization"]


@dataclass(frozen=True)
class ResponseModeIntent:
    mode: ResponseMode

    def topics(self) -> list[str]:
        return []


ToolIntent = Union[MetricIntent, GoalIntent, VisualizationIntent]
Intent = Union[MetricIntent, GoalIntent, VisualizationIntent, ResponseModeIntent]


def resolve_time_period(text: str) -> str | None:
    """Map phrases like "last week" to a period id; ``None`` when absent."""
    for period, pattern in _PERIOD_PATTERNS:
        if pattern.search(text):
            return period
    return None


def detect_metrics(text: str) -> list[str]:
    return [metric for metric, pattern in _METRIC_PATTERNS if pattern.search(text)]


def detect_response_mode(text: str) -> ResponseMode | None:
    if _CONCISE_RE.search(text):
        return "concise"
    if _DETAILED_RE.search(text):
        return "detailed"
    return None


def visualization_type_for(text: str) -> str:
    for visualization_type, pattern in _CHART_SUBTYPES:
        if pattern.search(text):
            return visualization_type
    return "weight_trend"


def detect_intents(text: str) -> list[Intent]:
    normalized = text.strip()
    if not normalized:
        return []
    intents: list[Intent] = []
    period = resolve_time_period(normalized)

    metrics = detect_metrics(normalized)
    if metrics:
        default = "30d" if metrics[0] == "wellness_score" else "current"
        intents.append(MetricIntent(metrics=tuple(metrics), time_period=period or default))

    if _GOAL_RE.search(normalized):
        intents.append(GoalIntent())

    if _CHART_RE.search(normalized):
        chart_period = period if period and period != "current" else None
        intents.append(
            VisualizationIntent(
                visualization_type=visualization_type_for(normalized),
                time_period=chart_period,
            )
        )

    mode = detect_response_mode(normalized)
    if mode is not None:
        intents.append(ResponseModeIntent(mode=mode))
    return intents


def tool_intents(intents: list[Intent]) -> list[ToolIntent]:
    return [intent for intent in intents if not isinstance(intent, ResponseModeIntent)]


def response_mode(intents: list[Intent]) -> ResponseMode | None:
    for intent in intents:
        if isinstance(intent, ResponseModeIntent):
            return intent.mode
    return None


def intent_topics(intents: list[Intent]) -> list[str]:
    topics: list[str] = []
    for intent in intents:
        for topic in intent.topics():
            if topic not in topics:
                topics.append(topic)
    return topics
