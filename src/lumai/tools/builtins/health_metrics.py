"""get_health_metrics: weight, height, BMI and wellness score lookups."""

from __future__ import annotations

from typing import Any

from lumai.services.records import TIME_PERIODS, ProfileSnapshot
from lumai.tools.base import (
    FunctionContext,
    FunctionDefinition,
    FunctionSpec,
    ParametersDefinition,
    PropertyDefinition,
    string_arg,
)

METRIC_TYPES = ["weight", "height", "bmi", "wellness_score", "overview"]
_UNITS = {"weight": "kg", "height": "cm", "bmi": "", "wellness_score": "score"}

DEFINITION = FunctionDefinition(
    name="get_health_metrics",
    description="Retrieves up-to-date user health metrics (weight, height, BMI, wellness score).",
    parameters=ParametersDefinition(
        properties={
            "metric_type": PropertyDefinition(
                type="string", enum=METRIC_TYPES, description="Metric to retrieve."
            ),
            "metrics": PropertyDefinition(
                type="array",
                items={"type": "string", "enum": METRIC_TYPES},
                description="Several metrics to retrieve in one call.",
            ),
            "time_period": PropertyDefinition(
                type="string", enum=list(TIME_PERIODS), description="Duration for trend data."
            ),
        },
        required=["metric_type"],
    ),
)


def default_period(metric: str) -> str:
    return "30d" if metric == "wellness_score" else "current"


def period_for(metric: str, requested: str | None) -> str:
    """Requested period, or the metric default when none applies.

    Wellness is only tracked as weekly and monthly averages, so "current"
    falls back to its default.
    """
    if requested is None or (metric == "wellness_score" and requested == "current"):
        return default_period(metric)
    return requested


def get_health_metrics(params: dict[str, Any], context: FunctionContext) -> dict[str, Any]:
    metric = string_arg(params, "metric_type") or "weight"
    if metric not in METRIC_TYPES:
        raise ValueError(f"Unknown metric_type: {metric}")
    requested_period = string_arg(params, "time_period")
    if requested_period is not None and requested_period not in TIME_PERIODS:
        raise ValueError(f"Unknown time_period: {requested_period}")
    period = requested_period or default_period(metric)

    profile = context.services.profiles.load_profile_snapshot(context.user_id)
    if profile is None:
        return {"status": "not_found", "reason": "No profile available."}

    requested = _requested_metrics(params, metric)
    if len(requested) > 1:
        results = {
            name: _single_metric(profile, name, period_for(name, requested_period))
            for name in requested
        }
        found = any(result["status"] == "ok" for result in results.values())
        return {
            "status": "ok" if found else "not_found",
            "metricType": metric,
            "timePeriod": period,
            "updatedAt": profile.updated_at.isoformat(),
            "metrics": results,
        }
    return _single_metric(profile, metric, period_for(metric, requested_period))


def _requested_metrics(params: dict[str, Any], metric: str) -> list[str]:
    raw = params.get("metrics")
    if not isinstance(raw, list):
        return [metric]
    requested: list[str] = []
    for item in raw:
        if isinstance(item, str) and item in METRIC_TYPES and item not in requested:
            requested.append(item)
    return requested or [metric]


def _single_metric(profile: ProfileSnapshot, metric: str, period: str) -> dict[str, Any]:
    updated_at = profile.updated_at.isoformat()
    if metric == "overview":
        return {
            "status": "ok",
            "metricType": "overview",
            "updatedAt": updated_at,
            "metrics": {
                "weightKg": profile.weight_kg,
                "bmi": profile.bmi,
                "heightCm": profile.height_cm,
                "goals": profile.goals,
            },
        }
    if metric == "wellness_score":
        return _wellness(profile, period)

    current = {"weight": profile.weight_kg, "height": profile.height_cm, "bmi": profile.bmi}[metric]
    history = [
        {"date": point.date.isoformat(), "value": point.value}
        for point in profile.history(metric, period)
    ]
    return {
        "status": "ok" if current is not None else "not_found",
        "metricType": metric,
        "unit": _UNITS[metric],
        "timePeriod": period,
        "updatedAt": updated_at,
        "currentValue": current,
        "history": history,
    }


def _wellness(profile: ProfileSnapshot, period: str) -> dict[str, Any]:
    summary = profile.wellness
    history: list[dict[str, Any]] = []
    current = None
    if summary is not None:
        include_monthly = period in ("30d", "90d")
        monthly = summary.monthly_average if include_monthly else None
        current = summary.weekly_average if summary.weekly_average is not None else monthly
        if summary.weekly_average is not None:
            history.append(
                {
                    "date": summary.weekly_end.isoformat() if summary.weekly_end else None,
                    "value": summary.weekly_average,
                    "label": "Weekly average",
                }
            )
        if monthly is not None:
            history.append(
                {
                    "date": summary.monthly_end.isoformat() if summary.monthly_end else None,
                    "value": monthly,
                    "label": "Monthly average",
                }
            )
    return {
        "status": "ok" if current is not None else "not_found",
        "metricType": "wellness_score",
        "unit": _UNITS["wellness_score"],
        "timePeriod": period,
        "updatedAt": profile.updated_at.isoformat(),
        "currentValue": current,
        "history": history,
    }


SPEC = FunctionSpec(definition=DEFINITION, handler=get_health_metrics)
