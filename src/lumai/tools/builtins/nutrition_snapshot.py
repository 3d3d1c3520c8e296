"""get_nutrition_snapshot: logged intake against targets."""

from __future__ import annotations

from typing import Any

from lumai.tools.base import (
    FunctionContext,
    FunctionDefinition,
    FunctionSpec,
    ParametersDefinition,
    PropertyDefinition,
    string_arg,
)

_LIMITS = {"today": 1, "7d": 7, "30d": 30}

DEFINITION = FunctionDefinition(
    name="get_nutrition_snapshot",
    description="Provides nutrition totals vs. targets for a recent date range.",
    parameters=ParametersDefinition(
        properties={
            "time_period": PropertyDefinition(
                type="string", enum=list(_LIMITS), description="Range for logged intake."
            )
        }
    ),
)


def get_nutrition_snapshot(params: dict[str, Any], context: FunctionContext) -> dict[str, Any]:
    period = string_arg(params, "time_period") or "today"
    limit = _LIMITS.get(period, 1)
    nutrition = context.services.nutrition
    snapshots = nutrition.get_nutrition_snapshots(context.user_id, limit)
    if not snapshots:
        return {"status": "not_found", "reason": "No nutrition logs recorded."}
    targets = nutrition.get_nutrition_targets(context.user_id)
    entries = [
        {
            "date": snapshot.date,
            "totals": snapshot.totals.model_dump(),
            "goalComparison": snapshot.goal_comparison,
            "wellnessImpactScore": snapshot.wellness_impact_score,
        }
        for snapshot in reversed(snapshots)
    ]
    return {
        "status": "ok",
        "timePeriod": period,
        "targets": targets.model_dump() if targets else None,
        "entries": entries,
    }


SPEC = FunctionSpec(definition=DEFINITION, handler=get_nutrition_snapshot)
