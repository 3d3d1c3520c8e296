"""get_goal_progress: progress toward the user's goals."""

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

DEFINITION = FunctionDefinition(
    name="get_goal_progress",
    description="Returns progress toward goals with milestone breakdowns.",
    parameters=ParametersDefinition(
        properties={
            "goal_type": PropertyDefinition(
                type="string",
                description="Optional goal focus to highlight (weight, activity, habits).",
            )
        }
    ),
)


def get_goal_progress(params: dict[str, Any], context: FunctionContext) -> dict[str, Any]:
    progress = context.services.goals.generate_goal_progress(context.user_id)
    if progress is None:
        return {"status": "not_found", "reason": "Goal progress is unavailable."}
    payload = progress.model_dump(mode="json")
    goal_type = string_arg(params, "goal_type")
    if goal_type:
        focused = [goal for goal in payload["goals"] if goal["goal_type"] == goal_type.lower()]
        if focused:
            payload["goals"] = focused
    return {"status": "ok", "progress": payload}


SPEC = FunctionSpec(definition=DEFINITION, handler=get_goal_progress)
