"""get_meal_plan: the active meal plan for one day."""

from __future__ import annotations

from datetime import date
from typing import Any

from lumai.services.records import Meal
from lumai.tools.base import (
    FunctionContext,
    FunctionDefinition,
    FunctionSpec,
    ParametersDefinition,
    PropertyDefinition,
    string_arg,
)

DEFINITION = FunctionDefinition(
    name="get_meal_plan",
    description="Fetches the current meal plan with meal details for a specific day.",
    parameters=ParametersDefinition(
        properties={
            "day": PropertyDefinition(
                type="string", description="ISO date (YYYY-MM-DD). Defaults to today."
            ),
            "include_recipes": PropertyDefinition(
                type="boolean", description="Whether to include recipe IDs for each meal."
            ),
        }
    ),
)


def _format_meal(meal: Meal, include_recipes: bool) -> dict[str, Any]:
    formatted: dict[str, Any] = {
        "mealId": meal.id,
        "type": meal.type,
        "title": meal.title,
        "scheduledAt": meal.scheduled_at,
        "macros": meal.macros,
        "notes": meal.notes,
    }
    if include_recipes:
        formatted["recipeId"] = meal.recipe_id
    return formatted


def get_meal_plan(params: dict[str, Any], context: FunctionContext) -> dict[str, Any]:
    plan = context.services.meal_plans.load_meal_plan(context.user_id)
    if plan is None:
        return {"status": "not_found", "reason": "No active meal plan found."}
    requested_day = string_arg(params, "day") or date.today().isoformat()
    include_recipes = params.get("include_recipes") is True
    day = next((entry for entry in plan.days if entry.date == requested_day), None)
    if day is None and plan.days:
        day = plan.days[0]
    return {
        "status": "ok",
        "planId": plan.id,
        "range": {"start": plan.start_date, "end": plan.end_date},
        "timezone": plan.timezone,
        "date": day.date if day else requested_day,
        "meals": [_format_meal(meal, include_recipes) for meal in day.meals] if day else [],
        "metadata": {
            "duration": plan.duration,
            "strategySummary": plan.strategy_summary,
            "analysis": plan.analysis,
        },
    }


SPEC = FunctionSpec(definition=DEFINITION, handler=get_meal_plan)
