"""get_recipe_details: instructions, ingredients and nutrition of a recipe."""

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
    name="get_recipe_details",
    description="Returns recipe instructions, ingredients, and nutrition.",
    parameters=ParametersDefinition(
        properties={
            "recipe_id": PropertyDefinition(
                type="string", description="Recipe identifier from the user's meal plan."
            )
        },
        required=["recipe_id"],
    ),
)


def get_recipe_details(params: dict[str, Any], context: FunctionContext) -> dict[str, Any]:
    recipe_id = string_arg(params, "recipe_id")
    if not recipe_id:
        return {"status": "error", "reason": "recipe_id is required"}
    recipe = context.services.meal_plans.get_recipe(recipe_id)
    if recipe is None:
        return {"status": "not_found", "reason": "Recipe not found."}
    return {"status": "ok", "recipe": recipe.model_dump(mode="json")}


SPEC = FunctionSpec(definition=DEFINITION, handler=get_recipe_details)
