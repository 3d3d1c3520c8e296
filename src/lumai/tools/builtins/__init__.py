"""Assistant functions exposed to the model."""

from lumai.tools.builtins import (
    goal_progress,
    health_metrics,
    meal_plan,
    nutrition_snapshot,
    recipe_details,
    visualization,
)

BUILTIN_SPECS = (
    health_metrics.SPEC,
    goal_progress.SPEC,
    meal_plan.SPEC,
    nutrition_snapshot.SPEC,
    recipe_details.SPEC,
    visualization.SPEC,
)
