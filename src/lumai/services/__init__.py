"""Data collaborators used by the assistant functions."""

from lumai.services.base import (
    GoalService,
    MealPlanService,
    NutritionService,
    ProfileService,
    Services,
    VisualizationBuilder,
)
from lumai.services.charts import SnapshotChartBuilder
from lumai.services.memory import (
    InMemoryGoalService,
    InMemoryMealPlanService,
    InMemoryNutritionService,
    InMemoryProfileService,
)
