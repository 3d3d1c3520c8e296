"""In-memory collaborator backends for local runs and tests."""

from __future__ import annotations

from dataclasses import dataclass, field

from lumai.services.base import GoalService, MealPlanService, NutritionService, ProfileService
from lumai.services.records import (
    GoalProgress,
    MealPlan,
    NutritionSnapshot,
    NutritionTargets,
    ProfileSnapshot,
    Recipe,
)


@dataclass
class InMemoryProfileService(ProfileService):
    profiles: dict[str, ProfileSnapshot] = field(default_factory=dict)

    def load_profile_snapshot(self, user_id: str) -> ProfileSnapshot | None:
        return self.profiles.get(user_id)


@dataclass
class InMemoryMealPlanService(MealPlanService):
    plans: dict[str, MealPlan] = field(default_factory=dict)
    recipes: dict[str, Recipe] = field(default_factory=dict)

    def load_meal_plan(self, user_id: str) -> MealPlan | None:
        return self.plans.get(user_id)

    def get_recipe(self, recipe_id: str) -> Recipe | None:
        return self.recipes.get(recipe_id)


@dataclass
class InMemoryGoalService(GoalService):
    progress: dict[str, GoalProgress] = field(default_factory=dict)

    def generate_goal_progress(self, user_id: str) -> GoalProgress | None:
        return self.progress.get(user_id)


@dataclass
class InMemoryNutritionService(NutritionService):
    # Stored oldest first; served newest first.
    snapshots: dict[str, list[NutritionSnapshot]] = field(default_factory=dict)
    targets: dict[str, NutritionTargets] = field(default_factory=dict)

    def get_nutrition_snapshots(self, user_id: str, limit: int) -> list[NutritionSnapshot]:
        entries = self.snapshots.get(user_id, [])
        if limit <= 0:
            return []
        return list(reversed(entries[-limit:]))

    def get_nutrition_targets(self, user_id: str) -> NutritionTargets | None:
        return self.targets.get(user_id)
