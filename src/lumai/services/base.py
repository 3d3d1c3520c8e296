"""Collaborator contracts consumed by the assistant functions."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from lumai.services.records import (
    GoalProgress,
    MealPlan,
    NutritionSnapshot,
    NutritionTargets,
    ProfileSnapshot,
    Recipe,
    VisualizationPayload,
)


class ProfileService(ABC):
    @abstractmethod
    def load_profile_snapshot(self, user_id: str) -> ProfileSnapshot | None:
        raise NotImplementedError


class MealPlanService(ABC):
    @abstractmethod
    def load_meal_plan(self, user_id: str) -> MealPlan | None:
        raise NotImplementedError

    @abstractmethod
    def get_recipe(self, recipe_id: str) -> Recipe | None:
        raise NotImplementedError


class GoalService(ABC):
    @abstractmethod
    def generate_goal_progress(self, user_id: str) -> GoalProgress | None:
        raise NotImplementedError


class NutritionService(ABC):
    @abstractmethod
    def get_nutrition_snapshots(self, user_id: str, limit: int) -> list[NutritionSnapshot]:
        """Return up to ``limit`` snapshots, newest first."""
        raise NotImplementedError

    @abstractmethod
    def get_nutrition_targets(self, user_id: str) -> NutritionTargets | None:
        raise NotImplementedError


class VisualizationBuilder(ABC):
    @abstractmethod
    def build_visualization(
        self, user_id: str, visualization_type: str, time_period: str | None = None
    ) -> VisualizationPayload | None:
        raise NotImplementedError


@dataclass(frozen=True)
class Services:
    """Collaborators reachable from function handlers."""

    profiles: ProfileService
    meal_plans: MealPlanService
    goals: GoalService
    nutrition: NutritionService
    visualizations: VisualizationBuilder
