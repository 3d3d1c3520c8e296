"""Records returned by the data collaborators."""

from __future__ import annotations

import datetime as dt
from typing import Any, Literal

from pydantic import BaseModel, Field

TimePeriod = Literal["current", "7d", "30d", "90d"]
VisualizationType = Literal["weight_trend", "protein_vs_target", "macro_breakdown", "sleep_vs_target"]

TIME_PERIODS: tuple[str, ...] = ("current", "7d", "30d", "90d")

# Number of history points returned for each period.
HISTORY_LIMITS: dict[str, int] = {"7d": 10, "30d": 30, "90d": 45}


class MetricPoint(BaseModel):
    date: dt.date
    value: float


class WellnessSummary(BaseModel):
    weekly_average: float | None = None
    weekly_end: dt.date | None = None
    monthly_average: float | None = None
    monthly_end: dt.date | None = None


class ProfileSnapshot(BaseModel):
    """Normalized body metrics with per-metric history, oldest first."""

    weight_kg: float | None = None
    height_cm: float | None = None
    bmi: float | None = None
    goals: list[dict[str, Any]] = Field(default_factory=list)
    updated_at: dt.datetime
    series: dict[str, list[MetricPoint]] = Field(default_factory=dict)
    sleep_hours: list[MetricPoint] = Field(default_factory=list)
    sleep_target_hours: float | None = None
    wellness: WellnessSummary | None = None

    def history(self, metric: str, period: str) -> list[MetricPoint]:
        if period == "current":
            return []
        limit = HISTORY_LIMITS.get(period, 14)
        return list(self.series.get(metric, [])[-limit:])


class Meal(BaseModel):
    id: str
    type: str
    title: str
    scheduled_at: str | None = None
    macros: dict[str, float] = Field(default_factory=dict)
    recipe_id: str | None = None
    notes: str | None = None


class MealPlanDay(BaseModel):
    date: str
    meals: list[Meal] = Field(default_factory=list)


class MealPlan(BaseModel):
    id: str
    start_date: str
    end_date: str
    timezone: str = "UTC"
    duration: int | None = None
    strategy_summary: str | None = None
    analysis: dict[str, Any] | None = None
    days: list[MealPlanDay] = Field(default_factory=list)


class Recipe(BaseModel):
    id: str
    title: str
    cuisine: str | None = None
    servings: int | None = None
    prep_time_min: int | None = None
    cook_time_min: int | None = None
    summary: str | None = None
    dietary_tags: list[str] = Field(default_factory=list)
    allergen_tags: list[str] = Field(default_factory=list)
    macros_per_serving: dict[str, float] = Field(default_factory=dict)
    ingredients: list[str] = Field(default_factory=list)
    instructions: list[str] = Field(default_factory=list)


class MacroTotals(BaseModel):
    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fats: float = 0.0


class NutritionSnapshot(BaseModel):
    date: str
    totals: MacroTotals
    goal_comparison: dict[str, float] = Field(default_factory=dict)
    wellness_impact_score: float | None = None


class NutritionTargets(BaseModel):
    calories: float
    protein: float
    carbs: float
    fats: float


class GoalStatus(BaseModel):
    goal_type: str
    label: str
    target_value: float | None = None
    current_value: float | None = None
    unit: str | None = None
    percent_complete: float | None = None
    milestones: list[str] = Field(default_factory=list)


class GoalProgress(BaseModel):
    generated_at: dt.datetime
    goals: list[GoalStatus] = Field(default_factory=list)


class VisualizationPayload(BaseModel):
    type: str
    title: str
    time_period: str
    description: str
    data: dict[str, Any] = Field(default_factory=dict)
