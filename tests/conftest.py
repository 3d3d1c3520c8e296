from __future__ import annotations

import datetime as dt

import pytest

from lumai.services import (
    InMemoryGoalService,
    InMemoryMealPlanService,
    InMemoryNutritionService,
    InMemoryProfileService,
    Services,
    SnapshotChartBuilder,
)
from lumai.services.records import (
    GoalProgress,
    GoalStatus,
    MacroTotals,
    Meal,
    MealPlan,
    MealPlanDay,
    MetricPoint,
    NutritionSnapshot,
    NutritionTargets,
    ProfileSnapshot,
    Recipe,
    WellnessSummary,
)
from lumai.tools.base import FunctionContext

USER_ID = "user-1"
TODAY = dt.date(2024, 5, 20)


def _series(start: float, step: float, count: int) -> list[MetricPoint]:
    first = TODAY - dt.timedelta(days=count - 1)
    return [
        MetricPoint(date=first + dt.timedelta(days=index), value=round(start + step * index, 1))
        for index in range(count)
    ]


def build_profile() -> ProfileSnapshot:
    return ProfileSnapshot(
        weight_kg=72.4,
        height_cm=178.0,
        bmi=22.9,
        goals=[{"type": "weight", "target": 70.0, "unit": "kg"}],
        updated_at=dt.datetime(2024, 5, 20, 8, 30, tzinfo=dt.timezone.utc),
        series={
            "weight": _series(75.0, -0.05, 50),
            "bmi": _series(23.7, -0.02, 20),
        },
        sleep_hours=_series(6.5, 0.02, 20),
        sleep_target_hours=8.0,
        wellness=WellnessSummary(
            weekly_average=74.0,
            weekly_end=TODAY,
            monthly_average=71.5,
            monthly_end=TODAY,
        ),
    )


def build_services() -> Services:
    profiles = InMemoryProfileService(profiles={USER_ID: build_profile()})
    snapshots = [
        NutritionSnapshot(
            date=(TODAY - dt.timedelta(days=6 - index)).isoformat(),
            totals=MacroTotals(calories=2000 + index * 10, protein=100 + index, carbs=220.44, fats=70.06),
            goal_comparison={"protein": 0.8},
            wellness_impact_score=70 + index,
        )
        for index in range(7)
    ]
    nutrition = InMemoryNutritionService(
        snapshots={USER_ID: snapshots},
        targets={USER_ID: NutritionTargets(calories=2200, protein=130, carbs=240, fats=75)},
    )
    plan = MealPlan(
        id="plan-1",
        start_date="2024-05-20",
        end_date="2024-05-26",
        timezone="Europe/Berlin",
        duration=7,
        strategy_summary="High protein, moderate carbs.",
        days=[
            MealPlanDay(
                date="2024-05-20",
                meals=[
                    Meal(
                        id="meal-1",
                        type="breakfast",
                        title="Overnight oats",
                        scheduled_at="08:00",
                        macros={"calories": 420, "protein": 23},
                        recipe_id="recipe-oats",
                    ),
                    Meal(id="meal-2", type="dinner", title="Lentil curry", recipe_id="recipe-curry"),
                ],
            ),
            MealPlanDay(
                date="2024-05-21",
                meals=[Meal(id="meal-3", type="lunch", title="Chicken salad")],
            ),
        ],
    )
    recipe = Recipe(
        id="recipe-oats",
        title="Overnight oats",
        servings=1,
        prep_time_min=5,
        macros_per_serving={"calories": 420, "protein": 23},
        ingredients=["60g oats", "200ml milk"],
        instructions=["Mix everything.", "Refrigerate overnight."],
    )
    meal_plans = InMemoryMealPlanService(plans={USER_ID: plan}, recipes={recipe.id: recipe})
    goals = InMemoryGoalService(
        progress={
            USER_ID: GoalProgress(
                generated_at=dt.datetime(2024, 5, 20, tzinfo=dt.timezone.utc),
                goals=[
                    GoalStatus(
                        goal_type="weight",
                        label="Reach 70 kg",
                        target_value=70.0,
                        current_value=72.4,
                        unit="kg",
                        percent_complete=48.0,
                    ),
                    GoalStatus(goal_type="activity", label="8k steps", percent_complete=80.0),
                ],
            )
        }
    )
    return Services(
        profiles=profiles,
        meal_plans=meal_plans,
        goals=goals,
        nutrition=nutrition,
        visualizations=SnapshotChartBuilder(profiles, nutrition),
    )


@pytest.fixture
def services() -> Services:
    return build_services()


@pytest.fixture
def context(services: Services) -> FunctionContext:
    return FunctionContext(user_id=USER_ID, services=services, user_name="Sam")
