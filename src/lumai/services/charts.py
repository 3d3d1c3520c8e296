"""Chart-ready payloads built from profile and nutrition data."""

from __future__ import annotations

from lumai.services.base import NutritionService, ProfileService, VisualizationBuilder
from lumai.services.records import VisualizationPayload

DEFAULT_SLEEP_TARGET_HOURS = 7.0


class SnapshotChartBuilder(VisualizationBuilder):
    """Builds the four supported chart types from the data collaborators."""

    def __init__(self, profiles: ProfileService, nutrition: NutritionService) -> None:
        self.profiles = profiles
        self.nutrition = nutrition

    def build_visualization(
        self, user_id: str, visualization_type: str, time_period: str | None = None
    ) -> VisualizationPayload | None:
        if visualization_type == "weight_trend":
            return self._weight_trend(user_id, time_period or "30d")
        if visualization_type == "protein_vs_target":
            return self._protein_vs_target(user_id, time_period or "7d")
        if visualization_type == "macro_breakdown":
            return self._macro_breakdown(user_id)
        if visualization_type == "sleep_vs_target":
            return self._sleep_vs_target(user_id, time_period or "14d")
        return None

    def _weight_trend(self, user_id: str, time_period: str) -> VisualizationPayload | None:
        profile = self.profiles.load_profile_snapshot(user_id)
        if profile is None:
            return None
        limit = 40 if time_period == "90d" else 30 if time_period == "30d" else 14
        points = profile.series.get("weight", [])[-limit:]
        if not points:
            return None
        return VisualizationPayload(
            type="weight_trend",
            title="Weight trend",
            time_period=time_period,
            description="Chronological plot of recorded weight updates.",
            data={
                "series": [
                    {"date": point.date.isoformat(), "value": point.value} for point in points
                ]
            },
        )

    def _protein_vs_target(self, user_id: str, time_period: str) -> VisualizationPayload | None:
        limit = 30 if time_period == "30d" else 7
        snapshots = self.nutrition.get_nutrition_snapshots(user_id, limit)
        if not snapshots:
            return None
        targets = self.nutrition.get_nutrition_targets(user_id)
        target = targets.protein if targets else None
        series = [
            {"date": snapshot.date, "actual": snapshot.totals.protein, "target": target}
            for snapshot in reversed(snapshots)
        ]
        return VisualizationPayload(
            type="protein_vs_target",
            title="Protein vs. target",
            time_period=time_period,
            description="Bar chart comparing logged protein intake against the configured target.",
            data={"series": series, "unit": "g"},
        )

    def _macro_breakdown(self, user_id: str) -> VisualizationPayload | None:
        snapshots = self.nutrition.get_nutrition_snapshots(user_id, 1)
        if not snapshots:
            return None
        totals = snapshots[0].totals
        return VisualizationPayload(
            type="macro_breakdown",
            title="Macro intake today",
            time_period="today",
            description="Pie chart representing the distribution of calories from protein, carbs, and fats.",
            data={
                "labels": ["Protein", "Carbs", "Fats"],
                "values": [
                    round(totals.protein, 1),
                    round(totals.carbs, 1),
                    round(totals.fats, 1),
                ],
                "calories": round(totals.calories),
            },
        )

    def _sleep_vs_target(self, user_id: str, time_period: str) -> VisualizationPayload | None:
        profile = self.profiles.load_profile_snapshot(user_id)
        if profile is None:
            return None
        limit = 30 if time_period == "30d" else 14
        points = profile.sleep_hours[-limit:]
        if not points:
            return None
        target = profile.sleep_target_hours or DEFAULT_SLEEP_TARGET_HOURS
        return VisualizationPayload(
            type="sleep_vs_target",
            title="Sleep duration vs. target",
            time_period=time_period,
            description="Line chart comparing your logged sleep to the nightly goal.",
            data={
                "series": [
                    {"date": point.date.isoformat(), "actual": point.value, "target": target}
                    for point in points
                ]
            },
        )
