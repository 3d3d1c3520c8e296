"""get_visualization: chart-ready data for trends and comparisons."""

from __future__ import annotations

from typing import Any, get_args

from lumai.services.records import VisualizationType
from lumai.tools.base import (
    FunctionContext,
    FunctionDefinition,
    FunctionSpec,
    ParametersDefinition,
    PropertyDefinition,
    string_arg,
)

VISUALIZATION_TYPES = list(get_args(VisualizationType))

DEFINITION = FunctionDefinition(
    name="get_visualization",
    description="Generates chart-ready data for trends or comparisons.",
    parameters=ParametersDefinition(
        properties={
            "visualization_type": PropertyDefinition(type="string", enum=VISUALIZATION_TYPES),
            "time_period": PropertyDefinition(
                type="string", description="Optional timeframe for the visualization."
            ),
        },
        required=["visualization_type"],
    ),
)


def get_visualization(params: dict[str, Any], context: FunctionContext) -> dict[str, Any]:
    visualization_type = string_arg(params, "visualization_type") or "weight_trend"
    payload = context.services.visualizations.build_visualization(
        context.user_id, visualization_type, string_arg(params, "time_period")
    )
    if payload is None:
        return {
            "status": "not_found",
            "reason": "Unable to build visualization from current data.",
        }
    return {"status": "ok", "visualization": payload.model_dump(mode="json")}


SPEC = FunctionSpec(definition=DEFINITION, handler=get_visualization)
