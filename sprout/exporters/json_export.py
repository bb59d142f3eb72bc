"""
JSON exporter for Sprout.

Exports growth chart views as clean, human-readable JSON.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from sprout.models import GrowthChartView


def export_json(
    view: GrowthChartView,
    output_path: Path | None = None,
    indent: int = 2,
    include_nulls: bool = False,
) -> str:
    """
    Export a growth chart view to JSON format.

    Args:
        view: The assembled chart view
        output_path: Optional path to write the JSON file
        indent: JSON indentation level
        include_nulls: Whether to include null values in output

    Returns:
        JSON string representation of the view
    """
    # Aliases keep WHO field names (ageInMonths, minus2SD) on the wire
    data = view.model_dump(mode="json", by_alias=True, exclude_none=not include_nulls)
    json_str = json.dumps(data, indent=indent)

    if output_path:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(json_str)

    return json_str


def export_json_summary(view: GrowthChartView) -> dict[str, Any]:
    """
    Export a summary of the chart (useful for listings/previews).

    Returns a dict with the key growth figures.
    """
    analysis = view.analysis
    return {
        "value_type": view.value_type.value,
        "mode": view.mode.value,
        "gender": view.gender.value,
        "latest_value": view.summary.latest_value,
        "unit": view.summary.unit,
        "measurement_count": view.summary.measurement_count,
        "percentile": analysis.percentile if analysis else None,
        "status": analysis.status.value if analysis else None,
        "reference_source": view.reference_source.value,
    }
