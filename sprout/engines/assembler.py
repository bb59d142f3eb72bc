"""
Chart data assembly.

Runs the full growth pipeline for one child and one measure: resolve ages,
normalize the reference curve, align both series and classify the latest
measurement. Recomputed from scratch on every call.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Iterable

from sprout.engines.age import resolve_points
from sprout.engines.aligner import align_series
from sprout.engines.classifier import classify_measurement, find_reference_row
from sprout.engines.constants import DISPLAY_RANGE
from sprout.engines.reference import (
    ReferenceDataProvider,
    load_reference_samples,
    resolve_reference,
)
from sprout.models import (
    ChartMode,
    ChildProfile,
    GrowthChartView,
    GrowthSummary,
    Measurement,
    MeasurementType,
    ReferenceSample,
    UNITS,
)

logger = logging.getLogger(__name__)


def assemble_growth_chart(
    measurements: Iterable[Measurement],
    child: ChildProfile,
    value_type: MeasurementType | str,
    mode: ChartMode | str = ChartMode.YEARLY,
    reference_samples: Iterable[ReferenceSample] | None = None,
    provider: ReferenceDataProvider | None = None,
    today: date | None = None,
) -> GrowthChartView:
    """
    Build the renderable growth chart for a child.

    Args:
        measurements: The child's measurements (any type; filtered here)
        child: Birth date, gender and approximate age
        value_type: "height" or "weight"
        mode: "yearly" or "half-yearly"
        reference_samples: Raw WHO rows already fetched by the caller
        provider: Used to fetch WHO rows when reference_samples is None
        today: Reference date for birth date estimation

    Returns:
        GrowthChartView with series, latest analysis and summary
    """
    value_type = MeasurementType(value_type)
    mode = ChartMode(mode)

    points = resolve_points(
        measurements,
        value_type,
        birth_date=child.birth_date,
        fallback_age_in_months=child.age_in_months,
        today=today,
    )

    if reference_samples is not None:
        resolution = resolve_reference(reference_samples, child.gender)
    else:
        resolution = load_reference_samples(provider, child.gender)

    series = align_series(points, resolution.samples, mode, value_type)

    analysis = None
    if points:
        latest = points[-1]
        row = find_reference_row(resolution.samples, latest.age_in_months)
        if row is not None:
            analysis = classify_measurement(
                latest.value, latest.age_in_months, child.gender, row, value_type
            )
    else:
        logger.info("No %s measurements for child %s", value_type.value, child.id)

    summary = GrowthSummary(
        latest_value=points[-1].value if points else None,
        measurement_count=len(points),
        mode=mode,
        unit=UNITS[value_type],
    )

    axis_min, axis_max = DISPLAY_RANGE[value_type]
    return GrowthChartView(
        value_type=value_type,
        mode=mode,
        gender=child.gender,
        series=series,
        points=points,
        analysis=analysis,
        summary=summary,
        reference_source=resolution.source,
        axis_min=axis_min,
        axis_max=axis_max,
    )
