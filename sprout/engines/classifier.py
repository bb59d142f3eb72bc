"""
Percentile classification of a single growth measurement.

The band result is an SD-threshold approximation, not a true percentile:
a value is bucketed against the WHO -2SD, mean and +2SD for its age. Only
four of the seven statuses come out of that bucketing; p3_to_p10,
p10_to_p25 and p90_to_p97 are reachable only through the continuous
estimate (status_for_percentile), which is reported alongside.
"""

from __future__ import annotations

from typing import Sequence

from scipy import stats

from sprout.models import (
    Gender,
    GrowthAnalysis,
    GrowthStatus,
    MeasurementType,
    ReferenceSample,
    SDBand,
)

RECOMMENDATIONS: dict[GrowthStatus, str] = {
    GrowthStatus.BELOW_P3: (
        "Your child's {measure} is below the 3rd percentile. "
        "Consider consulting with a pediatrician."
    ),
    GrowthStatus.ABOVE_P97: (
        "Your child's {measure} is above the 97th percentile. "
        "Consider consulting with a pediatrician."
    ),
    GrowthStatus.P75_TO_P90: (
        "Your child's {measure} is above average. "
        "Monitor growth and consider discussing with a healthcare provider."
    ),
}

STATUS_LABELS: dict[GrowthStatus, str] = {
    GrowthStatus.BELOW_P3: "Below 3rd percentile",
    GrowthStatus.P3_TO_P10: "3rd-10th percentile",
    GrowthStatus.P10_TO_P25: "10th-25th percentile",
    GrowthStatus.P25_TO_P75: "25th-75th percentile (Normal)",
    GrowthStatus.P75_TO_P90: "75th-90th percentile",
    GrowthStatus.P90_TO_P97: "90th-97th percentile",
    GrowthStatus.ABOVE_P97: "Above 97th percentile",
}


def classify_band(value: float, band: SDBand) -> tuple[int, GrowthStatus]:
    """Bucket a value against -2SD / mean / +2SD."""
    if value <= band.minus_2sd:
        return 3, GrowthStatus.BELOW_P3
    elif value <= band.mean:
        return 50, GrowthStatus.P25_TO_P75
    elif value <= band.plus_2sd:
        return 97, GrowthStatus.P75_TO_P90
    else:
        return 100, GrowthStatus.ABOVE_P97


def recommendation_for(status: GrowthStatus, value_type: MeasurementType | str) -> str | None:
    """Advisory text, only for statuses worth a conversation."""
    template = RECOMMENDATIONS.get(status)
    if template is None:
        return None
    return template.format(measure=MeasurementType(value_type).value)


def estimate_z_score(value: float, band: SDBand) -> float | None:
    """
    Approximate z-score assuming the band spans -2SD..+2SD symmetrically.

    Returns None when the band is too degenerate to derive an SD from.
    """
    sd = (band.plus_2sd - band.minus_2sd) / 4
    if sd <= 0:
        return None
    return (value - band.mean) / sd


def status_for_percentile(percentile: float) -> GrowthStatus:
    """Map a continuous percentile onto the seven clinical bands."""
    if percentile < 3:
        return GrowthStatus.BELOW_P3
    elif percentile < 10:
        return GrowthStatus.P3_TO_P10
    elif percentile < 25:
        return GrowthStatus.P10_TO_P25
    elif percentile <= 75:
        return GrowthStatus.P25_TO_P75
    elif percentile <= 90:
        return GrowthStatus.P75_TO_P90
    elif percentile <= 97:
        return GrowthStatus.P90_TO_P97
    else:
        return GrowthStatus.ABOVE_P97


def status_label(status: GrowthStatus | str) -> str:
    return STATUS_LABELS[GrowthStatus(status)]


def classify_measurement(
    value: float,
    age_in_months: int,
    gender: Gender | str,
    reference_row: ReferenceSample,
    value_type: MeasurementType | str,
) -> GrowthAnalysis:
    """
    Classify one measurement against the WHO row for its age.

    Args:
        value: Measured value (kg or cm)
        age_in_months: Child's age at measurement
        gender: "male" or "female"
        reference_row: WHO reference sample for that age and gender
        value_type: "height" or "weight"

    Returns:
        GrowthAnalysis with the band percentile, status, optional
        recommendation and the continuous z-score estimate
    """
    value_type = MeasurementType(value_type)
    band = reference_row.band(value_type)
    percentile, status = classify_band(value, band)

    z = estimate_z_score(value, band)
    estimated = None
    if z is not None:
        estimated = round(float(stats.norm.cdf(z) * 100), 1)
        z = round(z, 2)

    return GrowthAnalysis(
        child_value=value,
        child_age_in_months=age_in_months,
        child_gender=Gender(gender),
        value_type=value_type,
        reference=reference_row,
        percentile=percentile,
        status=status,
        recommendation=recommendation_for(status, value_type),
        z_score=z,
        estimated_percentile=estimated,
    )


def find_reference_row(
    reference_samples: Sequence[ReferenceSample],
    age_in_months: int,
) -> ReferenceSample | None:
    """The reference row closest in age; the younger one wins ties."""
    if not reference_samples:
        return None
    return min(
        reference_samples,
        key=lambda s: (abs(s.age_in_months - age_in_months), s.age_in_months),
    )
