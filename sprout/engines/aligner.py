"""
Series alignment for growth charts.

The reference curve and the child's measurements are two unrelated
samplings of the age axis: the first at fixed WHO checkpoints, the second
at whatever dates the child was measured. Both are projected onto the same
label axis (yearly or half-yearly buckets), but each array is built on its
own. Nothing computed for one series ever feeds a value of the other.

Missing measurements are filled with an out-of-range sentinel rather than
an interpolated value. The sentinel keeps the array index-aligned with the
labels while plotting below the visible axis, so the renderer can draw the
measured series as disconnected dots.
"""

from __future__ import annotations

import logging
from typing import Literal, Sequence

from sprout.engines.constants import (
    HIDDEN_SENTINEL,
    INTERVAL_MONTHS,
    MAX_AGE_MONTHS,
    REFERENCE_FLOOR,
    clamp_to_display,
)
from sprout.models import (
    AgeResolvedPoint,
    ChartDataset,
    ChartMode,
    ChartSeries,
    DatasetRole,
    MeasurementType,
    ReferenceSample,
)

logger = logging.getLogger(__name__)

BandName = Literal["minus2SD", "mean", "plus2SD"]


def age_steps(mode: ChartMode | str) -> list[int]:
    """Bucket ages in months: 0, 12, ... 120 or 0, 6, ... 120."""
    interval = INTERVAL_MONTHS[ChartMode(mode)]
    return list(range(0, MAX_AGE_MONTHS + 1, interval))


def format_age_label(age_months: int) -> str:
    """'0y', '0.5y', '1y', ... '10y'."""
    return f"{age_months / 12:g}y"


def _band_value(sample: ReferenceSample, value_type: MeasurementType, band: BandName) -> float:
    sd = sample.band(value_type)
    if band == "minus2SD":
        return sd.minus_2sd
    if band == "plus2SD":
        return sd.plus_2sd
    return sd.mean


def _nearest_value(
    samples: Sequence[ReferenceSample],
    age: int,
    tolerance: float,
    value_type: MeasurementType,
    band: BandName,
) -> float | None:
    for sample in samples:
        if sample.age_in_months == age:
            return _band_value(sample, value_type, band)
    candidates = [s for s in samples if abs(s.age_in_months - age) <= tolerance]
    if not candidates:
        return None
    # Nearest age wins; the younger sample breaks ties
    nearest = min(candidates, key=lambda s: (abs(s.age_in_months - age), s.age_in_months))
    return _band_value(nearest, value_type, band)


def _interpolated_value(
    samples: Sequence[ReferenceSample],
    age: int,
    value_type: MeasurementType,
    band: BandName,
) -> float | None:
    before = None
    after = None
    for sample in samples:
        if sample.age_in_months <= age:
            before = sample
        else:
            after = sample
            break

    if before is not None and after is not None:
        low = _band_value(before, value_type, band)
        high = _band_value(after, value_type, band)
        t = (age - before.age_in_months) / (after.age_in_months - before.age_in_months)
        return low + t * (high - low)
    if before is not None:
        return _band_value(before, value_type, band)
    if after is not None:
        return _band_value(after, value_type, band)
    return None


def reference_curve(
    reference_samples: Sequence[ReferenceSample],
    mode: ChartMode | str,
    value_type: MeasurementType | str,
    band: BandName = "mean",
) -> list[float]:
    """
    Project one reference line onto the label axis.

    Yearly buckets take the sample at that age, or the nearest one within
    half an interval. Half-yearly buckets interpolate linearly between the
    bracketing samples. Ages with no usable sample get the floor value.
    """
    mode = ChartMode(mode)
    value_type = MeasurementType(value_type)
    interval = INTERVAL_MONTHS[mode]
    samples = sorted(reference_samples, key=lambda s: s.age_in_months)

    values: list[float] = []
    for age in age_steps(mode):
        if mode == ChartMode.YEARLY:
            value = _nearest_value(samples, age, interval / 2, value_type, band)
        else:
            value = _interpolated_value(samples, age, value_type, band)

        if value is None:
            value = REFERENCE_FLOOR[value_type]
        values.append(clamp_to_display(value, value_type))
    return values


def measured_curve(
    points: Sequence[AgeResolvedPoint],
    mode: ChartMode | str,
    value_type: MeasurementType | str,
) -> list[float]:
    """
    Project the child's measurements onto the label axis.

    Each bucket takes the earliest measurement within half an interval of
    it. Empty buckets get the hidden sentinel, never an interpolated value.
    """
    mode = ChartMode(mode)
    value_type = MeasurementType(value_type)
    tolerance = INTERVAL_MONTHS[mode] / 2
    ordered = sorted(points, key=lambda p: p.date)

    values: list[float] = []
    for age in age_steps(mode):
        match = next(
            (p for p in ordered if abs(p.age_in_months - age) <= tolerance),
            None,
        )
        if match is None:
            values.append(HIDDEN_SENTINEL[value_type])
        else:
            values.append(clamp_to_display(match.value, value_type))
    return values


def align_series(
    points: Sequence[AgeResolvedPoint],
    reference_samples: Sequence[ReferenceSample],
    mode: ChartMode | str,
    value_type: MeasurementType | str,
) -> ChartSeries:
    """
    Build chart labels plus independent reference and measured datasets.

    Args:
        points: Age-resolved measurements of one type
        reference_samples: Normalized WHO samples
        mode: "yearly" (11 labels) or "half-yearly" (21 labels)
        value_type: "height" or "weight"

    Returns:
        ChartSeries whose datasets all match the label count. The measured
        dataset is omitted when there are no points.
    """
    mode = ChartMode(mode)
    value_type = MeasurementType(value_type)
    labels = [format_age_label(age) for age in age_steps(mode)]

    datasets: list[ChartDataset] = []
    if reference_samples:
        datasets.append(ChartDataset(
            data=reference_curve(reference_samples, mode, value_type),
            role=DatasetRole.REFERENCE,
        ))
    if points:
        datasets.append(ChartDataset(
            data=measured_curve(points, mode, value_type),
            role=DatasetRole.MEASURED,
        ))

    logger.debug(
        "Aligned %d points against %d reference samples (%s, %s)",
        len(points), len(reference_samples), value_type.value, mode.value,
    )
    return ChartSeries(labels=labels, datasets=datasets)
