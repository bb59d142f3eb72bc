"""
Age resolution for growth measurements.

Places each measurement on the chart's 0-120 month axis using whole
calendar months between birth and the measurement date.
"""

from __future__ import annotations

import calendar
import logging
from datetime import date, datetime
from typing import Iterable

from sprout.engines.constants import MAX_AGE_MONTHS
from sprout.models import AgeResolvedPoint, Measurement, MeasurementType, parse_iso_date

logger = logging.getLogger(__name__)


def months_between(start: date, end: date) -> int:
    """
    Whole calendar months from start to end, never negative.

    A month only counts once its day-of-month has been reached, so
    2023-02-15 -> 2024-01-10 is 10 months, not 11.
    """
    years = end.year - start.year
    months = end.month - start.month
    if end.day < start.day:
        months -= 1
    if months < 0:
        years -= 1
        months += 12
    return max(0, years * 12 + months)


def subtract_months(anchor: date, months: int) -> date:
    """Step back a number of calendar months, clamping to the month's last day."""
    total = anchor.year * 12 + (anchor.month - 1) - months
    year, month_index = divmod(total, 12)
    month = month_index + 1
    day = min(anchor.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def resolve_age_in_months(
    measurement_date: date | datetime | str,
    birth_date: date | datetime | str | None = None,
    fallback_age_in_months: int | None = 0,
    today: date | None = None,
) -> int:
    """
    Resolve a measurement date to an age in months on the chart axis.

    Args:
        measurement_date: When the measurement was taken
        birth_date: Child's birth date, if known
        fallback_age_in_months: Approximate current age, used to estimate a
            birth date when birth_date is unknown
        today: Reference "today" for the estimate (defaults to date.today())

    Returns:
        Age in whole months, saturated to 0-120
    """
    measured_on = parse_iso_date(measurement_date)

    if birth_date is not None:
        born_on = parse_iso_date(birth_date)
    else:
        anchor = today or date.today()
        born_on = subtract_months(anchor, fallback_age_in_months or 0)
        logger.debug("No birth date, estimated %s from age %s months", born_on, fallback_age_in_months)

    age = months_between(born_on, measured_on)
    return max(0, min(MAX_AGE_MONTHS, age))


def resolve_points(
    measurements: Iterable[Measurement],
    value_type: MeasurementType,
    birth_date: date | str | None = None,
    fallback_age_in_months: int | None = 0,
    today: date | None = None,
) -> list[AgeResolvedPoint]:
    """
    Age-resolve the measurements of one type, oldest first.
    """
    value_type = MeasurementType(value_type)
    selected = sorted(
        (m for m in measurements if m.type == value_type),
        key=lambda m: m.date,
    )
    return [
        AgeResolvedPoint(
            value=m.value,
            age_in_months=resolve_age_in_months(
                m.date, birth_date, fallback_age_in_months, today=today
            ),
            date=m.date,
        )
        for m in selected
    ]
