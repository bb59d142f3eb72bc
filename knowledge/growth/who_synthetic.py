"""
Synthetic WHO-style reference curves.

Used only when no reference data can be reached. Growth is modelled as a
piecewise-linear curve: starting from a birth value, each age bracket adds
a fixed increment per month on top of the previous bracket's endpoint.

The +/-2SD bounds are fixed percentage offsets from the mean (15% for
weight, 7% for height). This is an approximation for drawing a plausible
reference line, not a clinical growth standard.
"""

from __future__ import annotations

from typing import Literal, NamedTuple


class GrowthBracket(NamedTuple):
    """Monthly increment applied up to (and including) max_age_months."""
    max_age_months: int
    per_month: float


class GrowthModel(NamedTuple):
    birth_value: float
    brackets: tuple[GrowthBracket, ...]


# Brackets: 0-12, 12-24, 24-60, 60-120 months
WEIGHT_MODEL: dict[str, GrowthModel] = {
    "male": GrowthModel(3.3, (
        GrowthBracket(12, 0.55),
        GrowthBracket(24, 0.20),
        GrowthBracket(60, 0.17),
        GrowthBracket(120, 0.22),
    )),
    "female": GrowthModel(3.2, (
        GrowthBracket(12, 0.50),
        GrowthBracket(24, 0.20),
        GrowthBracket(60, 0.17),
        GrowthBracket(120, 0.23),
    )),
}

HEIGHT_MODEL: dict[str, GrowthModel] = {
    "male": GrowthModel(49.9, (
        GrowthBracket(12, 2.15),
        GrowthBracket(24, 1.00),
        GrowthBracket(60, 0.62),
        GrowthBracket(120, 0.45),
    )),
    "female": GrowthModel(49.1, (
        GrowthBracket(12, 2.05),
        GrowthBracket(24, 1.05),
        GrowthBracket(60, 0.62),
        GrowthBracket(120, 0.48),
    )),
}

SD_OFFSET: dict[str, float] = {
    "weight": 0.15,
    "height": 0.07,
}


def synthetic_mean(
    age_months: int,
    measure: Literal["weight", "height"],
    sex: Literal["male", "female"],
) -> float:
    """
    Evaluate the piecewise growth model at an age.

    Args:
        age_months: Age in months (clamped to 0-120)
        measure: "weight" (kg) or "height" (cm)
        sex: "male" or "female"

    Returns:
        Synthesized mean value
    """
    table = WEIGHT_MODEL if measure == "weight" else HEIGHT_MODEL
    model = table.get(sex, table["male"])
    age = max(0, min(120, age_months))

    value = model.birth_value
    start = 0
    for bracket in model.brackets:
        if age <= start:
            break
        span = min(age, bracket.max_age_months) - start
        value += span * bracket.per_month
        start = bracket.max_age_months
    return value


def synthetic_band(
    age_months: int,
    measure: Literal["weight", "height"],
    sex: Literal["male", "female"],
) -> tuple[float, float, float]:
    """Return (minus2SD, mean, plus2SD) for an age, rounded for display."""
    mean = synthetic_mean(age_months, measure, sex)
    offset = SD_OFFSET[measure]
    digits = 2 if measure == "weight" else 1
    return (
        round(mean * (1 - offset), digits),
        round(mean, digits),
        round(mean * (1 + offset), digits),
    )
