"""
WHO reference curve normalization.

Reference sources vary in density: some return monthly rows, some yearly
checkpoints, some nothing at all. The chart always draws one checkpoint per
year from birth to 10 years, so every source is reduced to at most 11
yearly samples here, and an empty source is replaced by a synthesized
curve. Callers pass the provider result in explicitly; nothing is cached.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable

from knowledge.growth import synthetic_band
from sprout.engines.constants import MAX_AGE_MONTHS
from sprout.models import Gender, ReferenceSample, ReferenceSource, SDBand

logger = logging.getLogger(__name__)


class ReferenceDataProvider(ABC):
    """Source of raw WHO reference rows."""

    @abstractmethod
    def get_in_range(
        self, gender: Gender, min_age_months: int, max_age_months: int
    ) -> list[ReferenceSample]:
        """Rows for a gender within an age range (inclusive)."""
        pass

    @abstractmethod
    def get_by_gender(self, gender: Gender) -> list[ReferenceSample]:
        """All rows for a gender, unfiltered by age."""
        pass


class StaticReferenceProvider(ReferenceDataProvider):
    """Provider over an in-memory list of rows (files, fixtures)."""

    def __init__(self, samples: Iterable[ReferenceSample]):
        self._samples = list(samples)

    def get_in_range(self, gender, min_age_months, max_age_months):
        return [
            s for s in self._samples
            if s.gender == Gender(gender) and min_age_months <= s.age_in_months <= max_age_months
        ]

    def get_by_gender(self, gender):
        return [s for s in self._samples if s.gender == Gender(gender)]


@dataclass
class ReferenceResolution:
    """Normalized reference series plus where it came from."""
    samples: list[ReferenceSample]
    source: ReferenceSource

    @property
    def synthesized(self) -> bool:
        return self.source == ReferenceSource.SYNTHESIZED


def _yearly_only(samples: list[ReferenceSample]) -> list[ReferenceSample]:
    return [s for s in samples if s.age_in_months % 12 == 0]


def select_yearly_samples(
    raw_samples: Iterable[ReferenceSample],
    gender: Gender | str,
) -> list[ReferenceSample]:
    """
    Reduce raw rows to at most 11 yearly checkpoints for one gender.

    May return an empty list; see normalize_reference_samples for the
    variant that never does.
    """
    gender = Gender(gender)
    filtered = [
        s for s in raw_samples
        if s.gender == gender and 0 <= s.age_in_months <= MAX_AGE_MONTHS
    ]

    # Dense sources (monthly, quarterly) and sparse rows at irregular ages
    # both reduce to the yearly checkpoints
    filtered = _yearly_only(filtered)

    # Duplicate rows for one age: first one wins, which caps the result at
    # one row per checkpoint
    by_age: dict[int, ReferenceSample] = {}
    for sample in filtered:
        by_age.setdefault(sample.age_in_months, sample)
    return [by_age[age] for age in sorted(by_age)]


def synthesize_reference_series(gender: Gender | str) -> list[ReferenceSample]:
    """
    Build an 11-point yearly reference series from the piecewise model.

    Never raises; always returns ages 0, 12, ..., 120.
    """
    gender = Gender(gender)
    samples = []
    for age in range(0, MAX_AGE_MONTHS + 1, 12):
        w_low, w_mean, w_high = synthetic_band(age, "weight", gender.value)
        h_low, h_mean, h_high = synthetic_band(age, "height", gender.value)
        samples.append(ReferenceSample(
            id=f"synthetic-{gender.value}-{age}",
            age=f"{age // 12} years",
            age_in_months=age,
            gender=gender,
            weight=SDBand(minus_2sd=w_low, mean=w_mean, plus_2sd=w_high),
            height=SDBand(minus_2sd=h_low, mean=h_mean, plus_2sd=h_high),
        ))
    return samples


def resolve_reference(
    raw_samples: Iterable[ReferenceSample] | None,
    gender: Gender | str,
) -> ReferenceResolution:
    """Normalize raw rows, falling back to synthesis when none are usable."""
    selected = select_yearly_samples(raw_samples or [], gender)
    if selected:
        return ReferenceResolution(samples=selected, source=ReferenceSource.PROVIDER)

    logger.warning("No usable WHO reference rows for %s, using synthesized curve", Gender(gender).value)
    return ReferenceResolution(
        samples=synthesize_reference_series(gender),
        source=ReferenceSource.SYNTHESIZED,
    )


def normalize_reference_samples(
    raw_samples: Iterable[ReferenceSample] | None,
    gender: Gender | str,
) -> list[ReferenceSample]:
    """
    Normalize raw WHO rows to the chart's yearly checkpoints.

    Args:
        raw_samples: Provider rows in any density, possibly empty
        gender: Gender to keep

    Returns:
        At most 11 samples, all at multiples of 12 months, sorted by age
    """
    return resolve_reference(raw_samples, gender).samples


def load_reference_samples(
    provider: ReferenceDataProvider | None,
    gender: Gender | str,
) -> ReferenceResolution:
    """
    Fetch reference rows and normalize them.

    Tries the range query first, then the per-gender query. A provider
    error and an empty response are both "no data": the result is then
    synthesized, never raised.
    """
    gender = Gender(gender)
    raw: list[ReferenceSample] = []

    if provider is not None:
        try:
            raw = provider.get_in_range(gender, 0, MAX_AGE_MONTHS)
        except Exception as e:
            logger.warning("WHO range query failed for %s: %s", gender.value, e)
            raw = []

        if not raw:
            logger.info("WHO range query empty for %s, trying per-gender query", gender.value)
            try:
                raw = provider.get_by_gender(gender)
            except Exception as e:
                logger.warning("WHO per-gender query failed for %s: %s", gender.value, e)
                raw = []

    return resolve_reference(raw, gender)
