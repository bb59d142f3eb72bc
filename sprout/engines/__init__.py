"""
Growth analysis engines.
"""

from .age import resolve_age_in_months, resolve_points
from .reference import (
    ReferenceDataProvider,
    ReferenceResolution,
    StaticReferenceProvider,
    load_reference_samples,
    normalize_reference_samples,
    resolve_reference,
    synthesize_reference_series,
)
from .aligner import align_series, reference_curve
from .classifier import (
    classify_measurement,
    find_reference_row,
    status_for_percentile,
    status_label,
)
from .assembler import assemble_growth_chart

__all__ = [
    "resolve_age_in_months",
    "resolve_points",
    "ReferenceDataProvider",
    "ReferenceResolution",
    "StaticReferenceProvider",
    "load_reference_samples",
    "normalize_reference_samples",
    "resolve_reference",
    "synthesize_reference_series",
    "align_series",
    "reference_curve",
    "classify_measurement",
    "find_reference_row",
    "status_for_percentile",
    "status_label",
    "assemble_growth_chart",
]
