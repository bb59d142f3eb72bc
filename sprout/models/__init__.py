"""
Data models for Sprout.
"""

from .growth import (
    AgeResolvedPoint,
    ChartDataset,
    ChartMode,
    ChartSeries,
    ChildProfile,
    DatasetRole,
    Gender,
    GrowthAnalysis,
    GrowthChartView,
    GrowthStatus,
    GrowthSummary,
    Measurement,
    MeasurementSource,
    MeasurementType,
    ReferenceSample,
    ReferenceSource,
    SDBand,
    UNITS,
    Visibility,
    parse_iso_date,
)

__all__ = [
    "AgeResolvedPoint",
    "ChartDataset",
    "ChartMode",
    "ChartSeries",
    "ChildProfile",
    "DatasetRole",
    "Gender",
    "GrowthAnalysis",
    "GrowthChartView",
    "GrowthStatus",
    "GrowthSummary",
    "Measurement",
    "MeasurementSource",
    "MeasurementType",
    "ReferenceSample",
    "ReferenceSource",
    "SDBand",
    "UNITS",
    "Visibility",
    "parse_iso_date",
]
