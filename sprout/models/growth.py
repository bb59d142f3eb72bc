"""
Core data models for growth analysis.

These Pydantic models describe measurements, WHO reference samples and the
derived chart structures. Everything except Measurement is recomputed on
every request and never persisted.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from enum import Enum
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_validator,
    model_validator,
)


def parse_iso_date(value: Any) -> date:
    """
    Coerce a date, datetime or ISO string into a calendar date.

    Timestamps such as '2024-01-15T00:00:00.000Z' keep only their date part.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value.strip()[:10])
    raise ValueError(f"Cannot interpret {value!r} as a date")


# =============================================================================
# ENUMS
# =============================================================================


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"


class MeasurementType(str, Enum):
    HEIGHT = "height"
    WEIGHT = "weight"


class MeasurementSource(str, Enum):
    DOCTOR = "doctor"
    HOME = "home"
    HOSPITAL = "hospital"
    CLINIC = "clinic"
    OTHER = "other"


class Visibility(str, Enum):
    PRIVATE = "private"
    PUBLIC = "public"


class ChartMode(str, Enum):
    YEARLY = "yearly"
    HALF_YEARLY = "half-yearly"


class DatasetRole(str, Enum):
    REFERENCE = "reference"
    MEASURED = "measured"


class ReferenceSource(str, Enum):
    PROVIDER = "provider"        # Rows returned by the reference data provider
    SYNTHESIZED = "synthesized"  # Piecewise fallback curve


class GrowthStatus(str, Enum):
    BELOW_P3 = "below_p3"
    P3_TO_P10 = "p3_to_p10"
    P10_TO_P25 = "p10_to_p25"
    P25_TO_P75 = "p25_to_p75"
    P75_TO_P90 = "p75_to_p90"
    P90_TO_P97 = "p90_to_p97"
    ABOVE_P97 = "above_p97"


UNITS: dict[MeasurementType, str] = {
    MeasurementType.HEIGHT: "cm",
    MeasurementType.WEIGHT: "kg",
}


# =============================================================================
# MEASUREMENTS
# =============================================================================


class Measurement(BaseModel):
    """
    A single height or weight measurement entered for a child.

    Instances are frozen. An edit produces a new instance through
    `revise()`, never an in-place mutation.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str | None = None
    child_id: str | None = Field(default=None, alias="childId")
    type: MeasurementType
    value: float = Field(gt=0)
    unit: str
    date: date
    source: MeasurementSource = MeasurementSource.HOME
    visibility: Visibility = Visibility.PRIVATE
    notes: str | None = None

    @field_validator("date", mode="before")
    @classmethod
    def _coerce_date(cls, value: Any) -> date:
        return parse_iso_date(value)

    def revise(self, **changes: Any) -> "Measurement":
        """Return a copy with updated value, date or notes."""
        data = self.model_dump()
        data.update(changes)
        return Measurement.model_validate(data)

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "Measurement":
        """
        Build a measurement from a raw growth record row.

        Accepts the field spellings the records API has used over time
        (`_id`/`id`, `child`/`childId`, `date`/`createdAt`).
        """
        return cls(
            id=record.get("_id") or record.get("id"),
            child_id=record.get("child") or record.get("child_id") or record.get("childId"),
            type=record["type"],
            value=record["value"],
            unit=record.get("unit") or UNITS[MeasurementType(record["type"])],
            date=record.get("date") or record.get("createdAt") or record.get("created_at"),
            source=record.get("source") or MeasurementSource.HOME,
            visibility=record.get("visibility") or Visibility.PRIVATE,
            notes=record.get("notes"),
        )


class AgeResolvedPoint(BaseModel):
    """A measurement value placed on the age axis."""
    value: float
    age_in_months: int
    date: date


# =============================================================================
# WHO REFERENCE DATA
# =============================================================================


class SDBand(BaseModel):
    """Mean and +/-2 standard deviation bounds for one measure at one age."""
    model_config = ConfigDict(populate_by_name=True)

    minus_2sd: float = Field(default=0, alias="minus2SD")
    mean: float = 0
    plus_2sd: float = Field(default=0, alias="plus2SD")

    @property
    def is_ordered(self) -> bool:
        return self.minus_2sd < self.mean < self.plus_2sd


class ReferenceSample(BaseModel):
    """A WHO reference row: weight and height bands for an age and gender."""
    model_config = ConfigDict(populate_by_name=True)

    id: str | None = None
    age: str | None = None
    age_in_months: int = Field(alias="ageInMonths")
    gender: Gender
    weight: SDBand
    height: SDBand

    def band(self, value_type: MeasurementType | str) -> SDBand:
        """Get the SD band for height or weight."""
        if MeasurementType(value_type) == MeasurementType.HEIGHT:
            return self.height
        return self.weight

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "ReferenceSample":
        """
        Build a reference sample from a provider row.

        Rows come either nested (`weight.mean`) or flat (`weightMean`,
        `weightMinus2SD`, ...). Missing numbers become 0.
        """
        def _pick(*values: Any) -> float:
            for value in values:
                if value is not None:
                    return value
            return 0

        def _band(prefix: str) -> SDBand:
            nested = record.get(prefix) or {}
            return SDBand(
                minus_2sd=_pick(nested.get("minus2SD"), record.get(f"{prefix}Minus2SD")),
                mean=_pick(nested.get("mean"), record.get(f"{prefix}Mean")),
                plus_2sd=_pick(nested.get("plus2SD"), record.get(f"{prefix}Plus2SD")),
            )

        age_in_months = record.get("ageInMonths", record.get("age_in_months"))
        if age_in_months is None:
            # Older rows only carry a label such as "24 months"
            match = re.match(r"\s*(\d+)", str(record.get("age") or ""))
            age_in_months = int(match.group(1)) if match else 0

        return cls(
            id=record.get("_id") or record.get("id"),
            age=record.get("age"),
            age_in_months=int(age_in_months),
            gender=record.get("gender") or Gender.MALE,
            weight=_band("weight"),
            height=_band("height"),
        )


# =============================================================================
# CHILD PROFILE
# =============================================================================


class ChildProfile(BaseModel):
    """The slice of a child profile that growth analysis needs."""
    model_config = ConfigDict(populate_by_name=True)

    id: str | None = None
    name: str | None = None
    birth_date: date | None = Field(default=None, alias="birthDate")
    gender: Gender = Gender.MALE
    age_in_months: int = Field(default=0, ge=0, alias="ageInMonths")

    @field_validator("gender", mode="before")
    @classmethod
    def _default_gender(cls, value: Any) -> Gender:
        try:
            return Gender(value)
        except ValueError:
            return Gender.MALE

    @field_validator("birth_date", mode="before")
    @classmethod
    def _coerce_birth_date(cls, value: Any) -> date | None:
        if value in (None, ""):
            return None
        return parse_iso_date(value)


# =============================================================================
# CHART STRUCTURES
# =============================================================================


class ChartDataset(BaseModel):
    """One positional series on the chart, tagged with its role."""
    data: list[float]
    role: DatasetRole


class ChartSeries(BaseModel):
    """Labels plus role-tagged datasets, aligned by index."""
    labels: list[str]
    datasets: list[ChartDataset] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_alignment(self) -> "ChartSeries":
        for dataset in self.datasets:
            if len(dataset.data) != len(self.labels):
                raise ValueError(
                    f"{dataset.role.value} dataset has {len(dataset.data)} values "
                    f"for {len(self.labels)} labels"
                )
        return self

    def dataset(self, role: DatasetRole) -> ChartDataset | None:
        for dataset in self.datasets:
            if dataset.role == role:
                return dataset
        return None

    @property
    def reference(self) -> ChartDataset | None:
        return self.dataset(DatasetRole.REFERENCE)

    @property
    def measured(self) -> ChartDataset | None:
        return self.dataset(DatasetRole.MEASURED)

    @property
    def has_measurements(self) -> bool:
        return self.measured is not None


# =============================================================================
# ANALYSIS
# =============================================================================


class GrowthAnalysis(BaseModel):
    """Classification of one measurement against its WHO reference row."""
    child_value: float
    child_age_in_months: int
    child_gender: Gender
    value_type: MeasurementType
    reference: ReferenceSample
    percentile: int
    status: GrowthStatus
    recommendation: str | None = None

    # Continuous estimate from the SD band, reported next to the band result
    z_score: float | None = None
    estimated_percentile: float | None = None


class GrowthSummary(BaseModel):
    """Trivial projections shown under the chart."""
    latest_value: float | None = None
    measurement_count: int = 0
    mode: ChartMode
    unit: str


class GrowthChartView(BaseModel):
    """Everything the chart layer renders for one child and one measure."""
    value_type: MeasurementType
    mode: ChartMode
    gender: Gender
    series: ChartSeries
    points: list[AgeResolvedPoint] = Field(default_factory=list)
    analysis: GrowthAnalysis | None = None
    summary: GrowthSummary
    reference_source: ReferenceSource
    axis_min: float
    axis_max: float

    @computed_field
    @property
    def reference_available(self) -> bool:
        """False when the curve had to be synthesized."""
        return self.reference_source == ReferenceSource.PROVIDER

    @computed_field
    @property
    def measured_available(self) -> bool:
        return self.series.has_measurements

    @computed_field
    @property
    def empty_state(self) -> bool:
        """True when there is nothing of the child's to plot."""
        return not self.series.has_measurements
