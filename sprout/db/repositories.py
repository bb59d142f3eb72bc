"""
Repository classes for database operations.

Each repository handles one table and hands back Sprout models, so the
growth engines never see raw rows.
"""

from typing import Optional, Any
from uuid import UUID

from sprout.config import get_config
from sprout.db.client import get_client, SupabaseClient
from sprout.engines.reference import ReferenceDataProvider
from sprout.models import (
  ChildProfile,
  Gender,
  Measurement,
  MeasurementType,
  ReferenceSample,
)


class BaseRepository:
  """Base class for all repositories."""

  table_name: str = ""

  def __init__(self, client: Optional[SupabaseClient] = None):
    """
    Initialize repository with optional client.

    Args:
      client: Supabase client to use. If None, gets default client.
    """
    self._client = client or get_client()

  @property
  def table(self):
    """Get the table reference."""
    return self._client.table(self.table_name)

  def _to_dict(self, obj: Any) -> dict:
    """Convert object to dict for storage."""
    if hasattr(obj, "model_dump"):
      return obj.model_dump(mode="json", exclude_none=True)
    elif isinstance(obj, dict):
      return obj
    else:
      raise ValueError(f"Cannot convert {type(obj)} to dict")


class WHOStandardRepository(BaseRepository, ReferenceDataProvider):
  """Repository for WHO reference rows."""

  table_name = "who_standards"

  def __init__(self, client: Optional[SupabaseClient] = None):
    super().__init__(client)
    self.table_name = get_config().who_table

  def get_in_range(self, gender: Gender, min_age_months: int, max_age_months: int) -> list[ReferenceSample]:
    """Get rows for a gender between two ages (inclusive)."""
    response = (
      self.table.select("*")
      .eq("gender", Gender(gender).value)
      .gte("age_in_months", min_age_months)
      .lte("age_in_months", max_age_months)
      .order("age_in_months")
      .execute()
    )
    return [ReferenceSample.from_record(row) for row in response.data or []]

  def get_by_gender(self, gender: Gender) -> list[ReferenceSample]:
    """Get every row for a gender."""
    response = (
      self.table.select("*")
      .eq("gender", Gender(gender).value)
      .order("age_in_months")
      .execute()
    )
    return [ReferenceSample.from_record(row) for row in response.data or []]

  def get_for_age(self, gender: Gender, age_in_months: int) -> Optional[ReferenceSample]:
    """Get the row for one exact age."""
    response = (
      self.table.select("*")
      .eq("gender", Gender(gender).value)
      .eq("age_in_months", age_in_months)
      .limit(1)
      .execute()
    )
    return ReferenceSample.from_record(response.data[0]) if response.data else None


class GrowthRecordRepository(BaseRepository):
  """Repository for a child's height and weight records."""

  table_name = "growth_records"

  def list_for_child(
    self,
    child_id: str | UUID,
    value_type: Optional[MeasurementType] = None,
  ) -> list[Measurement]:
    """Get a child's measurements, oldest first."""
    query = self.table.select("*").eq("child_id", str(child_id))
    if value_type:
      query = query.eq("type", MeasurementType(value_type).value)
    response = query.order("date").execute()
    return [Measurement.from_record(row) for row in response.data or []]

  def create(self, measurement: Measurement) -> Optional[Measurement]:
    """Store a new measurement."""
    data = self._to_dict(measurement)
    data.pop("id", None)
    response = self.table.insert(data).execute()
    return Measurement.from_record(response.data[0]) if response.data else None

  def update(self, measurement_id: str | UUID, **changes) -> Optional[Measurement]:
    """
    Update value, date or notes of a record.

    Returns the stored record as a new Measurement.
    """
    data = {
      key: value.isoformat() if hasattr(value, "isoformat") else value
      for key, value in changes.items()
    }
    response = self.table.update(data).eq("id", str(measurement_id)).execute()
    return Measurement.from_record(response.data[0]) if response.data else None

  def delete(self, measurement_id: str | UUID) -> bool:
    """Delete a record."""
    response = self.table.delete().eq("id", str(measurement_id)).execute()
    return len(response.data) > 0 if response.data else False


class ChildRepository(BaseRepository):
  """Repository for child profiles."""

  table_name = "children"

  def get_by_id(self, child_id: str | UUID) -> Optional[ChildProfile]:
    """Get a child profile by ID."""
    response = self.table.select("*").eq("id", str(child_id)).limit(1).execute()
    return ChildProfile.model_validate(response.data[0]) if response.data else None
