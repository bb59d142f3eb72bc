"""
Database module for Sprout.

Provides Supabase client and repository classes for data access.
"""

from sprout.db.client import get_client, is_configured, reset_clients, SupabaseClient
from sprout.db.repositories import (
  ChildRepository,
  GrowthRecordRepository,
  WHOStandardRepository,
)

__all__ = [
  "get_client",
  "reset_clients",
  "is_configured",
  "SupabaseClient",
  "ChildRepository",
  "GrowthRecordRepository",
  "WHOStandardRepository",
]
