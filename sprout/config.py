"""
Runtime configuration for Sprout.

Values come from environment variables and are read once per process.
"""

import logging
import os
from typing import Optional

VALID_MODES = ("yearly", "half-yearly")


class GrowthConfig:
  """Configuration for growth charts and logging."""

  def __init__(self):
    self.log_level = os.environ.get("SPROUT_LOG_LEVEL", "WARNING").upper()
    self.default_mode = os.environ.get("SPROUT_DEFAULT_MODE", "yearly")
    self.who_table = os.environ.get("SPROUT_WHO_TABLE", "who_standards")

  def validate(self) -> None:
    """Raise error if the configuration is unusable."""
    if self.default_mode not in VALID_MODES:
      raise ValueError(
        f"SPROUT_DEFAULT_MODE must be one of {VALID_MODES}, got {self.default_mode!r}"
      )
    if not isinstance(logging.getLevelName(self.log_level), int):
      raise ValueError(f"Unknown SPROUT_LOG_LEVEL {self.log_level!r}")


_config: Optional[GrowthConfig] = None


def get_config() -> GrowthConfig:
  """Get the growth configuration (singleton)."""
  global _config
  if _config is None:
    _config = GrowthConfig()
    _config.validate()
  return _config


def reset_config() -> None:
  """Reset the configuration singleton (useful for testing)."""
  global _config
  _config = None


def configure_logging(level: Optional[str] = None) -> None:
  """Configure root logging for the CLI and the web server."""
  logging.basicConfig(
    level=level or get_config().log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
  )
