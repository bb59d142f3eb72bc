"""
Growth reference knowledge.
"""

from .who_synthetic import (
    synthetic_band,
    synthetic_mean,
    GrowthBracket,
    GrowthModel,
)

__all__ = [
    "synthetic_band",
    "synthetic_mean",
    "GrowthBracket",
    "GrowthModel",
]
