"""
Fixed chart domain shared by the growth engines.
"""

from sprout.models import ChartMode, MeasurementType

# The chart always spans birth to 10 years
MAX_AGE_MONTHS = 120
YEARLY_POINTS = 11

INTERVAL_MONTHS: dict[ChartMode, int] = {
    ChartMode.YEARLY: 12,
    ChartMode.HALF_YEARLY: 6,
}

# Visible y-axis range per measure
DISPLAY_RANGE: dict[MeasurementType, tuple[float, float]] = {
    MeasurementType.WEIGHT: (0.0, 50.0),
    MeasurementType.HEIGHT: (0.0, 160.0),
}

# Reference value used when no reference sample covers an age
REFERENCE_FLOOR: dict[MeasurementType, float] = {
    MeasurementType.WEIGHT: 3.0,
    MeasurementType.HEIGHT: 50.0,
}

# Plotted below the axis minimum so a missing measurement stays invisible.
# This value exists only to keep the measured array index-aligned with the
# labels; the renderer must draw that dataset as unconnected dots.
HIDDEN_SENTINEL: dict[MeasurementType, float] = {
    MeasurementType.WEIGHT: -5.0,
    MeasurementType.HEIGHT: -20.0,
}


def clamp_to_display(value: float, value_type: MeasurementType) -> float:
    """Clamp a value into the visible range for its measure."""
    low, high = DISPLAY_RANGE[MeasurementType(value_type)]
    return max(low, min(high, value))
