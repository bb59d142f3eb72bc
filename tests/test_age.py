"""
Tests for age resolution.
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest
from datetime import date, datetime


class TestMonthsBetween:
    """Test whole-month arithmetic."""

    def test_day_not_reached_borrows_a_month(self):
        from sprout.engines.age import months_between

        assert months_between(date(2023, 2, 15), date(2024, 1, 10)) == 10

    def test_day_reached_counts_the_month(self):
        from sprout.engines.age import months_between

        assert months_between(date(2023, 2, 15), date(2024, 1, 15)) == 11

    def test_exact_year(self):
        from sprout.engines.age import months_between

        assert months_between(date(2023, 1, 15), date(2024, 1, 15)) == 12

    def test_never_negative(self):
        from sprout.engines.age import months_between

        assert months_between(date(2024, 5, 1), date(2024, 1, 1)) == 0

    def test_subtract_months_clamps_day(self):
        from sprout.engines.age import subtract_months

        assert subtract_months(date(2024, 3, 31), 1) == date(2024, 2, 29)
        assert subtract_months(date(2024, 1, 15), 13) == date(2022, 12, 15)


class TestResolveAge:
    """Test resolve_age_in_months."""

    def test_with_birth_date(self):
        from sprout.engines import resolve_age_in_months

        assert resolve_age_in_months(date(2024, 1, 10), date(2023, 2, 15)) == 10

    def test_accepts_iso_strings_and_datetimes(self):
        from sprout.engines import resolve_age_in_months

        assert resolve_age_in_months("2024-01-10T08:30:00Z", "2023-02-15") == 10
        assert resolve_age_in_months(datetime(2024, 1, 10, 9, 0), date(2023, 2, 15)) == 10

    def test_measurement_before_birth_is_zero(self):
        from sprout.engines import resolve_age_in_months

        assert resolve_age_in_months(date(2020, 1, 1), date(2023, 1, 1)) == 0

    def test_saturates_at_ten_years(self):
        from sprout.engines import resolve_age_in_months

        assert resolve_age_in_months(date(2024, 6, 1), date(2010, 1, 1)) == 120

    def test_estimates_birth_from_current_age(self):
        from sprout.engines import resolve_age_in_months

        # 24 months old on 2024-06-01 -> born 2022-06-01
        age = resolve_age_in_months(
            date(2023, 6, 1),
            birth_date=None,
            fallback_age_in_months=24,
            today=date(2024, 6, 1),
        )
        assert age == 12

    def test_estimate_with_zero_age(self):
        from sprout.engines import resolve_age_in_months

        age = resolve_age_in_months(date(2024, 6, 1), None, 0, today=date(2024, 6, 1))
        assert age == 0

    def test_invalid_date_raises(self):
        from sprout.engines import resolve_age_in_months

        with pytest.raises(ValueError):
            resolve_age_in_months("not-a-date", date(2023, 1, 1))


class TestResolvePoints:
    """Test age resolution of measurement lists."""

    def test_filters_by_type_and_sorts(self):
        from sprout.models import Measurement, MeasurementType
        from sprout.engines import resolve_points

        measurements = [
            Measurement(type="weight", value=10.5, unit="kg", date=date(2024, 7, 15)),
            Measurement(type="height", value=75.0, unit="cm", date=date(2024, 1, 15)),
            Measurement(type="weight", value=9.8, unit="kg", date=date(2024, 1, 15)),
        ]
        points = resolve_points(measurements, MeasurementType.WEIGHT, birth_date=date(2023, 1, 15))

        assert [p.value for p in points] == [9.8, 10.5]
        assert [p.age_in_months for p in points] == [12, 18]

    def test_no_measurements(self):
        from sprout.engines import resolve_points

        assert resolve_points([], "height", birth_date=date(2023, 1, 15)) == []


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
