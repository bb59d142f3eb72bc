"""
Integration tests for Sprout.
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest
from datetime import date


class TestModels:
    """Test data models."""

    def test_measurement_creation(self):
        from sprout.models import Measurement, MeasurementSource, MeasurementType, Visibility

        m = Measurement(type="weight", value=9.8, unit="kg", date="2024-01-15T00:00:00.000Z")

        assert m.type == MeasurementType.WEIGHT
        assert m.date == date(2024, 1, 15)
        assert m.source == MeasurementSource.HOME
        assert m.visibility == Visibility.PRIVATE

    def test_measurement_is_immutable(self):
        from pydantic import ValidationError
        from sprout.models import Measurement

        m = Measurement(type="weight", value=9.8, unit="kg", date=date(2024, 1, 15))

        with pytest.raises(ValidationError):
            m.value = 10.0

        revised = m.revise(value=10.1, notes="after lunch")
        assert revised.value == 10.1
        assert revised.notes == "after lunch"
        assert m.value == 9.8

    def test_measurement_value_must_be_positive(self):
        from pydantic import ValidationError
        from sprout.models import Measurement

        with pytest.raises(ValidationError):
            Measurement(type="height", value=0, unit="cm", date=date(2024, 1, 15))

    def test_measurement_from_record_aliases(self):
        from sprout.models import Measurement

        m = Measurement.from_record({
            "_id": "rec-1",
            "child": "child-1",
            "type": "height",
            "value": 76.2,
            "createdAt": "2024-01-15T10:20:00.000Z",
            "source": "doctor",
        })

        assert m.id == "rec-1"
        assert m.child_id == "child-1"
        assert m.unit == "cm"
        assert m.date == date(2024, 1, 15)
        assert m.source.value == "doctor"

    def test_child_profile_defaults(self):
        from sprout.models import ChildProfile, Gender

        child = ChildProfile.model_validate({"birthDate": "", "gender": "unknown", "ageInMonths": 18})

        assert child.birth_date is None
        assert child.gender == Gender.MALE
        assert child.age_in_months == 18


def _weight(value, on):
    from sprout.models import Measurement

    return Measurement(type="weight", value=value, unit="kg", date=on)


class TestGrowthChart:
    """End-to-end chart assembly."""

    def test_single_measurement_at_one_year(self):
        from sprout.models import ChildProfile, GrowthStatus
        from sprout.engines import assemble_growth_chart

        child = ChildProfile(birth_date=date(2023, 1, 15), gender="male")
        view = assemble_growth_chart(
            [_weight(9.8, date(2024, 1, 15))],
            child,
            "weight",
            mode="yearly",
            reference_samples=[],
        )

        assert view.points[0].age_in_months == 12
        assert len(view.series.labels) == 11
        assert view.series.labels[1] == "1y"

        measured = view.series.measured.data
        assert measured[1] == 9.8
        assert all(v == -5.0 for i, v in enumerate(measured) if i != 1)

        assert view.analysis.percentile == 50
        assert view.analysis.status == GrowthStatus.P25_TO_P75
        assert view.summary.latest_value == 9.8
        assert view.summary.measurement_count == 1
        assert view.summary.unit == "kg"
        assert not view.empty_state

    def test_no_measurements_and_no_reference(self):
        from sprout.models import ChildProfile, ReferenceSource
        from sprout.engines import assemble_growth_chart

        child = ChildProfile(birth_date=date(2022, 5, 1), gender="female")
        view = assemble_growth_chart([], child, "height", reference_samples=[])

        assert view.empty_state
        assert view.series.measured is None
        assert view.analysis is None
        assert view.summary.latest_value is None
        assert view.reference_source == ReferenceSource.SYNTHESIZED
        assert not view.reference_available

        reference = view.series.reference.data
        assert len(reference) == 11
        assert reference == sorted(reference)

    def test_other_type_measurements_ignored(self):
        from sprout.models import ChildProfile, Measurement
        from sprout.engines import assemble_growth_chart

        child = ChildProfile(birth_date=date(2023, 1, 15))
        heights = [Measurement(type="height", value=75.0, unit="cm", date=date(2024, 1, 15))]
        view = assemble_growth_chart(heights, child, "weight", reference_samples=[])

        assert view.empty_state

    def test_latest_measurement_is_analyzed(self):
        from sprout.models import ChildProfile
        from sprout.engines import assemble_growth_chart

        child = ChildProfile(birth_date=date(2023, 1, 15))
        measurements = [_weight(14.0, date(2026, 1, 20)), _weight(9.8, date(2024, 1, 15))]
        view = assemble_growth_chart(measurements, child, "weight", reference_samples=[])

        assert view.analysis.child_value == 14.0
        assert view.analysis.child_age_in_months == 36
        assert view.analysis.reference.age_in_months == 36

    def test_half_yearly_mode(self):
        from sprout.models import ChildProfile
        from sprout.engines import assemble_growth_chart

        child = ChildProfile(birth_date=date(2023, 1, 15))
        view = assemble_growth_chart(
            [_weight(8.0, date(2023, 7, 15))], child, "weight", mode="half-yearly", reference_samples=[]
        )

        assert len(view.series.labels) == 21
        assert view.series.labels[1] == "0.5y"
        assert view.series.measured.data[1] == 8.0
        for dataset in view.series.datasets:
            assert len(dataset.data) == 21

    def test_unknown_birth_date_uses_current_age(self):
        from sprout.models import ChildProfile
        from sprout.engines import assemble_growth_chart

        child = ChildProfile(age_in_months=24)
        view = assemble_growth_chart(
            [_weight(9.8, date(2023, 6, 1))],
            child,
            "weight",
            reference_samples=[],
            today=date(2024, 6, 1),
        )

        assert view.points[0].age_in_months == 12

    def test_provider_reference_used(self):
        from sprout.models import ChildProfile, ReferenceSample, ReferenceSource, SDBand
        from sprout.engines import StaticReferenceProvider, assemble_growth_chart

        rows = [
            ReferenceSample(
                age_in_months=age,
                gender="male",
                weight=SDBand(minus_2sd=2.5 + age * 0.15, mean=3.5 + age * 0.2, plus_2sd=4.5 + age * 0.25),
                height=SDBand(minus_2sd=46 + age * 0.6, mean=50 + age * 0.7, plus_2sd=54 + age * 0.8),
            )
            for age in range(0, 121)
        ]
        child = ChildProfile(birth_date=date(2023, 1, 15))
        view = assemble_growth_chart(
            [_weight(9.8, date(2024, 1, 15))],
            child,
            "weight",
            provider=StaticReferenceProvider(rows),
        )

        assert view.reference_source == ReferenceSource.PROVIDER
        assert view.reference_available
        assert view.series.reference.data[1] == pytest.approx(5.9)
        # 9.8 is above +2SD (7.5) at 12 months
        assert view.analysis.percentile == 100


class TestPackaging:
    """Test project metadata."""

    def test_readme_declared_and_present(self):
        root = Path(__file__).parent.parent
        pyproject = (root / "pyproject.toml").read_text()

        assert 'readme = "README.md"' in pyproject
        assert (root / "README.md").exists()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
