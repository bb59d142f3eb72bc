"""
Tests for WHO reference normalization and synthesis.
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest


def make_sample(age_in_months, gender="male", weight_mean=10.0, height_mean=75.0):
    from sprout.models import ReferenceSample, SDBand

    return ReferenceSample(
        id=f"{gender}-{age_in_months}",
        age_in_months=age_in_months,
        gender=gender,
        weight=SDBand(minus_2sd=weight_mean * 0.8, mean=weight_mean, plus_2sd=weight_mean * 1.2),
        height=SDBand(minus_2sd=height_mean * 0.9, mean=height_mean, plus_2sd=height_mean * 1.1),
    )


class TestNormalization:
    """Test reduction of raw rows to yearly checkpoints."""

    def test_monthly_source_reduces_to_eleven(self):
        from sprout.engines import normalize_reference_samples

        raw = [make_sample(age, weight_mean=3 + age * 0.2) for age in range(0, 121)]
        samples = normalize_reference_samples(raw, "male")

        assert len(samples) == 11
        assert [s.age_in_months for s in samples] == list(range(0, 121, 12))

    def test_filters_gender_and_age_range(self):
        from sprout.engines import normalize_reference_samples

        raw = [make_sample(age) for age in range(0, 145, 12)]
        raw += [make_sample(age, gender="female") for age in range(0, 121, 12)]
        samples = normalize_reference_samples(raw, "male")

        assert len(samples) == 11
        assert all(s.gender.value == "male" for s in samples)
        assert max(s.age_in_months for s in samples) == 120

    def test_sparse_irregular_rows_keep_only_checkpoints(self):
        from sprout.engines import normalize_reference_samples

        raw = [make_sample(age) for age in (0, 6, 12, 30, 48)]
        samples = normalize_reference_samples(raw, "male")

        assert [s.age_in_months for s in samples] == [0, 12, 48]

    def test_duplicate_ages_first_wins(self):
        from sprout.engines import normalize_reference_samples

        raw = [make_sample(12, weight_mean=9.9), make_sample(12, weight_mean=11.0), make_sample(0)]
        samples = normalize_reference_samples(raw, "male")

        assert [s.age_in_months for s in samples] == [0, 12]
        assert samples[1].weight.mean == 9.9

    def test_unsorted_input_is_sorted(self):
        from sprout.engines import normalize_reference_samples

        raw = [make_sample(age) for age in (48, 0, 24)]
        assert [s.age_in_months for s in normalize_reference_samples(raw, "male")] == [0, 24, 48]

    def test_empty_source_is_synthesized(self):
        from sprout.engines import normalize_reference_samples

        samples = normalize_reference_samples([], "female")

        assert len(samples) == 11
        assert all(s.id.startswith("synthetic-female-") for s in samples)

    def test_no_yearly_rows_is_synthesized(self):
        from sprout.engines import resolve_reference
        from sprout.models import ReferenceSource

        resolution = resolve_reference([make_sample(6), make_sample(18)], "male")

        assert resolution.source == ReferenceSource.SYNTHESIZED
        assert len(resolution.samples) == 11


class TestSynthesis:
    """Test the approximate WHO curve."""

    @pytest.mark.parametrize("gender", ["male", "female"])
    def test_eleven_ordered_points(self, gender):
        from sprout.engines import synthesize_reference_series

        samples = synthesize_reference_series(gender)

        assert [s.age_in_months for s in samples] == list(range(0, 121, 12))
        for s in samples:
            assert s.weight.is_ordered
            assert s.height.is_ordered
            assert s.weight.mean > 0
            assert s.height.mean > 0

    def test_curve_increases_with_age(self):
        from sprout.engines import synthesize_reference_series

        samples = synthesize_reference_series("male")
        weights = [s.weight.mean for s in samples]
        heights = [s.height.mean for s in samples]

        assert weights == sorted(weights)
        assert heights == sorted(heights)

    def test_known_values(self):
        from knowledge.growth import synthetic_band, synthetic_mean

        assert synthetic_mean(0, "weight", "male") == pytest.approx(3.3)
        assert synthetic_mean(12, "weight", "male") == pytest.approx(9.9)
        assert synthetic_mean(24, "height", "female") == pytest.approx(86.3)

        low, mean, high = synthetic_band(12, "weight", "male")
        assert mean == 9.9
        assert low < mean < high

    def test_labels(self):
        from sprout.engines import synthesize_reference_series

        samples = synthesize_reference_series("male")
        assert samples[0].age == "0 years"
        assert samples[-1].age == "10 years"


class FailingProvider:
    """Provider whose queries always fail."""

    def get_in_range(self, gender, min_age_months, max_age_months):
        raise ConnectionError("network unreachable")

    def get_by_gender(self, gender):
        raise ConnectionError("network unreachable")


class TestProviderFallback:
    """Test load_reference_samples fallback chain."""

    def test_range_query_used_first(self):
        from sprout.engines import StaticReferenceProvider, load_reference_samples
        from sprout.models import ReferenceSource

        provider = StaticReferenceProvider([make_sample(age) for age in range(0, 121, 12)])
        resolution = load_reference_samples(provider, "male")

        assert resolution.source == ReferenceSource.PROVIDER
        assert len(resolution.samples) == 11

    def test_empty_range_falls_back_to_gender_query(self):
        from sprout.engines import load_reference_samples
        from sprout.models import ReferenceSource

        class GenderOnlyProvider(FailingProvider):
            def get_in_range(self, gender, min_age_months, max_age_months):
                return []

            def get_by_gender(self, gender):
                return [make_sample(age) for age in range(0, 121, 12)]

        resolution = load_reference_samples(GenderOnlyProvider(), "male")

        assert resolution.source == ReferenceSource.PROVIDER
        assert resolution.samples[0].id == "male-0"

    def test_failing_provider_synthesizes(self):
        from sprout.engines import load_reference_samples

        resolution = load_reference_samples(FailingProvider(), "male")

        assert resolution.synthesized
        assert len(resolution.samples) == 11

    def test_no_provider_synthesizes(self):
        from sprout.engines import load_reference_samples

        assert load_reference_samples(None, "female").synthesized


class TestRecordParsing:
    """Test ReferenceSample.from_record."""

    def test_flat_row(self):
        from sprout.models import ReferenceSample

        sample = ReferenceSample.from_record({
            "_id": "abc",
            "age": "12 months",
            "ageInMonths": 12,
            "gender": "female",
            "weightMinus2SD": 7.0,
            "weightMean": 8.9,
            "weightPlus2SD": 11.5,
            "heightMinus2SD": 68.9,
            "heightMean": 74.0,
            "heightPlus2SD": 79.2,
        })

        assert sample.id == "abc"
        assert sample.weight.mean == 8.9
        assert sample.height.plus_2sd == 79.2

    def test_nested_row_with_age_label_only(self):
        from sprout.models import ReferenceSample

        sample = ReferenceSample.from_record({
            "age": "24 months",
            "gender": "male",
            "weight": {"minus2SD": 9.7, "mean": 12.2, "plus2SD": 15.3},
            "height": {"minus2SD": 81.7, "mean": 87.8, "plus2SD": 93.9},
        })

        assert sample.age_in_months == 24
        assert sample.weight.minus_2sd == 9.7

    def test_nested_zero_is_kept(self):
        from sprout.models import ReferenceSample

        sample = ReferenceSample.from_record({
            "ageInMonths": 0,
            "gender": "male",
            "weight": {"minus2SD": 0, "mean": 3.3, "plus2SD": 4.4},
            "weightMinus2SD": 2.1,
        })

        assert sample.weight.minus_2sd == 0
        assert sample.weight.mean == 3.3

    def test_flat_key_used_when_nested_missing(self):
        from sprout.models import ReferenceSample

        sample = ReferenceSample.from_record({
            "ageInMonths": 0,
            "gender": "male",
            "weight": {"mean": 3.3},
            "weightMinus2SD": 2.1,
        })

        assert sample.weight.minus_2sd == 2.1
        assert sample.weight.plus_2sd == 0

    def test_missing_numbers_become_zero(self):
        from sprout.models import ReferenceSample

        sample = ReferenceSample.from_record({"ageInMonths": 0, "gender": "male"})
        assert sample.weight.mean == 0
        assert sample.height.mean == 0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
