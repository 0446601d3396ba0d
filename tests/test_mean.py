from decimal import Decimal

import numpy as np
import pytest

from stats_ci import (
    Confidence,
    FloatConversionError,
    Interval,
    InvalidConfidenceLevel,
    InvalidInputData,
    MeanKind,
    TooFewSamples,
    mean,
)


class TestReferenceSample:
    """Reference intervals over the 100-element sample"""

    def test_arithmetic(self, reference_sample, confidence_95):
        ci = mean.arithmetic_ci(confidence_95, reference_sample)
        assert ci.low == pytest.approx(48.0948, abs=1e-3)
        assert ci.high == pytest.approx(59.2452, abs=1e-3)

    def test_arithmetic_is_symmetric_about_mean(self, reference_sample, confidence_95):
        ci = mean.arithmetic_ci(confidence_95, reference_sample)
        assert ci.low + ci.high == pytest.approx(2 * 53.67, abs=1e-3)

    def test_geometric(self, reference_sample, confidence_95):
        ci = mean.geometric_ci(confidence_95, reference_sample)
        assert ci.low == pytest.approx(37.7311, abs=1e-3)
        assert ci.high == pytest.approx(50.6753, abs=1e-3)

    def test_harmonic(self, reference_sample, confidence_95):
        ci = mean.harmonic_ci(confidence_95, reference_sample)
        assert ci.low == pytest.approx(23.6141, abs=1e-3)
        assert ci.high == pytest.approx(41.2379, abs=1e-3)

    def test_harmonic_unbounded_above(self, confidence_95):
        ci = mean.harmonic_ci(confidence_95, [1.0, 100.0])
        assert ci.is_one_sided
        assert ci.high is None
        assert ci.low == pytest.approx(1 / (0.505 + 12.7062 * 0.495), rel=1e-3)
        assert 2 / (1.0 + 1 / 100.0) in ci

    def test_harmonic_bounded_when_reciprocal_interval_is_positive(self, harmonic_sample, confidence_95):
        assert mean.harmonic_ci(confidence_95, harmonic_sample).is_two_sided

    def test_harmonic_small_sample(self, harmonic_sample, confidence_95):
        ci = mean.harmonic_ci(confidence_95, harmonic_sample)
        assert ci.low == pytest.approx(0.245, abs=1e-3)
        assert ci.high == pytest.approx(0.852, abs=1e-3)
        assert 0.3804 in ci

    @pytest.mark.parametrize("kind", list(MeanKind))
    def test_dispatch_by_kind(self, reference_sample, confidence_95, kind):
        direct = {
            MeanKind.arithmetic: mean.ARITHMETIC,
            MeanKind.geometric: mean.GEOMETRIC,
            MeanKind.harmonic: mean.HARMONIC,
        }[kind]
        assert mean.ci(confidence_95, reference_sample, kind=kind.value) == direct.ci(confidence_95, reference_sample)

    def test_bare_float_confidence_is_two_sided(self, reference_sample, confidence_95):
        assert mean.ci(0.95, reference_sample) == mean.ci(confidence_95, reference_sample)

    def test_one_sided_is_narrower(self, reference_sample):
        two = mean.arithmetic_ci(Confidence.two_sided(0.95), reference_sample)
        one = mean.arithmetic_ci(Confidence.one_sided(0.95), reference_sample)
        assert one.width() < two.width()
        assert one.low + one.high == pytest.approx(two.low + two.high)


class TestOrdering:
    """Intervals come back ordered for every kind"""

    @pytest.mark.parametrize("kind", list(MeanKind))
    @pytest.mark.parametrize("level", [0.5, 0.9, 0.99])
    def test_low_not_above_high(self, reference_sample, kind, level):
        ci = mean.ci(level, reference_sample, kind=kind)
        assert ci.is_ordered
        assert ci.low <= ci.high

    def test_constant_sample_collapses_to_point(self):
        ci = mean.arithmetic_ci(0.95, [2.0, 2.0, 2.0, 2.0])
        assert ci.low == pytest.approx(2.0)
        assert ci.high == pytest.approx(2.0)

    def test_higher_confidence_is_wider(self, reference_sample):
        narrow = mean.arithmetic_ci(0.8, reference_sample)
        wide = mean.arithmetic_ci(0.99, reference_sample)
        assert wide.low < narrow.low
        assert narrow.high < wide.high


class TestInputs:
    """Accepted sample types and streaming behaviour"""

    def test_consumes_a_generator_once(self, reference_sample):
        ci = mean.arithmetic_ci(0.95, (x for x in reference_sample))
        assert ci == mean.arithmetic_ci(0.95, reference_sample)

    def test_integers_and_decimals(self):
        expected = mean.arithmetic_ci(0.95, [1.0, 2.0, 3.0, 4.0])
        assert mean.arithmetic_ci(0.95, [1, 2, 3, 4]) == expected
        decimals = mean.arithmetic_ci(0.95, [Decimal(1), Decimal(2), Decimal(3), Decimal(4)])
        assert decimals.low == pytest.approx(expected.low)

    def test_numpy_array(self, reference_sample):
        ci = mean.arithmetic_ci(0.95, np.asarray(reference_sample))
        assert ci.low == pytest.approx(48.0948, abs=1e-3)
        assert isinstance(ci.low, float)

    def test_float32_keeps_precision(self, reference_sample):
        data = np.asarray(reference_sample, dtype=np.float32)
        ci = mean.arithmetic_ci(0.95, data)
        assert isinstance(ci.low, np.float32)
        assert float(ci.low) == pytest.approx(48.0948, abs=1e-2)

    def test_invalid_element_stops_the_stream(self):
        consumed = []

        def stream():
            for x in [1.0, 2.0, float("nan"), 3.0, 4.0]:
                consumed.append(x)
                yield x

        with pytest.raises(InvalidInputData) as exc:
            mean.arithmetic_ci(0.95, stream())
        assert len(consumed) == 3
        assert np.isnan(exc.value.value)


class TestErrors:
    """Error taxonomy of the mean estimators"""

    @pytest.mark.parametrize("bad", [float("nan"), float("inf"), float("-inf"), "x"])
    def test_arithmetic_rejects_non_finite(self, bad):
        with pytest.raises(InvalidInputData):
            mean.arithmetic_ci(0.95, [1.0, bad, 2.0])

    @pytest.mark.parametrize("bad", [0.0, -1.0, float("nan"), float("inf")])
    @pytest.mark.parametrize("kind", [MeanKind.geometric, MeanKind.harmonic])
    def test_geometric_and_harmonic_require_positive(self, kind, bad):
        with pytest.raises(InvalidInputData):
            mean.ci(0.95, [1.0, 2.0, bad], kind=kind)

    def test_arithmetic_accepts_negative_values(self):
        ci = mean.arithmetic_ci(0.95, [-3.0, -1.0, 1.0, 3.0])
        assert 0.0 in ci

    @pytest.mark.parametrize("data", [[], [1.0]])
    def test_too_few_samples(self, data):
        with pytest.raises(TooFewSamples) as exc:
            mean.arithmetic_ci(0.95, data)
        assert exc.value.n == len(data)

    def test_invalid_confidence(self):
        with pytest.raises(InvalidConfidenceLevel):
            mean.arithmetic_ci(1.0, [1.0, 2.0, 3.0])

    def test_unknown_kind(self):
        with pytest.raises(ValueError, match="kind"):
            mean.ci(0.95, [1.0, 2.0], kind="quadratic")

    def test_float_conversion_overflow(self):
        # the t critical value for df=1 at this level does not fit in float16
        data = np.asarray([1.0, 2.0], dtype=np.float16)
        with pytest.raises(FloatConversionError, match="t-value"):
            mean.arithmetic_ci(0.99999999, data)

    def test_float_conversion_of_population(self):
        # 70000 samples exceed the largest finite float16 (65504)
        data = np.zeros(70_000, dtype=np.float16)
        with pytest.raises(FloatConversionError, match="population"):
            mean.arithmetic_ci(0.95, data)

    def test_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            mean.arithmetic_ci(0.95, [1.0])


class TestCustomTransform:
    """The generic engine accepts arbitrary transforms"""

    def test_ci_with_transforms_matches_arithmetic(self, reference_sample):
        ci = mean.ci_with_transforms(
            0.95,
            reference_sample,
            lambda x: True,
            lambda x: x,
            lambda lo, hi: (lo, hi),
        )
        assert ci == mean.arithmetic_ci(0.95, reference_sample)

    def test_order_reversing_inverse_is_reordered(self):
        ci = mean.ci_with_transforms(0.95, [1.0, 2.0, 3.0], lambda x: True, lambda x: x, lambda lo, hi: (-lo, -hi))
        assert ci.low < ci.high
        assert ci == Interval.from_pair(ci.high, ci.low)


def test_coverage_of_true_mean(rng):
    """About 95% of 95% intervals from size-10 samples contain the population mean"""
    population = rng.random(10_000)
    population_mean = float(population.mean())
    repetitions = 10_000
    confidence = Confidence.two_sided(0.95)

    hits = 0
    for _ in range(repetitions):
        sample = population[rng.integers(0, population.size, size=10)]
        if mean.arithmetic_ci(confidence, sample).contains(population_mean):
            hits += 1

    assert hits / repetitions == pytest.approx(confidence.level, abs=0.02)
