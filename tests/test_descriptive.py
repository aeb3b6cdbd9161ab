"""Tests for descriptive statistics."""

import math

import numpy as np
import pytest

from heatmap_analytics.core.errors import InvalidInput
from heatmap_analytics.stats.descriptive import (
    Quartiles,
    mean,
    median,
    quartiles,
    sem,
    std,
    variance,
)


class TestCentralTendency:
    def test_mean(self):
        assert mean([1.0, 2.0, 3.0, 4.0]) == 2.5

    def test_median_odd(self):
        assert median([3.0, 1.0, 2.0]) == 2.0

    def test_median_even(self):
        assert median([4.0, 1.0, 3.0, 2.0]) == 2.5

    def test_empty_is_zero(self):
        assert mean([]) == 0.0
        assert median([]) == 0.0

    def test_does_not_mutate_input(self):
        values = [3.0, 1.0, 2.0]
        median(values)
        quartiles(values)
        assert values == [3.0, 1.0, 2.0]


class TestQuartiles:
    def test_odd_excludes_middle(self):
        assert quartiles([7, 1, 2, 3, 4, 5, 6]) == Quartiles(q1=2.0, q2=4.0, q3=6.0)

    def test_even(self):
        assert quartiles([1, 2, 3, 4, 5, 6, 7, 8]) == Quartiles(q1=2.5, q2=4.5, q3=6.5)

    def test_empty(self):
        assert quartiles([]) == Quartiles(0.0, 0.0, 0.0)

    def test_single_value(self):
        assert quartiles([5.0]) == Quartiles(0.0, 5.0, 0.0)


class TestSpread:
    def test_population_std(self):
        assert std([2, 4, 4, 4, 5, 5, 7, 9], sample=False) == pytest.approx(2.0)

    def test_sample_std(self):
        assert std([2, 4, 4, 4, 5, 5, 7, 9]) == pytest.approx(math.sqrt(32 / 7))

    def test_matches_numpy(self):
        values = np.random.default_rng(1).standard_normal(20)
        assert std(values) == pytest.approx(np.std(values, ddof=1))
        assert variance(values, sample=False) == pytest.approx(np.var(values))

    def test_empty_and_single(self):
        assert std([]) == 0.0
        assert std([3.0]) == 0.0
        assert std([3.0], sample=False) == 0.0

    def test_sem(self):
        values = [1.0, 2.0, 3.0, 4.0]
        assert sem(values) == pytest.approx(std(values) / 2.0)
        assert sem([]) == 0.0


class TestSampleValidation:
    def test_missing_values_rejected(self):
        with pytest.raises(InvalidInput, match="missing"):
            mean([1.0, float("nan")])

    def test_non_numeric_rejected(self):
        with pytest.raises(InvalidInput, match="real numbers"):
            mean([1.0, "x"])
