"""
Tests for the window statistics helpers.
"""

import math

import pytest

from air_indices.stats import mean, pearson, std


class TestMeanAndStd:

    def test_empty_inputs_fall_back_to_zero(self):
        assert mean([]) == 0
        assert std([]) == 0

    def test_mean(self):
        assert mean([1.0, 2.0, 3.0, 4.0]) == pytest.approx(2.5)

    def test_std_is_population(self):
        """Divides by N, not N-1."""
        assert std([2, 4, 4, 4, 5, 5, 7, 9]) == pytest.approx(2.0)

    def test_std_single_value(self):
        assert std([42.0]) == 0.0


class TestPearson:

    @pytest.mark.parametrize("a, b", [
        ([], []),
        ([1.0, 2.0], []),
        ([1.0, 2.0, 3.0], [1.0, 2.0]),
        ([1.0], [1.0]),
    ])
    def test_degenerate_inputs_return_zero(self, a, b):
        assert pearson(a, b) == 0

    def test_zero_variance_returns_zero(self):
        r = pearson([5.0, 5.0, 5.0], [1.0, 2.0, 3.0])
        assert r == 0
        assert not math.isnan(r)

    def test_identical_series(self):
        a = [3.1, 4.7, 1.2, 9.9, 5.5]
        assert round(pearson(a, list(a)), 3) == 1.0

    def test_negated_series(self):
        a = [3.1, 4.7, 1.2, 9.9, 5.5]
        assert round(pearson(a, [-v for v in a]), 3) == -1.0

    def test_known_value(self):
        assert pearson([1, 2, 3], [1, 2, 4]) == pytest.approx(0.98198, abs=1e-4)
