"""Normality and equality-of-variance diagnostics."""

from __future__ import annotations

import math
import random

import pytest
from scipy import stats

from statbench.core.config import LeveneOptions
from statbench.core.names import TestKind
from statbench.stats.methods import normality, variance


def _gaussian(n, seed):
    rng = random.Random(seed)
    return [rng.gauss(10.0, 2.0) for _ in range(n)]


def _exponential(n, seed):
    rng = random.Random(seed)
    return [rng.expovariate(1.0) for _ in range(n)]


class TestShapiroWilk:
    @pytest.mark.parametrize(
        "data",
        [
            [2.1, 3.7, 3.1],
            [4.4, 3.9, 5.1, 4.0, 4.8],
            _gaussian(8, 1),
            _exponential(10, 2),
            _gaussian(20, 3),
            _exponential(40, 4),
            _gaussian(150, 5),
        ],
    )
    def test_matches_scipy(self, data):
        ours = normality.shapiro_wilk(data)
        ref = stats.shapiro(data)
        assert ours.test is TestKind.SHAPIRO_WILK
        assert ours.statistic == pytest.approx(ref.statistic, abs=1e-4)
        assert ours.p_value == pytest.approx(ref.pvalue, abs=2e-3)

    def test_skewed_sample_is_rejected(self):
        data = [0.1, 0.2, 0.2, 0.3, 0.3, 0.4, 0.5, 0.6, 0.9, 1.5, 2.8, 6.0, 14.0, 31.0]
        result = normality.shapiro_wilk(data)
        assert not result.is_normal
        assert result.p_value < 0.05
        assert "departs from normality" in result.interpretation

    def test_constant_data(self):
        result = normality.shapiro_wilk([4.0] * 6)
        assert (result.statistic, result.p_value, result.is_normal) == (1.0, 1.0, True)

    def test_statistic_is_bounded(self):
        result = normality.shapiro_wilk(_exponential(60, 9))
        assert 0.0 < result.statistic <= 1.0
        assert 0.0 <= result.p_value <= 1.0

    @pytest.mark.parametrize("n", [2, 5001])
    def test_sample_size_bounds(self, n):
        with pytest.raises(ValueError, match=f"requires 3 <= n <= 5000, got n = {n}"):
            normality.shapiro_wilk([float(i) for i in range(n)])

    def test_coefficients_are_antisymmetric_unit_vector(self):
        a = normality.shapiro_wilk_coefficients(12)
        assert math.fsum(x * x for x in a) == pytest.approx(1.0, abs=1e-6)
        assert a == pytest.approx([-x for x in reversed(a)])


class TestNormalityScreens:
    def test_quick_check_flags_skew(self):
        check = normality.quick_check([1.0] * 9 + [100.0])
        assert not check["is_normal"]
        assert not check["skew_ok"]
        assert "high skewness" in check["reason"]

    def test_quick_check_small_sample(self):
        check = normality.quick_check([1.0, 50.0])
        assert check["is_normal"]
        assert check["skewness"] is None

    def test_quick_check_ignores_undefined_kurtosis(self):
        check = normality.quick_check([1.0, 2.0, 3.5])
        assert check["kurtosis"] is None
        assert check["kurt_ok"]

    def test_assess_normal_sample(self):
        report = normality.assess_normality(_gaussian(40, 11))
        assert report["n"] == 40
        assert report["shapiro_wilk"] is not None
        assert report["is_normal"]
        assert len(report["tests_passed"]) + len(report["tests_failed"]) == 3

    def test_assess_skewed_sample(self):
        report = normality.assess_normality([1.0] * 19 + [100.0])
        assert not report["is_normal"]
        assert "non-parametric" in report["recommendation"]

    def test_assess_skips_undefined_moments(self):
        report = normality.assess_normality([1.0, 2.0, 4.0])
        assert report["kurtosis"] is None
        assert len(report["tests_passed"]) + len(report["tests_failed"]) == 2

    def test_assess_needs_three_values(self):
        with pytest.raises(ValueError, match="needs at least 3"):
            normality.assess_normality([1.0, 2.0])


class TestLevene:
    GROUPS = [
        [8.9, 10.2, 9.7, 11.4, 10.1, 9.3],
        [7.1, 12.8, 9.0, 13.9, 6.2, 11.5, 10.4],
        [10.0, 10.3, 9.8, 10.1, 9.9],
    ]

    @pytest.mark.parametrize("center", ["median", "mean"])
    def test_matches_scipy(self, center):
        ours = variance.levene_test(self.GROUPS, LeveneOptions(center=center))
        ref = stats.levene(*self.GROUPS, center=center)
        assert ours.test is TestKind.LEVENE
        assert ours.statistic == pytest.approx(ref.statistic, rel=1e-9)
        assert ours.p_value == pytest.approx(ref.pvalue, abs=1e-8)
        assert (ours.df1, ours.df2) == (2, 15)
        assert ours.metadata["center"] == center

    def test_constant_group_against_spread_group(self):
        result = variance.levene_test([[5, 5, 5, 5], [1, 10, 2, 9]])
        assert not result.equal_variances
        assert result.p_value < 0.05

    def test_shifted_groups_have_equal_variances(self):
        result = variance.levene_test([[1, 2, 3, 4], [2, 3, 4, 5]])
        assert result.statistic == 0.0
        assert result.equal_variances

    def test_all_groups_constant(self):
        result = variance.levene_test([[1, 1, 1], [2, 2, 2]])
        assert (result.statistic, result.p_value) == (0.0, 1.0)

    def test_groups_need_two_observations(self):
        with pytest.raises(ValueError, match="group 2 needs at least 2"):
            variance.levene_test([[1, 2, 3], [4]])


class TestFTest:
    def test_matches_two_sided_f_distribution(self):
        a = [20.1, 22.4, 19.8, 25.0, 21.7, 23.3]
        b = [20.9, 21.2, 21.0, 20.7, 21.4, 21.1, 20.8]
        result = variance.f_test(a, b)
        var_a, var_b = stats.tvar(a), stats.tvar(b)
        expected_f = var_a / var_b
        assert result.test is TestKind.F_TEST
        assert result.statistic == pytest.approx(expected_f)
        assert (result.df1, result.df2) == (5, 6)
        assert result.p_value == pytest.approx(
            min(1.0, 2 * stats.f.sf(expected_f, 5, 6)), abs=1e-8
        )
        assert not result.equal_variances

    def test_statistic_is_at_least_one(self):
        result = variance.f_test([1, 2, 3, 4], [1, 3, 5, 7, 9])
        assert result.statistic >= 1.0
        assert (result.df1, result.df2) == (4, 3)

    def test_one_constant_group(self):
        result = variance.f_test([5, 5, 5, 5], [1, 10, 2, 9])
        assert (result.statistic, result.p_value) == (math.inf, 0.0)
        assert not result.equal_variances

    def test_both_groups_constant(self):
        result = variance.f_test([5, 5, 5], [7, 7])
        assert (result.statistic, result.p_value) == (1.0, 1.0)
        assert result.equal_variances

    def test_quick_check(self):
        assert variance.quick_check([1, 2, 3, 4], [1.5, 3.0, 4.5, 6.0])["equal_variances"]
        wide = variance.quick_check([1, 2, 3, 4], [1, 10, 20, 40])
        assert not wide["equal_variances"]
        assert wide["ratio"] < 0.25

    def test_quick_check_constant_groups(self):
        assert variance.quick_check([3, 3], [4, 4])["ratio"] == 1.0
        assert variance.quick_check([1, 2], [4, 4])["ratio"] == math.inf
