"""Analytical and bootstrap confidence intervals."""

from __future__ import annotations

import statistics

import pytest
from scipy import stats

from statbench.core.config import CIOptions
from statbench.core.names import CIMethod
from statbench.stats.methods.confidence_interval import analytical_ci, bootstrap_ci, calculate

DATA = [9.8, 10.4, 10.1, 9.5, 10.9, 10.2, 9.9, 10.6, 10.0, 10.3, 9.7, 10.5]


class TestAnalytical:
    @pytest.mark.parametrize("level", [0.9, 0.95, 0.99])
    def test_mean_interval_matches_scipy(self, level):
        ours = calculate(DATA, "mean", CIOptions(confidence_level=level))
        lower, upper = stats.t.interval(
            level, len(DATA) - 1, loc=statistics.mean(DATA), scale=stats.sem(DATA)
        )
        assert ours.method is CIMethod.ANALYTICAL
        assert ours.lower == pytest.approx(lower, rel=1e-4)
        assert ours.upper == pytest.approx(upper, rel=1e-4)
        assert ours.margin_of_error == pytest.approx((upper - lower) / 2, rel=1e-3)
        assert ours.standard_error == pytest.approx(stats.sem(DATA))

    def test_variance_interval(self):
        ours = calculate(DATA, "variance")
        s2 = statistics.variance(DATA)
        df = len(DATA) - 1
        assert ours.point_estimate == pytest.approx(s2)
        assert ours.lower == pytest.approx(df * s2 / stats.chi2.ppf(0.975, df), rel=1e-6)
        assert ours.upper == pytest.approx(df * s2 / stats.chi2.ppf(0.025, df), rel=1e-6)
        assert ours.contains(s2)

    def test_wider_at_higher_confidence(self):
        narrow = calculate(DATA, "mean", CIOptions(confidence_level=0.8))
        wide = calculate(DATA, "mean", CIOptions(confidence_level=0.99))
        assert wide.lower < narrow.lower
        assert wide.upper > narrow.upper

    def test_median_falls_back_to_bootstrap(self):
        result = analytical_ci(DATA, "median", CIOptions(iterations=500, seed=3))
        assert result.method is CIMethod.BOOTSTRAP
        assert result.seed == 3
        assert result.point_estimate == statistics.median(DATA)

    def test_constant_data(self):
        result = calculate([4.0, 4.0, 4.0], "mean")
        assert result.interval == (4.0, 4.0)

    def test_mean_needs_two_values(self):
        with pytest.raises(ValueError, match="needs at least 2"):
            calculate([1.0], "mean")

    def test_unknown_statistic(self):
        with pytest.raises(ValueError, match="Unknown statistic_kind: 'mode'"):
            calculate(DATA, "mode")


class TestBootstrap:
    def test_seeded_runs_are_reproducible(self):
        options = CIOptions(method="bootstrap", iterations=400, seed=42)
        first = calculate(DATA, "mean", options)
        second = calculate(DATA, "mean", options)
        assert first.interval == second.interval
        assert first.bootstrap_distribution == second.bootstrap_distribution

    def test_seed_and_iterations_are_recorded(self):
        result = bootstrap_ci(DATA, "mean", CIOptions(iterations=250, seed=11))
        assert result.seed == 11
        assert result.iterations == 250
        assert set(result.bootstrap_distribution) == {"mean", "sd"}
        assert result.standard_error == result.bootstrap_distribution["sd"]

    def test_generated_seed_is_recorded(self):
        result = bootstrap_ci(DATA, "mean", CIOptions(iterations=100))
        assert isinstance(result.seed, int)
        replay = bootstrap_ci(DATA, "mean", CIOptions(iterations=100, seed=result.seed))
        assert replay.interval == result.interval

    def test_interval_brackets_the_mean(self):
        result = bootstrap_ci(DATA, "mean", CIOptions(iterations=2000, seed=1))
        assert result.lower <= statistics.mean(DATA) <= result.upper
        assert min(DATA) <= result.lower <= result.upper <= max(DATA)

    def test_callable_statistic(self):
        def spread(values):
            return max(values) - min(values)

        result = calculate(DATA, spread, CIOptions(iterations=300, seed=5))
        assert result.statistic == "spread"
        assert result.method is CIMethod.BOOTSTRAP
        assert result.point_estimate == pytest.approx(max(DATA) - min(DATA))
        assert result.upper <= max(DATA) - min(DATA) + 1e-12

    def test_single_value_sample(self):
        result = bootstrap_ci([7.0], "mean", CIOptions(iterations=50, seed=0))
        assert result.interval == (7.0, 7.0)

    @pytest.mark.parametrize("iterations", [0, -5, 2.5])
    def test_iterations_must_be_positive_integer(self, iterations):
        with pytest.raises(ValueError, match="iterations must be a positive integer"):
            CIOptions(iterations=iterations)
