"""Effect sizes and their interpretation bands."""

from __future__ import annotations

import math
import statistics

import pytest
from hypothesis import given, strategies as st

from statbench.core.config import EffectSizeOptions
from statbench.stats.methods import effect_size as es

G1 = [4, 4.5, 5, 5.5, 6]
G2 = [5, 5.5, 6, 6.5, 7]


class TestCohensD:
    def test_sign_follows_first_minus_second(self):
        result = es.cohens_d(G1, G2)
        # both groups have sd sqrt(0.625), so d = -1 / sqrt(0.625)
        assert result["cohens_d"] == pytest.approx(-1.0 / math.sqrt(0.625))
        assert result["interpretation"] == "large"
        assert result["mean1"] == 5.0
        assert result["mean2"] == 6.0

    def test_antisymmetric(self):
        assert es.cohens_d(G2, G1)["cohens_d"] == pytest.approx(-es.cohens_d(G1, G2)["cohens_d"])

    def test_identical_constant_groups(self):
        result = es.cohens_d([1, 1], [1, 1])
        assert result["cohens_d"] == 0.0
        assert result["interpretation"] == "negligible"

    def test_distinct_constant_groups(self):
        assert es.cohens_d([2, 2], [1, 1])["cohens_d"] == math.inf
        assert es.cohens_d([1, 1], [2, 2])["cohens_d"] == -math.inf

    def test_needs_two_observations_per_group(self):
        with pytest.raises(ValueError, match="group2 needs at least 2"):
            es.cohens_d([1, 2, 3], [4])

    def test_pooled_sd_weights_by_degrees_of_freedom(self):
        a, b = [1, 2, 3, 4, 5, 6], [2, 4]
        expected = math.sqrt((5 * statistics.variance(a) + 1 * statistics.variance(b)) / 6)
        assert es.pooled_sd(a, b) == pytest.approx(expected)


class TestVariants:
    def test_hedges_g_shrinks_d(self):
        result = es.hedges_g(G1, G2)
        factor = 1 - 3 / (4 * 10 - 9)
        assert result["correction_factor"] == pytest.approx(factor)
        assert result["hedges_g"] == pytest.approx(result["cohens_d"] * factor)
        assert abs(result["hedges_g"]) < abs(result["cohens_d"])

    def test_glass_delta_uses_control_sd(self):
        control = [10, 12, 14]
        treatment = [20, 30, 40]
        result = es.glass_delta(control, treatment)
        assert result["glass_delta"] == pytest.approx((30 - 12) / 2.0)
        assert result["control_sd"] == pytest.approx(2.0)

    def test_glass_delta_constant_control(self):
        assert es.glass_delta([5, 5, 5], [6, 7, 8])["glass_delta"] == math.inf

    def test_paired_d_on_second_minus_first(self):
        before = [10, 12, 11, 13]
        after = [12, 13, 14, 15]
        result = es.paired_cohens_d(before, after)
        diffs = [2, 1, 3, 2]
        assert result["mean_diff"] == pytest.approx(2.0)
        assert result["cohens_d"] == pytest.approx(2.0 / statistics.stdev(diffs))

    def test_calculate_dispatches_on_type(self):
        assert "hedges_g" in es.calculate(G1, G2, EffectSizeOptions(type="hedges_g"))
        assert "glass_delta" in es.calculate(G1, G2, EffectSizeOptions(type="glass_delta"))
        assert es.calculate(G1, G2)["cohens_d"] == es.cohens_d(G1, G2)["cohens_d"]

    def test_calculate_paired_overrides_type(self):
        result = es.calculate(G1, G2, EffectSizeOptions(type="hedges_g", paired=True))
        assert "mean_diff" in result

    def test_unknown_type(self):
        with pytest.raises(ValueError, match="Unknown effect_size_type: 'cliffs_delta'"):
            EffectSizeOptions(type="cliffs_delta")


class TestVarianceExplained:
    def test_eta_and_omega(self):
        result = es.eta_omega_squared(ss_between=30.0, ss_total=100.0, df_between=2, ms_within=2.0)
        assert result["eta_squared"] == pytest.approx(0.3)
        assert result["omega_squared"] == pytest.approx(26.0 / 102.0)
        assert result["interpretation"] == "large"

    def test_omega_is_floored_at_zero(self):
        result = es.eta_omega_squared(ss_between=1.0, ss_total=50.0, df_between=3, ms_within=5.0)
        assert result["omega_squared"] == 0.0

    def test_no_variation(self):
        result = es.eta_omega_squared(0.0, 0.0, 2, 0.0)
        assert result["eta_squared"] == result["omega_squared"] == 0.0

    def test_epsilon_squared(self):
        assert es.epsilon_squared(4.5, 10) == pytest.approx(0.5)
        assert es.epsilon_squared(1.0, 1) == 0.0

    def test_rank_biserial(self):
        assert es.rank_biserial(0.0, 5, 5) == 1.0
        assert es.rank_biserial(12.5, 5, 5) == 0.0


class TestBands:
    @pytest.mark.parametrize(
        "d,label",
        [(0.0, "negligible"), (0.19, "negligible"), (0.2, "small"), (-0.49, "small"),
         (0.5, "medium"), (0.79, "medium"), (0.8, "large"), (-3.0, "large"), (math.inf, "large")],
    )
    def test_cohens_d_bands(self, d, label):
        assert es.interpret_cohens_d(d) == label

    @pytest.mark.parametrize(
        "value,label",
        [(0.005, "negligible"), (0.01, "small"), (0.06, "medium"), (0.14, "large")],
    )
    def test_variance_explained_bands(self, value, label):
        assert es.interpret_variance_explained(value) == label

    @pytest.mark.parametrize(
        "r,label",
        [(0.05, "negligible"), (-0.1, "small"), (0.3, "medium"), (0.5, "large")],
    )
    def test_correlation_bands(self, r, label):
        assert es.interpret_correlation(r) == label

    @given(st.floats(allow_nan=False))
    def test_band_depends_on_magnitude_only(self, d):
        assert es.interpret_cohens_d(d) == es.interpret_cohens_d(-d)
