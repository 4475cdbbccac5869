"""Power analysis: sample size and achieved power are inverse to each other."""

from __future__ import annotations

import math

import pytest
from hypothesis import given, settings, strategies as st

from statbench.core.config import PowerOptions
from statbench.core.names import Alternative, PowerAnalysisType, PowerTest
from statbench.stats.methods.power import analyze, cohens_f

effects = st.floats(min_value=0.1, max_value=2.0)
targets = st.floats(min_value=0.5, max_value=0.95)


class TestTTest:
    def test_medium_effect_needs_63_per_group(self):
        plan = analyze("t_test", PowerOptions(effect_size=0.5))
        assert plan.analysis_type is PowerAnalysisType.A_PRIORI
        assert plan.test is PowerTest.T_TEST
        assert plan.n_per_group == 63
        assert plan.total_n == 126
        assert "63 samples per group" in plan.recommendation

    def test_round_trip(self):
        plan = analyze("t_test", PowerOptions(effect_size=0.5, power=0.8))
        check = analyze(
            "t_test",
            PowerOptions(effect_size=0.5, analysis_type="post_hoc", n_per_group=plan.n_per_group),
        )
        assert check.power >= 0.78
        assert check.recommendation.startswith("Adequate power")

    @settings(deadline=None)
    @given(effects, targets)
    def test_a_priori_size_reaches_target_power(self, d, target):
        plan = analyze("t_test", PowerOptions(effect_size=d, power=target))
        check = analyze(
            "t_test",
            PowerOptions(effect_size=d, analysis_type="post_hoc", n_per_group=plan.n_per_group),
        )
        assert check.power >= target - 1e-6

    def test_sign_of_effect_is_ignored(self):
        assert (
            analyze("t_test", PowerOptions(effect_size=-0.5)).n_per_group
            == analyze("t_test", PowerOptions(effect_size=0.5)).n_per_group
        )

    def test_one_sided_needs_fewer_samples(self):
        two = analyze("t_test", PowerOptions(effect_size=0.4))
        one = analyze("t_test", PowerOptions(effect_size=0.4, alternative="greater"))
        assert one.n_per_group < two.n_per_group
        assert one.alternative is Alternative.GREATER

    def test_huge_effect_keeps_two_per_group(self):
        assert analyze("t_test", PowerOptions(effect_size=10.0)).n_per_group == 2

    def test_power_grows_with_sample_size(self):
        powers = [
            analyze(
                "t_test", PowerOptions(effect_size=0.3, analysis_type="post_hoc", n_per_group=n)
            ).power
            for n in (10, 50, 200)
        ]
        assert powers == sorted(powers)
        assert powers[0] < 0.6
        assert analyze(
            "t_test", PowerOptions(effect_size=0.3, analysis_type="post_hoc", n_per_group=10)
        ).recommendation.startswith("Underpowered")

    def test_post_hoc_requires_sample_size(self):
        with pytest.raises(ValueError, match="n_per_group is required"):
            analyze("t_test", PowerOptions(effect_size=0.5, analysis_type="post_hoc"))


class TestAnova:
    def test_sample_size(self):
        plan = analyze("anova", PowerOptions(effect_size=0.25, k=3))
        z = 1.6448536 + 0.8416212
        assert plan.n_per_group == math.ceil((z / 0.25) ** 2 / 3)
        assert plan.total_n == 3 * plan.n_per_group
        assert plan.k == 3
        assert plan.alternative is Alternative.GREATER

    def test_two_groups_agree_with_one_sided_t_test(self):
        anova = analyze("anova", PowerOptions(effect_size=0.25, k=2))
        t = analyze("t_test", PowerOptions(effect_size=0.5, alternative="greater"))
        assert anova.n_per_group == t.n_per_group

    @settings(deadline=None)
    @given(st.floats(min_value=0.05, max_value=1.0), targets, st.integers(min_value=2, max_value=8))
    def test_round_trip(self, f, target, k):
        plan = analyze("anova", PowerOptions(effect_size=f, power=target, k=k))
        check = analyze(
            "anova",
            PowerOptions(effect_size=f, analysis_type="post_hoc", n_per_group=plan.n_per_group, k=k),
        )
        assert check.power >= target - 1e-6

    def test_eta_squared_input(self):
        eta = 0.0588
        plan = analyze("anova", PowerOptions(effect_size=eta, k=4, anova_effect="eta_squared"))
        assert plan.effect_size == pytest.approx(math.sqrt(eta / (1 - eta)))
        assert cohens_f(PowerOptions(effect_size=eta, anova_effect="eta_squared")) == pytest.approx(
            0.25, abs=1e-3
        )

    def test_requires_number_of_groups(self):
        with pytest.raises(ValueError, match="k \\(number of groups\\) is required"):
            analyze("anova", PowerOptions(effect_size=0.25))


class TestOptions:
    @pytest.mark.parametrize("value", [0.0, math.inf, math.nan])
    def test_effect_size_must_be_finite_and_non_zero(self, value):
        with pytest.raises(ValueError, match="effect_size must be finite and non-zero"):
            PowerOptions(effect_size=value)

    @pytest.mark.parametrize("field", ["alpha", "power"])
    @pytest.mark.parametrize("value", [0.0, 1.0, -0.1])
    def test_probabilities_in_open_unit(self, field, value):
        with pytest.raises(ValueError, match=f"{field} must be in \\(0, 1\\)"):
            PowerOptions(effect_size=0.5, **{field: value})

    def test_eta_squared_bounds(self):
        with pytest.raises(ValueError, match="eta_squared must be in"):
            PowerOptions(effect_size=1.2, anova_effect="eta_squared")

    def test_group_count_and_size(self):
        with pytest.raises(ValueError, match="k must be at least 2"):
            PowerOptions(effect_size=0.3, k=1)
        with pytest.raises(ValueError, match="n_per_group must be at least 2"):
            PowerOptions(effect_size=0.3, n_per_group=1)

    def test_unknown_test(self):
        with pytest.raises(ValueError, match="Unknown power_test: 'chi_squared'"):
            analyze("chi_squared", PowerOptions(effect_size=0.3))

    def test_unknown_analysis_type(self):
        with pytest.raises(ValueError, match="Unknown power_analysis_type"):
            PowerOptions(effect_size=0.3, analysis_type="sensitivity")
