"""Test selection and the keyword-style facade."""

from __future__ import annotations

import pytest

import statbench
from statbench.api.analysis import confidence_interval, effect_size, power_analysis
from statbench.api.compare import compare, compare_multiple, compare_paired, normal_enough
from statbench.core.config import CompareOptions
from statbench.core.names import CIMethod, TestKind

GROUP1 = [5.1, 4.9, 5.3, 5.0, 5.2]
GROUP2 = [6.2, 6.0, 6.4, 5.9, 6.1]

SYMMETRIC = [9.1, 10.4, 9.8, 10.9, 10.0, 9.5, 10.6, 9.9, 10.2, 10.3]
SKEWED = [1.0] * 9 + [100.0]

BEFORE = [12.1, 11.4, 13.0, 12.7, 11.9, 12.4, 13.3, 12.0]
AFTER = [12.9, 11.8, 13.9, 12.8, 12.6, 13.5, 13.6, 12.3]


class TestTwoGroups:
    def test_small_samples_use_welch_with_cohens_d(self):
        result = compare(GROUP1, GROUP2)
        assert result.test is TestKind.WELCH_T
        assert result.significant()
        assert result.effect_size["interpretation"] == "large"
        assert result.effect_size["cohens_d"] < 0

    def test_skewed_sample_switches_to_mann_whitney(self):
        result = compare(SKEWED, SYMMETRIC)
        assert result.test is TestKind.MANN_WHITNEY
        assert "rank_biserial" in result.effect_size

    def test_assumption_checks_can_be_disabled(self):
        result = compare(SKEWED, SYMMETRIC, check_assumptions=False)
        assert result.test is TestKind.WELCH_T

    def test_forced_student_t(self):
        result = compare(GROUP1, GROUP2, test="student_t_test")
        assert result.test is TestKind.STUDENT_T
        assert "cohens_d" in result.effect_size

    def test_forced_mann_whitney(self):
        assert compare([1, 2, 3], [4, 5, 6], test="mann_whitney").test is TestKind.MANN_WHITNEY

    def test_settings_are_passed_through(self):
        result = compare(GROUP1, GROUP2, alternative="less", confidence_level=0.9)
        assert result.metadata["alternative"] == "less"
        assert result.metadata["confidence_level"] == 0.9
        assert result.p_value < 0.05

    def test_options_object(self):
        result = compare(GROUP1, GROUP2, CompareOptions(test="student_t_test"))
        assert result.test is TestKind.STUDENT_T

    def test_options_and_settings_are_exclusive(self):
        with pytest.raises(ValueError, match="Pass either options or keyword settings"):
            compare(GROUP1, GROUP2, CompareOptions(), alternative="less")

    def test_test_must_fit_the_comparison(self):
        with pytest.raises(ValueError, match="Test 'anova' cannot be used to compare two independent groups"):
            compare(GROUP1, GROUP2, test="anova")

    def test_unknown_test_name(self):
        with pytest.raises(ValueError, match="Unknown test_kind: 'z_test'"):
            compare(GROUP1, GROUP2, test="z_test")

    def test_package_level_alias(self):
        assert statbench.compare is compare
        assert statbench.compare(GROUP1, GROUP2).test is TestKind.WELCH_T

    def test_normal_enough(self):
        assert normal_enough([1.0, 1.0, 50.0])
        assert normal_enough(SYMMETRIC)
        assert not normal_enough(SKEWED)


class TestPaired:
    def test_paired_t_with_paired_effect(self):
        result = compare_paired(BEFORE, AFTER)
        assert result.test is TestKind.PAIRED_T
        assert result.effect_size["mean_diff"] > 0
        assert result.significant()

    def test_skewed_differences_switch_to_wilcoxon(self):
        before = [float(i) for i in range(10)]
        after = [x + 1.0 for x in before[:9]] + [before[9] + 50.0]
        result = compare_paired(before, after)
        assert result.test is TestKind.WILCOXON

    def test_forced_wilcoxon(self):
        result = compare_paired(BEFORE, AFTER, test="wilcoxon_signed_rank")
        assert result.test is TestKind.WILCOXON

    def test_independent_test_is_rejected(self):
        with pytest.raises(ValueError, match="cannot be used to compare paired samples"):
            compare_paired(BEFORE, AFTER, test="welch_t_test")

    def test_lengths_must_match(self):
        with pytest.raises(ValueError, match="equal length"):
            compare_paired([1, 2, 3], [1, 2])


class TestMultiple:
    GROUPS = [
        [23.1, 25.4, 22.8, 24.9, 26.0, 23.7],
        [27.2, 26.8, 29.1, 28.4, 27.9],
        [24.0, 22.1, 25.3, 23.9, 24.4, 22.7, 23.5],
    ]

    def test_normal_groups_use_anova(self):
        result = compare_multiple(self.GROUPS, labels=["a", "b", "c"])
        assert result.test is TestKind.ANOVA
        assert result.metadata["labels"] == ["a", "b", "c"]
        assert result.significant()

    def test_skewed_group_switches_to_kruskal_wallis(self):
        result = compare_multiple([SYMMETRIC, SKEWED, [x + 1 for x in SYMMETRIC]])
        assert result.test is TestKind.KRUSKAL_WALLIS
        assert "epsilon_squared" in result.effect_size

    def test_forced_kruskal_wallis(self):
        result = compare_multiple(self.GROUPS, test="kruskal_wallis")
        assert result.test is TestKind.KRUSKAL_WALLIS

    def test_two_sample_test_is_rejected(self):
        with pytest.raises(ValueError, match="cannot be used to compare multiple groups"):
            compare_multiple(self.GROUPS, test="mann_whitney")

    def test_needs_two_groups(self):
        with pytest.raises(ValueError, match="Need at least 2 groups"):
            compare_multiple([GROUP1])


class TestAnalysisFacade:
    def test_effect_size_types(self):
        assert effect_size(GROUP1, GROUP2)["interpretation"] == "large"
        assert "hedges_g" in effect_size(GROUP1, GROUP2, type="hedges_g")
        assert "mean_diff" in effect_size(BEFORE, AFTER, paired=True)

    def test_confidence_interval(self):
        ci = confidence_interval(GROUP1)
        assert ci.method is CIMethod.ANALYTICAL
        assert ci.contains(5.1)

    def test_bootstrap_confidence_interval(self):
        ci = confidence_interval(GROUP1, "median", method="bootstrap", iterations=200, seed=4)
        assert ci.method is CIMethod.BOOTSTRAP
        assert ci.seed == 4
        assert ci.iterations == 200

    def test_power_analysis(self):
        assert power_analysis(effect_size=0.5).n_per_group == 63
        assert power_analysis("anova", effect_size=0.25, k=3).k == 3
        achieved = power_analysis(effect_size=0.5, analysis_type="post_hoc", n_per_group=20)
        assert 0.0 < achieved.power < 0.8

    def test_invalid_keyword_values(self):
        with pytest.raises(ValueError, match="Unknown ci_method: 'jackknife'"):
            confidence_interval(GROUP1, method="jackknife")
        with pytest.raises(ValueError, match="confidence_level must be in"):
            compare(GROUP1, GROUP2, confidence_level=95)
