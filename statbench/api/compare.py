"""
statbench.api.compare
=====================

Test selection: pick and run the appropriate test for a comparison.

For each kind of comparison there is a parametric test and a rank-based
alternative:

===================  ==================  =================
comparison           parametric          non-parametric
===================  ==================  =================
two groups           Welch's t-test      Mann-Whitney U
paired samples       paired t-test       Wilcoxon signed-rank
three or more        one-way ANOVA       Kruskal-Wallis H
===================  ==================  =================

The parametric test is chosen when assumption checking is switched off, or
when every sample passes a quick moment screen (``|skewness| < 2`` and
``|kurtosis| < 7``; samples smaller than 8 pass automatically). This is a fast
heuristic rather than a formal test; run `shapiro_wilk` or `levene_test`
directly when rigor matters. A test named in ``options.test`` skips selection.

Each entry point takes a `CompareOptions` or the same fields as keywords.

Parametric results come back with Cohen's d merged in as the effect size.

Examples
--------
>>> from statbench.api.compare import compare
>>> r = compare([5.1, 4.9, 5.3, 5.0, 5.2], [6.2, 6.0, 6.4, 5.9, 6.1])
>>> r.test.value
'welch_t_test'
>>> r.effect_size["interpretation"]
'large'
>>> compare([1, 2, 3], [4, 5, 6], test="mann_whitney").test.value
'mann_whitney'
"""

from __future__ import annotations
import logging
from typing import Any, Dict, FrozenSet, Optional, Sequence

from statbench.core.config import (
    AnovaOptions,
    CompareOptions,
    PairedTTestOptions,
    RankTestOptions,
    TTestOptions,
)
from statbench.core.names import TestKind
from statbench.core.result import Result
from statbench.stats.common.samples import as_groups, as_paired, as_sample, paired_differences
from statbench.stats.methods import effect_size, nonparametric, normality, parametric

logger = logging.getLogger(__name__)

# Below this size a sample is treated as normal enough without screening
MIN_SCREENED_N = 8

TWO_SAMPLE_TESTS: FrozenSet[TestKind] = frozenset(
    {TestKind.WELCH_T, TestKind.STUDENT_T, TestKind.MANN_WHITNEY}
)
PAIRED_TESTS: FrozenSet[TestKind] = frozenset({TestKind.PAIRED_T, TestKind.WILCOXON})
MULTI_SAMPLE_TESTS: FrozenSet[TestKind] = frozenset(
    {TestKind.ANOVA, TestKind.KRUSKAL_WALLIS}
)


def normal_enough(sample: Sequence[float]) -> bool:
    """Quick screen deciding whether a parametric test is reasonable."""
    if len(sample) < MIN_SCREENED_N:
        return True
    return normality.quick_check(sample)["is_normal"]


def _resolve_options(options: Optional[CompareOptions], settings: Dict[str, Any]) -> CompareOptions:
    """Options object, or one built from keyword settings (not both)."""
    if options is not None and settings:
        raise ValueError(
            f"Pass either options or keyword settings, not both (got {sorted(settings)})"
        )
    return options if options is not None else CompareOptions(**settings)


def _forced_test(options: CompareOptions, allowed: FrozenSet[TestKind], comparison: str) -> Optional[TestKind]:
    if options.test is None:
        return None
    if options.test not in allowed:
        raise ValueError(f"Test {options.test.value!r} cannot be used to compare {comparison}")
    return options.test


def _select(
    options: CompareOptions,
    parametric_test: TestKind,
    nonparametric_test: TestKind,
    *samples: Sequence[float],
) -> TestKind:
    if not options.check_assumptions:
        logger.debug("Assumption checks disabled, selecting %s", parametric_test.value)
        return parametric_test
    if all(normal_enough(s) for s in samples):
        logger.debug("Samples pass the normality screen, selecting %s", parametric_test.value)
        return parametric_test
    logger.debug("Samples fail the normality screen, selecting %s", nonparametric_test.value)
    return nonparametric_test


def compare_groups(
    group1: Sequence[float],
    group2: Sequence[float],
    options: Optional[CompareOptions] = None,
    **settings: Any,
) -> Result:
    """
    Compare two independent groups.

    Runs Welch's t-test (with Cohen's d) or Mann-Whitney U. Student's t-test
    is only used when forced through ``options.test``.
    """
    options = _resolve_options(options, settings)
    g1 = as_sample(group1, "group1")
    g2 = as_sample(group2, "group2")
    kind = _forced_test(options, TWO_SAMPLE_TESTS, "two independent groups")
    if kind is None:
        kind = _select(options, TestKind.WELCH_T, TestKind.MANN_WHITNEY, g1, g2)

    if kind is TestKind.MANN_WHITNEY:
        return nonparametric.mann_whitney(
            g1, g2, RankTestOptions(alternative=options.alternative)
        )
    result = parametric.t_test(
        g1,
        g2,
        TTestOptions(
            equal_variance=kind is TestKind.STUDENT_T,
            alternative=options.alternative,
            confidence_level=options.confidence_level,
        ),
    )
    return result.with_effect_size(effect_size.cohens_d(g1, g2))


def compare_paired(
    group1: Sequence[float],
    group2: Sequence[float],
    options: Optional[CompareOptions] = None,
    **settings: Any,
) -> Result:
    """
    Compare paired samples (before/after, matched units).

    The normality screen is applied to the differences ``group2 - group1``.
    Runs the paired t-test (with paired Cohen's d) or the Wilcoxon
    signed-rank test.
    """
    options = _resolve_options(options, settings)
    g1, g2 = as_paired(group1, group2)
    kind = _forced_test(options, PAIRED_TESTS, "paired samples")
    if kind is None:
        differences = paired_differences(g1, g2)
        kind = _select(options, TestKind.PAIRED_T, TestKind.WILCOXON, differences)

    if kind is TestKind.WILCOXON:
        return nonparametric.wilcoxon(
            g1, g2, RankTestOptions(alternative=options.alternative)
        )
    result = parametric.paired_t_test(
        g1,
        g2,
        PairedTTestOptions(
            alternative=options.alternative,
            confidence_level=options.confidence_level,
        ),
    )
    return result.with_effect_size(effect_size.paired_cohens_d(g1, g2))


def compare_multiple(
    groups: Sequence[Sequence[float]],
    options: Optional[CompareOptions] = None,
    **settings: Any,
) -> Result:
    """
    Compare two or more independent groups with one-way ANOVA or Kruskal-Wallis.

    ``options.labels`` (one per group) are passed through to the ANOVA metadata.
    """
    options = _resolve_options(options, settings)
    samples = as_groups(groups, min_groups=2)
    kind = _forced_test(options, MULTI_SAMPLE_TESTS, "multiple groups")
    if kind is None:
        kind = _select(options, TestKind.ANOVA, TestKind.KRUSKAL_WALLIS, *samples)

    if kind is TestKind.KRUSKAL_WALLIS:
        return nonparametric.kruskal_wallis(samples)
    return parametric.one_way_anova(samples, AnovaOptions(labels=options.labels))


compare = compare_groups
