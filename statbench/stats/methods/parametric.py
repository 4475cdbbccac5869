"""
statbench.stats.methods.parametric
==================================

Parametric hypothesis tests on sample means.

- `t_test`: independent samples, Welch (default) or Student (pooled variance)
- `paired_t_test`: one-sample t-test on the paired differences ``group2 - group1``
- `one_way_anova`: sum-of-squares decomposition with eta- and omega-squared

All tests return a `Result`. Zero-variance inputs resolve to sentinels instead
of raising: when the standard error is zero, equal means give ``t = 0, p = 1``
and unequal means give an infinite statistic with ``p = 0`` (for a two-sided
test or an alternative in the direction of the difference).

Examples
--------
>>> from statbench.stats.methods.parametric import t_test
>>> r = t_test([5.1, 4.9, 5.3, 5.0, 5.2], [6.2, 6.0, 6.4, 5.9, 6.1])
>>> r.test.value
'welch_t_test'
>>> r.significant()
True
>>> r.metadata["mean_diff"] < 0
True
"""

from __future__ import annotations
import logging
import math
from typing import Any, Dict, List, Optional, Sequence, Tuple

from statbench.core.config import AnovaOptions, PairedTTestOptions, TTestOptions
from statbench.core.names import Alternative, TestKind
from statbench.core.result import Result
from statbench.stats.common import descriptive
from statbench.stats.common.distributions import f_sf, t_cdf, t_quantile, t_sf
from statbench.stats.common.samples import (
    as_groups,
    as_paired,
    as_sample,
    paired_differences,
)
from statbench.stats.common.testing import interpret, p_value_for
from statbench.stats.methods.effect_size import eta_omega_squared

logger = logging.getLogger(__name__)


def _t_statistic(
    estimate: float, se: float, df: float, alternative: Alternative
) -> Tuple[float, float]:
    """Return (t, p) for ``estimate / se`` with the zero-SE sentinels."""
    if se == 0:
        if estimate == 0:
            logger.debug("Zero standard error with zero difference: t = 0, p = 1")
            return 0.0, 1.0
        logger.debug("Zero standard error with non-zero difference: infinite t")
        t = math.copysign(math.inf, estimate)
    else:
        t = estimate / se
    return t, p_value_for(t_cdf(t, df), t_sf(t, df), alternative)


def _t_interval(
    estimate: float, se: float, df: float, confidence_level: float
) -> Tuple[float, float]:
    """Two-sided ``estimate +/- t_crit * se`` interval."""
    t_crit = t_quantile(df, 1.0 - (1.0 - confidence_level) / 2.0)
    margin = t_crit * se
    return estimate - margin, estimate + margin


def t_test(
    group1: Sequence[float],
    group2: Sequence[float],
    options: Optional[TTestOptions] = None,
) -> Result:
    """
    Independent two-sample t-test.

    Args:
        group1, group2: Samples with at least two observations each
        options: Welch/Student choice, alternative (for ``mean1 - mean2``)
            and confidence level of the interval for the mean difference

    Returns:
        Result with the t statistic, p-value and CI for ``mean1 - mean2``.
        Metadata holds df, means, variances, SE and sample sizes.

    Note:
        Welch's degrees of freedom fall back to ``n1 + n2 - 2`` when both
        groups are constant (the Welch-Satterthwaite ratio is 0/0 there).
    """
    options = options or TTestOptions()
    g1 = as_sample(group1, "group1", min_size=2)
    g2 = as_sample(group2, "group2", min_size=2)
    n1, n2 = len(g1), len(g2)
    mean1, mean2 = descriptive.mean(g1), descriptive.mean(g2)
    var1, var2 = descriptive.variance(g1), descriptive.variance(g2)
    mean_diff = mean1 - mean2

    if options.equal_variance:
        test = TestKind.STUDENT_T
        df = float(n1 + n2 - 2)
        pooled_var = ((n1 - 1) * var1 + (n2 - 1) * var2) / df
        se = math.sqrt(pooled_var * (1.0 / n1 + 1.0 / n2))
    else:
        test = TestKind.WELCH_T
        a, b = var1 / n1, var2 / n2
        se = math.sqrt(a + b)
        denominator = a * a / (n1 - 1) + b * b / (n2 - 1)
        df = (a + b) ** 2 / denominator if denominator > 0 else float(n1 + n2 - 2)

    t, p = _t_statistic(mean_diff, se, df, options.alternative)
    interval = _t_interval(mean_diff, se, df, options.confidence_level)

    return Result(
        test=test,
        statistic=t,
        p_value=p,
        confidence_interval=interval,
        interpretation=interpret(p, "difference between groups"),
        metadata={
            "df": df,
            "mean1": mean1,
            "mean2": mean2,
            "mean_diff": mean_diff,
            "var1": var1,
            "var2": var2,
            "se": se,
            "n1": n1,
            "n2": n2,
            "alternative": options.alternative.value,
            "confidence_level": options.confidence_level,
        },
    )


def paired_t_test(
    group1: Sequence[float],
    group2: Sequence[float],
    options: Optional[PairedTTestOptions] = None,
) -> Result:
    """
    Paired t-test on the differences ``group2 - group1``.

    Tests whether the mean difference equals ``options.mu``; ``greater``
    means group2 tends to exceed group1. Inputs must be equal-length with at
    least two pairs.
    """
    options = options or PairedTTestOptions()
    g1, g2 = as_paired(group1, group2, min_size=2)
    differences = paired_differences(g1, g2)
    n = len(differences)
    mean_diff = descriptive.mean(differences)
    sd_diff = descriptive.stdev(differences)
    se_diff = sd_diff / math.sqrt(n)
    df = float(n - 1)

    t, p = _t_statistic(mean_diff - options.mu, se_diff, df, options.alternative)
    interval = _t_interval(mean_diff, se_diff, df, options.confidence_level)

    if p < 0.05 and mean_diff != options.mu:
        direction = "increase" if mean_diff > options.mu else "decrease"
        subject = f"{direction} from group1 to group2"
    else:
        subject = "difference between paired samples"

    return Result(
        test=TestKind.PAIRED_T,
        statistic=t,
        p_value=p,
        confidence_interval=interval,
        interpretation=interpret(p, subject),
        metadata={
            "df": df,
            "mean_diff": mean_diff,
            "sd_diff": sd_diff,
            "se_diff": se_diff,
            "n": n,
            "mu": options.mu,
            "alternative": options.alternative.value,
            "confidence_level": options.confidence_level,
        },
    )


def anova_table(groups: List[List[float]]) -> Dict[str, Any]:
    """Sum-of-squares decomposition of a one-way layout."""
    k = len(groups)
    n_total = sum(len(g) for g in groups)
    group_means = [descriptive.mean(g) for g in groups]
    grand_mean = math.fsum(x for g in groups for x in g) / n_total

    ss_between = math.fsum(
        len(g) * (m - grand_mean) ** 2 for g, m in zip(groups, group_means)
    )
    ss_within = math.fsum(descriptive.sum_of_squares(g) for g in groups)
    df_between = k - 1
    df_within = n_total - k
    return {
        "k": k,
        "n_total": n_total,
        "group_means": group_means,
        "ss_between": ss_between,
        "ss_within": ss_within,
        "ss_total": ss_between + ss_within,
        "df_between": df_between,
        "df_within": df_within,
        "ms_between": ss_between / df_between,
        "ms_within": ss_within / df_within,
    }


def f_ratio(ms_between: float, ms_within: float, df_between: int, df_within: int) -> Tuple[float, float]:
    """Return (F, p) with the zero within-group variance sentinels."""
    if ms_within == 0:
        if ms_between == 0:
            logger.debug("No variation within or between groups: F = 0, p = 1")
            return 0.0, 1.0
        logger.debug("No variation within groups: F = inf, p = 0")
        return math.inf, 0.0
    f = ms_between / ms_within
    return f, f_sf(f, df_between, df_within)


def one_way_anova(
    groups: Sequence[Sequence[float]], options: Optional[AnovaOptions] = None
) -> Result:
    """
    One-way analysis of variance.

    Args:
        groups: At least two non-empty groups with more observations in total
            than groups
        options: Optional group labels, echoed into the metadata

    Returns:
        Result with F, its p-value and ``{"eta_squared", "omega_squared",
        "interpretation"}`` as effect size.
    """
    options = options or AnovaOptions()
    samples = as_groups(groups, min_groups=2, min_size=1)
    n_total = sum(len(g) for g in samples)
    if n_total <= len(samples):
        raise ValueError(
            f"ANOVA needs more observations ({n_total}) than groups ({len(samples)})"
        )
    if options.labels is not None and len(options.labels) != len(samples):
        raise ValueError(
            f"Got {len(options.labels)} labels for {len(samples)} groups"
        )

    table = anova_table(samples)
    f, p = f_ratio(
        table["ms_between"], table["ms_within"], table["df_between"], table["df_within"]
    )
    effect = eta_omega_squared(
        table["ss_between"], table["ss_total"], table["df_between"], table["ms_within"]
    )

    interpretation = (
        f"{interpret(p, 'difference among group means')}, "
        f"{effect['interpretation']} effect size"
    )
    metadata = dict(table)
    metadata["labels"] = list(options.labels) if options.labels is not None else None

    return Result(
        test=TestKind.ANOVA,
        statistic=f,
        p_value=p,
        effect_size=effect,
        interpretation=interpretation,
        metadata=metadata,
    )
