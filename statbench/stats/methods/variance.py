"""
statbench.stats.methods.variance
================================

Equality-of-variance diagnostics.

- `levene_test`: one-way ANOVA on absolute deviations from each group's center
  (median by default, i.e. Brown-Forsythe), any number of groups
- `f_test`: ratio of the larger to the smaller of two sample variances
- `quick_check`: variance-ratio screen, equal when 0.25 <= ratio <= 4

p-values use the exact F distribution. Constant groups resolve to sentinels:
the F-test reports ``F = 1, p = 1`` when both groups are constant and
``F = inf, p = 0`` when only one is.

Examples
--------
>>> from statbench.stats.methods.variance import f_test, levene_test
>>> f_test([5, 5, 5, 5], [1, 10, 2, 9]).equal_variances
False
>>> levene_test([[1, 2, 3, 4], [2, 3, 4, 5]]).equal_variances
True
"""

from __future__ import annotations
import logging
import math
from typing import Any, Dict, Optional, Sequence

from statbench.core.config import DEFAULT_ALPHA, LeveneOptions
from statbench.core.names import Center, TestKind
from statbench.core.result import VarianceTestResult
from statbench.stats.common import descriptive
from statbench.stats.common.distributions import f_sf
from statbench.stats.common.samples import as_groups, as_sample
from statbench.stats.common.testing import describe_p_value
from statbench.stats.methods.parametric import anova_table, f_ratio

logger = logging.getLogger(__name__)

RATIO_LOWER = 0.25
RATIO_UPPER = 4.0


def _verdict(equal: bool, p_value: float) -> str:
    if equal:
        return f"Variances are not significantly different ({describe_p_value(p_value)})"
    return f"Variances differ significantly ({describe_p_value(p_value)})"


def levene_test(
    groups: Sequence[Sequence[float]], options: Optional[LeveneOptions] = None
) -> VarianceTestResult:
    """
    Levene's test for equality of variances.

    Args:
        groups: At least two groups with at least two observations each
        options: Center (``median`` for Brown-Forsythe, or ``mean``) and the
            level at which `equal_variances` is decided

    Returns:
        VarianceTestResult with the F statistic on ``(k - 1, N - k)`` degrees
        of freedom. If no group spreads around its center, F is 0 (p = 1)
        when the groups also agree in spread, otherwise inf (p = 0).
    """
    options = options or LeveneOptions()
    samples = as_groups(groups, min_groups=2, min_size=2)
    center = descriptive.median if options.center is Center.MEDIAN else descriptive.mean

    deviations = []
    for g in samples:
        c = center(g)
        deviations.append([abs(x - c) for x in g])

    table = anova_table(deviations)
    f, p = f_ratio(
        table["ms_between"], table["ms_within"], table["df_between"], table["df_within"]
    )
    equal = p > options.alpha
    return VarianceTestResult(
        test=TestKind.LEVENE,
        statistic=f,
        p_value=p,
        equal_variances=equal,
        df1=table["df_between"],
        df2=table["df_within"],
        interpretation=_verdict(equal, p),
        metadata={
            "center": options.center.value,
            "variances": [descriptive.variance(g) for g in samples],
            "group_sizes": [len(g) for g in samples],
        },
    )


def f_test(
    group1: Sequence[float], group2: Sequence[float], alpha: float = DEFAULT_ALPHA
) -> VarianceTestResult:
    """
    Two-sided F-test for equality of two variances.

    The statistic is ``max(var) / min(var)`` (always >= 1) on
    ``(n_larger - 1, n_smaller - 1)`` degrees of freedom and the p-value is
    ``min(1, 2 P(F > f))``.
    """
    g1 = as_sample(group1, "group1", min_size=2)
    g2 = as_sample(group2, "group2", min_size=2)
    var1, var2 = descriptive.variance(g1), descriptive.variance(g2)
    n1, n2 = len(g1), len(g2)

    if var1 >= var2:
        larger, smaller, df1, df2 = var1, var2, n1 - 1, n2 - 1
    else:
        larger, smaller, df1, df2 = var2, var1, n2 - 1, n1 - 1

    if larger == 0:
        logger.debug("Both groups constant in F-test: F = 1, p = 1")
        f, p = 1.0, 1.0
    elif smaller == 0:
        logger.debug("One group constant in F-test: F = inf, p = 0")
        f, p = math.inf, 0.0
    else:
        f = larger / smaller
        p = min(1.0, 2.0 * f_sf(f, df1, df2))

    equal = p > alpha
    return VarianceTestResult(
        test=TestKind.F_TEST,
        statistic=f,
        p_value=p,
        equal_variances=equal,
        df1=df1,
        df2=df2,
        interpretation=_verdict(equal, p),
        metadata={"var1": var1, "var2": var2},
    )


def quick_check(group1: Sequence[float], group2: Sequence[float]) -> Dict[str, Any]:
    """
    Variance-ratio screen: ``var1 / var2`` within [0.25, 4] counts as equal.

    Two constant groups have ratio 1; a constant group2 alone gives ``inf``.
    """
    var1 = descriptive.variance(as_sample(group1, "group1", min_size=2))
    var2 = descriptive.variance(as_sample(group2, "group2", min_size=2))
    if var2 > 0:
        ratio = var1 / var2
    else:
        ratio = 1.0 if var1 == 0 else math.inf

    equal = RATIO_LOWER <= ratio <= RATIO_UPPER
    verdict = "within acceptable range" if equal else "indicates unequal variances"
    return {
        "equal_variances": equal,
        "var1": var1,
        "var2": var2,
        "ratio": ratio,
        "reason": f"Variance ratio {ratio:.2f} {verdict}",
    }
