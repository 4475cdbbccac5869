"""
statbench.stats.methods.nonparametric
=====================================

Rank-based hypothesis tests.

- `mann_whitney`: two independent samples, U statistic, rank-biserial effect size
- `wilcoxon`: paired samples, signed-rank W statistic, ``r = |z| / sqrt(n)``
- `kruskal_wallis`: k independent samples, H statistic, epsilon-squared

Tied values share their mid-rank and the null variances carry the usual tie
corrections. p-values come from the normal (or chi-squared) approximation at
every sample size; exact small-sample distributions are not tabulated.

Examples
--------
>>> from statbench.stats.methods.nonparametric import mann_whitney
>>> r = mann_whitney([1, 2, 3, 4, 5], [6, 7, 8, 9, 10])
>>> r.statistic
0.0
>>> r.effect_size["rank_biserial"]
1.0
"""

from __future__ import annotations
import logging
import math
from typing import List, Optional, Sequence

from statbench.core.config import RankTestOptions
from statbench.core.names import Alternative, TestKind
from statbench.core.result import Result
from statbench.stats.common import descriptive
from statbench.stats.common.distributions import chi_squared_sf, normal_cdf, normal_sf
from statbench.stats.common.samples import as_groups, as_paired, as_sample, paired_differences
from statbench.stats.common.testing import interpret, p_value_for
from statbench.stats.methods.effect_size import (
    epsilon_squared,
    interpret_correlation,
    interpret_variance_explained,
    rank_biserial,
)

logger = logging.getLogger(__name__)

# Below this group size the normal approximation to U is rough
SMALL_SAMPLE = 10
WILCOXON_MIN_PAIRS = 5
# Wilcoxon's r is only reported above this many non-zero differences
WILCOXON_EFFECT_MIN_N = 25
CONTINUITY = 0.5


def _mann_whitney_p(u1: float, mean_u: float, sd_u: float, alternative: Alternative):
    """Continuity-corrected normal approximation on U1; returns (z, p)."""
    if alternative is Alternative.GREATER:
        z = (u1 - mean_u - CONTINUITY) / sd_u
        return z, normal_sf(z)
    if alternative is Alternative.LESS:
        z = (u1 - mean_u + CONTINUITY) / sd_u
        return z, normal_cdf(z)
    if alternative is Alternative.TWO_SIDED:
        shift = max(0.0, abs(u1 - mean_u) - CONTINUITY)
        z = math.copysign(shift / sd_u, u1 - mean_u)
        return z, min(1.0, 2.0 * normal_sf(abs(z)))
    raise ValueError(f"Unknown alternative: {alternative!r}")


def mann_whitney(
    group1: Sequence[float],
    group2: Sequence[float],
    options: Optional[RankTestOptions] = None,
) -> Result:
    """
    Mann-Whitney U test for two independent samples.

    ``U1 = R1 - n1(n1+1)/2`` counts the pairs in which group1 is larger (ties
    count half), and the reported statistic is ``U = min(U1, n1 n2 - U1)``.
    ``greater`` means group1 tends to be larger. If every value is tied the
    null variance is zero and the test returns ``z = 0, p = 1``.

    Returns:
        Result with U, its p-value and ``{"rank_biserial", "interpretation"}``
        where ``rank_biserial = 1 - 2U / (n1 n2)``.
    """
    options = options or RankTestOptions()
    g1 = as_sample(group1, "group1", min_size=1)
    g2 = as_sample(group2, "group2", min_size=1)
    n1, n2 = len(g1), len(g2)
    n_total = n1 + n2
    if min(n1, n2) < SMALL_SAMPLE:
        logger.debug(
            "Mann-Whitney with n1=%d, n2=%d uses the normal approximation", n1, n2
        )

    pooled = g1 + g2
    ranks = descriptive.rank(pooled)
    r1 = math.fsum(ranks[:n1])
    u1 = r1 - n1 * (n1 + 1) / 2.0
    u2 = n1 * n2 - u1
    u = min(u1, u2)

    mean_u = n1 * n2 / 2.0
    ties = descriptive.tie_correction_term(pooled)
    var_u = n1 * n2 / 12.0 * ((n_total + 1) - ties / (n_total * (n_total - 1)))

    if var_u <= 0:
        logger.debug("All values tied in Mann-Whitney: z = 0, p = 1")
        z, p, sd_u = 0.0, 1.0, 0.0
    else:
        sd_u = math.sqrt(var_u)
        z, p = _mann_whitney_p(u1, mean_u, sd_u, options.alternative)

    r_rb = rank_biserial(u, n1, n2)
    return Result(
        test=TestKind.MANN_WHITNEY,
        statistic=u,
        p_value=p,
        effect_size={
            "rank_biserial": r_rb,
            "interpretation": interpret_correlation(r_rb),
        },
        interpretation=interpret(p, "difference in distributions"),
        metadata={
            "u1": u1,
            "u2": u2,
            "rank_sum1": r1,
            "z": z,
            "mean_u": mean_u,
            "sd_u": sd_u,
            "n1": n1,
            "n2": n2,
            "alternative": options.alternative.value,
        },
    )


def wilcoxon(
    group1: Sequence[float],
    group2: Sequence[float],
    options: Optional[RankTestOptions] = None,
) -> Result:
    """
    Wilcoxon signed-rank test on the paired differences ``group2 - group1``.

    Zero differences are dropped and at least five non-zero differences must
    remain. Absolute differences are mid-ranked, ``W+`` and ``W-`` are the
    rank sums of the positive and negative differences, and the reported
    statistic is ``W = min(W+, W-)``. The alternative is read on ``W+``
    (``greater``: group2 tends to exceed group1). No continuity correction.

    The effect size ``{"r": |z| / sqrt(n), "interpretation"}`` is only
    reported for more than 25 non-zero differences; otherwise it is None.
    """
    options = options or RankTestOptions()
    g1, g2 = as_paired(group1, group2)
    differences = [d for d in paired_differences(g1, g2) if d != 0]
    n = len(differences)
    n_zero = len(g1) - n
    if n < WILCOXON_MIN_PAIRS:
        raise ValueError(
            f"Wilcoxon signed-rank test needs at least {WILCOXON_MIN_PAIRS} "
            f"non-zero differences, got {n}"
        )

    magnitudes = [abs(d) for d in differences]
    ranks = descriptive.rank(magnitudes)
    w_plus = math.fsum(r for r, d in zip(ranks, differences) if d > 0)
    w_minus = math.fsum(r for r, d in zip(ranks, differences) if d < 0)
    w = min(w_plus, w_minus)

    mean_w = n * (n + 1) / 4.0
    var_w = (
        n * (n + 1) * (2 * n + 1) / 24.0
        - descriptive.tie_correction_term(magnitudes) / 48.0
    )
    if var_w <= 0:
        z, p = 0.0, 1.0
    else:
        z = (w_plus - mean_w) / math.sqrt(var_w)
        p = p_value_for(normal_cdf(z), normal_sf(z), options.alternative)

    effect_size = None
    if n > WILCOXON_EFFECT_MIN_N:
        r = abs(z) / math.sqrt(n)
        effect_size = {"r": r, "interpretation": interpret_correlation(r)}

    return Result(
        test=TestKind.WILCOXON,
        statistic=w,
        p_value=p,
        effect_size=effect_size,
        interpretation=interpret(p, "difference between paired samples"),
        metadata={
            "w_plus": w_plus,
            "w_minus": w_minus,
            "z": z,
            "n": n,
            "n_zero_dropped": n_zero,
            "alternative": options.alternative.value,
        },
    )


def kruskal_wallis(groups: Sequence[Sequence[float]]) -> Result:
    """
    Kruskal-Wallis H test for k independent samples.

    ``H = 12 / (N(N+1)) * sum(R_i^2 / n_i) - 3(N+1)`` on pooled mid-ranks, with
    the p-value from chi-squared on ``k - 1`` degrees of freedom. The
    tie-corrected H is reported alongside in the metadata as
    ``h_tie_corrected``.
    """
    samples: List[List[float]] = as_groups(groups, min_groups=2, min_size=1)
    k = len(samples)
    pooled = [x for g in samples for x in g]
    n_total = len(pooled)
    ranks = descriptive.rank(pooled)

    rank_sums = []
    start = 0
    for g in samples:
        rank_sums.append(math.fsum(ranks[start:start + len(g)]))
        start += len(g)

    h = 12.0 / (n_total * (n_total + 1)) * math.fsum(
        r * r / len(g) for r, g in zip(rank_sums, samples)
    ) - 3.0 * (n_total + 1)
    h = max(0.0, h)

    tie_denominator = 1.0 - descriptive.tie_correction_term(pooled) / (n_total**3 - n_total)
    h_corrected = h / tie_denominator if tie_denominator > 0 else 0.0

    df = k - 1
    p = chi_squared_sf(h, df)
    eps_sq = epsilon_squared(h, n_total)

    return Result(
        test=TestKind.KRUSKAL_WALLIS,
        statistic=h,
        p_value=p,
        effect_size={
            "epsilon_squared": eps_sq,
            "interpretation": interpret_variance_explained(eps_sq),
        },
        interpretation=interpret(p, "difference among groups"),
        metadata={
            "df": df,
            "k": k,
            "n_total": n_total,
            "rank_sums": rank_sums,
            "h_tie_corrected": h_corrected,
        },
    )
