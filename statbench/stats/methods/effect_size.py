"""
statbench.stats.methods.effect_size
===================================

Standardized effect sizes and their conventional interpretation bands.

- Mean differences: `cohens_d`, `hedges_g`, `glass_delta`, `paired_cohens_d`
- Rank tests: `rank_biserial`, `epsilon_squared`
- ANOVA: `eta_omega_squared`
- Bands (Cohen, 1988): d {0.2, 0.5, 0.8}; variance explained {0.01, 0.06, 0.14};
  correlation-type r {0.1, 0.3, 0.5}

A standardizer of zero (constant data) never divides: the effect is 0.0 when
the difference is also zero, otherwise an infinity carrying the sign of the
difference.

Examples
--------
>>> from statbench.stats.methods.effect_size import cohens_d, interpret_cohens_d
>>> es = cohens_d([4, 4.5, 5, 5.5, 6], [5, 5.5, 6, 6.5, 7])
>>> es["cohens_d"] < 0
True
>>> es["interpretation"]
'large'
>>> interpret_cohens_d(-0.3)
'small'
"""

from __future__ import annotations
import logging
import math
from typing import Any, Dict, Optional, Sequence

from statbench.core.config import EffectSizeOptions
from statbench.core.names import EffectSizeType
from statbench.stats.common import descriptive
from statbench.stats.common.samples import as_paired, as_sample, paired_differences

logger = logging.getLogger(__name__)

D_THRESHOLDS = (0.2, 0.5, 0.8)
VARIANCE_EXPLAINED_THRESHOLDS = (0.01, 0.06, 0.14)
CORRELATION_THRESHOLDS = (0.1, 0.3, 0.5)

_BANDS = ("negligible", "small", "medium", "large")


def _band(value: float, thresholds: Sequence[float]) -> str:
    magnitude = abs(value)
    for label, threshold in zip(_BANDS, thresholds):
        if magnitude < threshold:
            return label
    return _BANDS[-1]


def interpret_cohens_d(d: float) -> str:
    return _band(d, D_THRESHOLDS)


def interpret_variance_explained(value: float) -> str:
    """Band for eta-squared, omega-squared and epsilon-squared."""
    return _band(value, VARIANCE_EXPLAINED_THRESHOLDS)


def interpret_correlation(r: float) -> str:
    """Band for correlation-type effects (rank-biserial, Wilcoxon r)."""
    return _band(r, CORRELATION_THRESHOLDS)


def standardize(difference: float, scale: float) -> float:
    """``difference / scale`` with the zero-scale sentinels."""
    if scale == 0:
        logger.debug("Zero standardizer for effect size (difference=%s)", difference)
        if difference == 0:
            return 0.0
        return math.copysign(math.inf, difference)
    return difference / scale


def pooled_sd(group1: Sequence[float], group2: Sequence[float]) -> float:
    """Degrees-of-freedom weighted pooled standard deviation."""
    n1, n2 = len(group1), len(group2)
    var1 = descriptive.variance(group1)
    var2 = descriptive.variance(group2)
    return math.sqrt(((n1 - 1) * var1 + (n2 - 1) * var2) / (n1 + n2 - 2))


def cohens_d(group1: Sequence[float], group2: Sequence[float]) -> Dict[str, Any]:
    """
    Cohen's d for two independent groups, ``(mean1 - mean2) / pooled_sd``.

    Each group needs at least two observations.
    """
    g1 = as_sample(group1, "group1", min_size=2)
    g2 = as_sample(group2, "group2", min_size=2)
    mean1 = descriptive.mean(g1)
    mean2 = descriptive.mean(g2)
    sd = pooled_sd(g1, g2)
    d = standardize(mean1 - mean2, sd)
    return {
        "cohens_d": d,
        "interpretation": interpret_cohens_d(d),
        "mean1": mean1,
        "mean2": mean2,
        "pooled_sd": sd,
    }


def hedges_g(group1: Sequence[float], group2: Sequence[float]) -> Dict[str, Any]:
    """
    Hedges' g: Cohen's d times the small-sample factor ``J = 1 - 3/(4(n1+n2) - 9)``.
    """
    base = cohens_d(group1, group2)
    n_total = len(group1) + len(group2)
    correction = 1.0 - 3.0 / (4.0 * n_total - 9.0)
    g = base["cohens_d"] * correction
    return {
        "hedges_g": g,
        "cohens_d": base["cohens_d"],
        "correction_factor": correction,
        "interpretation": interpret_cohens_d(g),
    }


def glass_delta(control: Sequence[float], treatment: Sequence[float]) -> Dict[str, Any]:
    """Glass's delta, ``(mean_treatment - mean_control) / sd_control``."""
    c = as_sample(control, "control", min_size=2)
    t = as_sample(treatment, "treatment", min_size=1)
    control_sd = descriptive.stdev(c)
    delta = standardize(descriptive.mean(t) - descriptive.mean(c), control_sd)
    return {
        "glass_delta": delta,
        "interpretation": interpret_cohens_d(delta),
        "control_sd": control_sd,
    }


def paired_cohens_d(group1: Sequence[float], group2: Sequence[float]) -> Dict[str, Any]:
    """Cohen's d for paired samples: mean over SD of ``group2 - group1``."""
    g1, g2 = as_paired(group1, group2, min_size=2)
    differences = paired_differences(g1, g2)
    mean_diff = descriptive.mean(differences)
    sd_diff = descriptive.stdev(differences)
    d = standardize(mean_diff, sd_diff)
    return {
        "cohens_d": d,
        "interpretation": interpret_cohens_d(d),
        "mean_diff": mean_diff,
        "sd_diff": sd_diff,
    }


def rank_biserial(u: float, n1: int, n2: int) -> float:
    """Rank-biserial correlation ``1 - 2U / (n1 n2)`` for Mann-Whitney U."""
    return 1.0 - 2.0 * u / (n1 * n2)


def eta_omega_squared(
    ss_between: float, ss_total: float, df_between: int, ms_within: float
) -> Dict[str, Any]:
    """
    ANOVA effect sizes.

    ``eta^2 = SS_between / SS_total`` and
    ``omega^2 = (SS_between - df_between MS_within) / (SS_total + MS_within)``,
    floored at 0. Both are 0.0 when SS_total is 0.
    """
    if ss_total == 0:
        eta_sq = omega_sq = 0.0
    else:
        eta_sq = ss_between / ss_total
        omega_sq = (ss_between - df_between * ms_within) / (ss_total + ms_within)
        omega_sq = max(0.0, omega_sq)
    return {
        "eta_squared": eta_sq,
        "omega_squared": omega_sq,
        "interpretation": interpret_variance_explained(eta_sq),
    }


def epsilon_squared(h: float, n_total: int) -> float:
    """Kruskal-Wallis effect size ``H / (N - 1)``."""
    if n_total <= 1:
        return 0.0
    return h / (n_total - 1)


def calculate(
    group1: Sequence[float],
    group2: Sequence[float],
    options: Optional[EffectSizeOptions] = None,
) -> Dict[str, Any]:
    """
    Effect size of the requested type for two samples.

    With ``options.paired`` the paired Cohen's d is returned whatever the type.
    For Glass's delta, `group1` is the control group.
    """
    options = options or EffectSizeOptions()
    if options.paired:
        return paired_cohens_d(group1, group2)
    if options.type is EffectSizeType.COHENS_D:
        return cohens_d(group1, group2)
    if options.type is EffectSizeType.HEDGES_G:
        return hedges_g(group1, group2)
    if options.type is EffectSizeType.GLASS_DELTA:
        return glass_delta(group1, group2)
    raise ValueError(f"Unknown effect size type: {options.type!r}")
