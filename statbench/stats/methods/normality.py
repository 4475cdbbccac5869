"""
statbench.stats.methods.normality
=================================

Normality diagnostics.

- `shapiro_wilk`: the W test with Royston's (1992) coefficient and p-value
  approximations, for 3 <= n <= 5000
- `quick_check`: skewness/kurtosis screen used before choosing a parametric test
- `assess_normality`: Shapiro-Wilk plus the moment checks, with a recommendation

The coefficients start from Blom's approximation of the expected normal order
statistics, ``m_i = Phi^-1((i - 0.375) / (n + 0.25))``. The outermost one or two
coefficients are corrected with Royston's polynomials in ``u = 1/sqrt(n)`` and
the rest are rescaled so the vector has unit length. The p-value is read off the
upper tail of a normal approximation to a transform of W: exact for n = 3,
``-log(gamma - log(1 - W))`` for 4 <= n <= 11 and ``log(1 - W)`` for n >= 12.

Examples
--------
>>> from statbench.stats.methods.normality import shapiro_wilk
>>> r = shapiro_wilk([4.0, 4.0, 4.0, 4.0])
>>> (r.statistic, r.p_value)
(1.0, 1.0)
>>> shapiro_wilk([1.0, 2.0])
Traceback (most recent call last):
...
ValueError: Shapiro-Wilk test requires 3 <= n <= 5000, got n = 2
"""

from __future__ import annotations
import logging
import math
from typing import Any, Dict, List, Optional, Sequence

from statbench.core.names import TestKind
from statbench.core.result import NormalityResult
from statbench.stats.common import descriptive
from statbench.stats.common.distributions import normal_quantile, normal_sf
from statbench.stats.common.samples import as_sample
from statbench.stats.common.testing import describe_p_value

logger = logging.getLogger(__name__)

MIN_N = 3
MAX_N = 5000
SKEWNESS_LIMIT = 2.0
KURTOSIS_LIMIT = 7.0

# Royston (1992) corrections for the last two coefficients, ascending powers of u
_A_N_POLY = (0.0, 0.221157, -0.147981, -2.071190, 4.434685, -2.706056)
_A_N1_POLY = (0.0, 0.042981, -0.293762, -1.752461, 5.682633, -3.582633)


def _poly(coefficients: Sequence[float], x: float) -> float:
    result = 0.0
    for c in reversed(coefficients):
        result = result * x + c
    return result


def shapiro_wilk_coefficients(n: int) -> List[float]:
    """Royston's approximation of the Shapiro-Wilk coefficients for sample size n."""
    if n == 3:
        root_half = math.sqrt(0.5)
        return [-root_half, 0.0, root_half]

    m = [normal_quantile((i - 0.375) / (n + 0.25)) for i in range(1, n + 1)]
    ssq_m = math.fsum(x * x for x in m)
    u = 1.0 / math.sqrt(n)
    a_n = m[-1] / math.sqrt(ssq_m) + _poly(_A_N_POLY, u)

    if n > 5:
        a_n1 = m[-2] / math.sqrt(ssq_m) + _poly(_A_N1_POLY, u)
        phi = (ssq_m - 2 * m[-1] ** 2 - 2 * m[-2] ** 2) / (1 - 2 * a_n**2 - 2 * a_n1**2)
        a = [x / math.sqrt(phi) for x in m]
        a[0], a[1], a[-2], a[-1] = -a_n, -a_n1, a_n1, a_n
    else:
        phi = (ssq_m - 2 * m[-1] ** 2) / (1 - 2 * a_n**2)
        a = [x / math.sqrt(phi) for x in m]
        a[0], a[-1] = -a_n, a_n
    return a


def _royston_p_value(w: float, n: int) -> float:
    if w >= 1.0:
        return 1.0
    if n == 3:
        p = 6.0 / math.pi * (math.asin(math.sqrt(w)) - math.asin(math.sqrt(0.75)))
        return min(1.0, max(0.0, p))

    if n <= 11:
        gamma = 0.459 * n - 2.273
        inner = gamma - math.log1p(-w)
        if inner <= 0:
            return 0.0
        y = -math.log(inner)
        mu = 0.5440 - 0.39978 * n + 0.025054 * n**2 - 0.0006714 * n**3
        sigma = math.exp(1.3822 - 0.77857 * n + 0.062767 * n**2 - 0.0020322 * n**3)
    else:
        ln_n = math.log(n)
        y = math.log1p(-w)
        mu = 0.0038915 * ln_n**3 - 0.083751 * ln_n**2 - 0.31082 * ln_n - 1.5861
        sigma = math.exp(0.0030302 * ln_n**2 - 0.082676 * ln_n - 0.4803)
    return normal_sf((y - mu) / sigma)


def shapiro_wilk(data: Sequence[float], alpha: float = 0.05) -> NormalityResult:
    """
    Shapiro-Wilk test of normality.

    Args:
        data: Sample with 3 <= n <= 5000 finite values
        alpha: Level at which `is_normal` is decided (``p > alpha``)

    Returns:
        NormalityResult with W in (0, 1] and its p-value. Constant data is
        reported as W = 1.0, p = 1.0.
    """
    sample = as_sample(data, "data")
    n = len(sample)
    if not MIN_N <= n <= MAX_N:
        raise ValueError(f"Shapiro-Wilk test requires {MIN_N} <= n <= {MAX_N}, got n = {n}")

    ss = descriptive.sum_of_squares(sample)
    if ss == 0:
        logger.debug("Constant data in Shapiro-Wilk: W = 1, p = 1")
        return NormalityResult(
            test=TestKind.SHAPIRO_WILK,
            statistic=1.0,
            p_value=1.0,
            n=n,
            is_normal=True,
            interpretation="Data is constant; no evidence against normality",
        )

    a = shapiro_wilk_coefficients(n)
    ordered = sorted(sample)
    numerator = math.fsum(ai * xi for ai, xi in zip(a, ordered)) ** 2
    w = min(1.0, numerator / ss)
    p = _royston_p_value(w, n)
    is_normal = p > alpha

    if is_normal:
        interpretation = f"No evidence against normality ({describe_p_value(p)})"
    else:
        interpretation = f"Data departs from normality ({describe_p_value(p)})"
    return NormalityResult(
        test=TestKind.SHAPIRO_WILK,
        statistic=w,
        p_value=p,
        n=n,
        is_normal=is_normal,
        interpretation=interpretation,
    )


def quick_check(data: Sequence[float]) -> Dict[str, Any]:
    """
    Moment-based normality screen: ``|skewness| < 2`` and ``|kurtosis| < 7``.

    A moment that is undefined for the sample size does not count against
    normality, and samples with fewer than three values are assumed normal.
    """
    sample = as_sample(data, "data", min_size=0)
    if len(sample) < MIN_N:
        return {
            "is_normal": True,
            "skewness": None,
            "kurtosis": None,
            "reason": "Too few observations for a reliable check, assuming normal",
        }

    skew = descriptive.skewness(sample)
    kurt = descriptive.kurtosis(sample)
    skew_ok = skew is None or abs(skew) < SKEWNESS_LIMIT
    kurt_ok = kurt is None or abs(kurt) < KURTOSIS_LIMIT

    issues = []
    if not skew_ok:
        issues.append(f"high skewness ({abs(skew):.2f})")
    if not kurt_ok:
        issues.append(f"high kurtosis ({abs(kurt):.2f})")
    return {
        "is_normal": skew_ok and kurt_ok,
        "skewness": skew,
        "kurtosis": kurt,
        "skew_ok": skew_ok,
        "kurt_ok": kurt_ok,
        "reason": (
            f"Data shows {', '.join(issues)}"
            if issues
            else "Skewness and kurtosis within acceptable ranges"
        ),
    }


def assess_normality(data: Sequence[float], alpha: float = 0.05) -> Dict[str, Any]:
    """
    Combined assessment: Shapiro-Wilk (when 3 <= n <= 5000) and the moment checks.

    The data counts as normal when at most one check fails. Checks whose
    statistic is undefined for the sample size are skipped.
    """
    sample = as_sample(data, "data", min_size=MIN_N)
    n = len(sample)
    passed: List[str] = []
    failed: List[str] = []

    sw: Optional[NormalityResult] = None
    if n <= MAX_N:
        sw = shapiro_wilk(sample, alpha=alpha)
        (passed if sw.is_normal else failed).append("Shapiro-Wilk test")

    skew = descriptive.skewness(sample)
    if skew is not None:
        if abs(skew) < SKEWNESS_LIMIT:
            passed.append("Skewness check")
        else:
            failed.append(f"Skewness check (|skew| = {abs(skew):.4f})")

    kurt = descriptive.kurtosis(sample)
    if kurt is not None:
        if abs(kurt) < KURTOSIS_LIMIT:
            passed.append("Kurtosis check")
        else:
            failed.append(f"Kurtosis check (|kurt| = {abs(kurt):.4f})")

    if not failed:
        recommendation = "Data appears normally distributed. Parametric tests are appropriate."
    elif len(failed) == 1 and len(passed) >= 2:
        recommendation = "Data marginally normal. Parametric tests acceptable with caution."
    else:
        recommendation = (
            "Data shows significant departure from normality. "
            "Consider non-parametric tests."
        )

    return {
        "n": n,
        "shapiro_wilk": sw,
        "skewness": skew,
        "kurtosis": kurt,
        "tests_passed": passed,
        "tests_failed": failed,
        "is_normal": len(failed) <= 1,
        "recommendation": recommendation,
    }
