"""
statbench.stats.common.descriptive
==================================

Descriptive statistics over one-dimensional samples.

Functions return ``None`` when a statistic is undefined for the input (an
empty sample, or fewer observations than the statistic needs) rather than a
placeholder number. Zero-variance samples are a valid state: skewness and
kurtosis are reported as 0.0 and z-scores as all zeros.

Examples
--------
>>> from statbench.stats.common.descriptive import mean, variance, rank, quantile
>>> mean([1, 2, 3, 4])
2.5
>>> mean([]) is None
True
>>> variance([5])
0.0
>>> rank([5, 2, 8, 2, 9])
[3.0, 1.5, 4.0, 1.5, 5.0]
>>> quantile([1, 2, 3, 4], 0.5)
2.5
"""

from __future__ import annotations
import math
from typing import Dict, List, Optional, Sequence

Values = Sequence[float]


def _is_constant(values: Values) -> bool:
    return max(values) == min(values)


def mean(values: Values) -> Optional[float]:
    """Arithmetic mean, or None for an empty sample."""
    if len(values) == 0:
        return None
    return math.fsum(values) / len(values)


def median(values: Values) -> Optional[float]:
    """Middle order statistic (average of the two middle values for even n)."""
    n = len(values)
    if n == 0:
        return None
    ordered = sorted(values)
    mid = n // 2
    if n % 2:
        return float(ordered[mid])
    return (ordered[mid - 1] + ordered[mid]) / 2.0


def sum_of_squares(values: Values) -> float:
    """Sum of squared deviations from the mean (0.0 for an empty sample)."""
    if len(values) == 0 or _is_constant(values):
        return 0.0
    m = math.fsum(values) / len(values)
    return math.fsum((x - m) ** 2 for x in values)


def variance(values: Values, population: bool = False) -> Optional[float]:
    """
    Variance with the n-1 denominator (or n when `population` is True).

    A single observation has sample variance 0.0.
    """
    n = len(values)
    if n == 0:
        return None
    if n == 1:
        return 0.0
    denominator = n if population else n - 1
    return sum_of_squares(values) / denominator


def stdev(values: Values, population: bool = False) -> Optional[float]:
    var = variance(values, population=population)
    return None if var is None else math.sqrt(var)


def sem(values: Values) -> Optional[float]:
    """Standard error of the mean, ``stdev / sqrt(n)``."""
    sd = stdev(values)
    return None if sd is None else sd / math.sqrt(len(values))


def quantile(values: Values, p: float) -> Optional[float]:
    """
    Quantile by linear interpolation between order statistics.

    The position ``(n - 1) p`` is located in the sorted sample and the two
    surrounding values are interpolated.

    Raises
    ------
    ValueError
        If p is outside [0, 1].
    """
    if not 0.0 <= p <= 1.0:
        raise ValueError(f"Quantile must be in [0, 1], got {p}")
    n = len(values)
    if n == 0:
        return None
    ordered = sorted(values)
    position = (n - 1) * p
    lower = int(math.floor(position))
    upper = min(lower + 1, n - 1)
    fraction = position - lower
    return ordered[lower] + fraction * (ordered[upper] - ordered[lower])


def z_scores(values: Values) -> List[float]:
    """Standardized values ``(x - mean) / stdev``; all 0.0 for constant data."""
    if len(values) == 0:
        return []
    if len(values) < 2 or _is_constant(values):
        return [0.0] * len(values)
    m = mean(values)
    sd = stdev(values)
    return [(x - m) / sd for x in values]


def skewness(values: Values) -> Optional[float]:
    """
    Bias-corrected sample skewness (G1).

    ``n / ((n-1)(n-2)) * sum(((x - mean) / s)^3)``; None for n < 3.
    """
    n = len(values)
    if n < 3:
        return None
    if _is_constant(values):
        return 0.0
    m = mean(values)
    s = stdev(values)
    total = math.fsum(((x - m) / s) ** 3 for x in values)
    return n / ((n - 1) * (n - 2)) * total


def kurtosis(values: Values) -> Optional[float]:
    """
    Sample excess kurtosis with the small-sample correction (G2).

    ``n(n+1) / ((n-1)(n-2)(n-3)) * sum(((x - mean) / s)^4)
    - 3 (n-1)^2 / ((n-2)(n-3))``; None for n < 4.
    """
    n = len(values)
    if n < 4:
        return None
    if _is_constant(values):
        return 0.0
    m = mean(values)
    s = stdev(values)
    total = math.fsum(((x - m) / s) ** 4 for x in values)
    leading = n * (n + 1) / ((n - 1) * (n - 2) * (n - 3))
    correction = 3 * (n - 1) ** 2 / ((n - 2) * (n - 3))
    return leading * total - correction


def correlation(x: Values, y: Values) -> Optional[float]:
    """
    Pearson correlation coefficient.

    Returns 0.0 when either side is constant and None for empty input.

    Raises
    ------
    ValueError
        If the sequences differ in length.
    """
    if len(x) != len(y):
        raise ValueError(
            f"Sequences must have equal length for correlation, got {len(x)} and {len(y)}"
        )
    if len(x) == 0:
        return None
    if _is_constant(x) or _is_constant(y):
        return 0.0
    mx = mean(x)
    my = mean(y)
    cov = math.fsum((a - mx) * (b - my) for a, b in zip(x, y))
    r = cov / math.sqrt(sum_of_squares(x) * sum_of_squares(y))
    return max(-1.0, min(1.0, r))


def rank(values: Values) -> List[float]:
    """
    1-based ranks in input order, tied values sharing their average (mid) rank.
    """
    order = sorted(range(len(values)), key=lambda i: values[i])
    ranks = [0.0] * len(values)
    i = 0
    while i < len(order):
        j = i
        while j + 1 < len(order) and values[order[j + 1]] == values[order[i]]:
            j += 1
        mid_rank = (i + j) / 2.0 + 1.0
        for k in range(i, j + 1):
            ranks[order[k]] = mid_rank
        i = j + 1
    return ranks


def tie_counts(values: Values) -> List[int]:
    """Sizes of the groups of tied values (groups of one are left out)."""
    counts: Dict[float, int] = {}
    for x in values:
        counts[x] = counts.get(x, 0) + 1
    return [c for c in counts.values() if c > 1]


def tie_correction_term(values: Values) -> float:
    """``sum(t^3 - t)`` over the tie groups of `values`."""
    return float(sum(t**3 - t for t in tie_counts(values)))
