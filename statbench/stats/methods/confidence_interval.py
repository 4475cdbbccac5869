"""
statbench.stats.methods.confidence_interval
===========================================

Confidence intervals for single-sample statistics.

Two methods are available:

- **analytical**: closed forms. The mean uses the t distribution
  (``mean +/- t_crit * SEM``) and the variance the chi-squared distribution
  (``[df s^2 / chi2_{1-a/2}, df s^2 / chi2_{a/2}]``). Statistics without a
  closed form here (median, standard deviation) are bootstrapped instead.
- **bootstrap**: percentile intervals from resampling with replacement. Each
  call builds its own `random.Random`; the seed (given, or derived from the
  clock) is stored on the returned record so the interval can be reproduced.

Examples
--------
>>> from statbench.core.config import CIOptions
>>> from statbench.stats.methods.confidence_interval import calculate
>>> ci = calculate([2.0, 4.0, 6.0, 8.0], "mean")
>>> ci.point_estimate
5.0
>>> ci.contains(5.0)
True
>>> a = calculate([1, 5, 2, 8, 3], "median", CIOptions(method="bootstrap", iterations=200, seed=7))
>>> b = calculate([1, 5, 2, 8, 3], "median", CIOptions(method="bootstrap", iterations=200, seed=7))
>>> a.interval == b.interval
True
"""

from __future__ import annotations
import logging
import random
import time
from typing import Callable, Optional, Sequence, Tuple, Union

from statbench.core.config import CIOptions
from statbench.core.names import CIMethod, StatisticKind, coerce_enum
from statbench.core.result import ConfidenceInterval
from statbench.stats.common import descriptive
from statbench.stats.common.distributions import chi_squared_quantile, t_quantile
from statbench.stats.common.samples import as_sample

logger = logging.getLogger(__name__)

StatisticFn = Callable[[Sequence[float]], float]
StatisticSpec = Union[StatisticKind, str, StatisticFn]

_STATISTIC_FUNCTIONS = {
    StatisticKind.MEAN: descriptive.mean,
    StatisticKind.MEDIAN: descriptive.median,
    StatisticKind.VARIANCE: descriptive.variance,
    StatisticKind.STDEV: descriptive.stdev,
}


def _resolve_statistic(statistic: StatisticSpec) -> Tuple[str, StatisticFn, Optional[StatisticKind]]:
    """Return (name, function, kind) for a named or callable statistic."""
    if callable(statistic) and not isinstance(statistic, str):
        return getattr(statistic, "__name__", "custom"), statistic, None
    kind = coerce_enum(StatisticKind, statistic)
    return kind.value, _STATISTIC_FUNCTIONS[kind], kind


def calculate(
    data: Sequence[float],
    statistic: StatisticSpec = StatisticKind.MEAN,
    options: Optional[CIOptions] = None,
) -> ConfidenceInterval:
    """
    Confidence interval for `statistic` on `data`.

    Args:
        data: The sample
        statistic: A `StatisticKind` (or its name) or any callable mapping a
            sample to a float. Callables are always bootstrapped.
        options: Method, confidence level, bootstrap iterations and seed

    Raises:
        ValueError: for an unknown statistic or method, or too small a sample
    """
    options = options or CIOptions()
    if options.method is CIMethod.ANALYTICAL:
        return analytical_ci(data, statistic, options)
    if options.method is CIMethod.BOOTSTRAP:
        return bootstrap_ci(data, statistic, options)
    raise ValueError(f"Unknown CI method: {options.method!r}")


def analytical_ci(
    data: Sequence[float],
    statistic: StatisticSpec = StatisticKind.MEAN,
    options: Optional[CIOptions] = None,
) -> ConfidenceInterval:
    """Closed-form interval for the mean or variance; bootstrap otherwise."""
    options = options or CIOptions()
    name, _, kind = _resolve_statistic(statistic)
    alpha = 1.0 - options.confidence_level

    if kind is StatisticKind.MEAN:
        sample = as_sample(data, "data", min_size=2)
        point = descriptive.mean(sample)
        se = descriptive.sem(sample)
        margin = t_quantile(len(sample) - 1, 1.0 - alpha / 2.0) * se
        return ConfidenceInterval(
            statistic=name,
            point_estimate=point,
            interval=(point - margin, point + margin),
            confidence_level=options.confidence_level,
            method=CIMethod.ANALYTICAL,
            margin_of_error=margin,
            standard_error=se,
        )

    if kind is StatisticKind.VARIANCE:
        sample = as_sample(data, "data", min_size=2)
        point = descriptive.variance(sample)
        df = len(sample) - 1
        lower = df * point / chi_squared_quantile(df, 1.0 - alpha / 2.0)
        upper = df * point / chi_squared_quantile(df, alpha / 2.0)
        return ConfidenceInterval(
            statistic=name,
            point_estimate=point,
            interval=(lower, upper),
            confidence_level=options.confidence_level,
            method=CIMethod.ANALYTICAL,
        )

    logger.debug("No closed-form interval for %s, falling back to bootstrap", name)
    return bootstrap_ci(data, statistic, options)


def bootstrap_ci(
    data: Sequence[float],
    statistic: StatisticSpec = StatisticKind.MEAN,
    options: Optional[CIOptions] = None,
) -> ConfidenceInterval:
    """
    Percentile bootstrap interval.

    Draws ``options.iterations`` resamples of the data with replacement,
    evaluates the statistic on each, and reads the interval off the sorted
    bootstrap distribution at ``alpha/2`` and ``1 - alpha/2`` (linear
    interpolation). The distribution itself is summarized as ``{"mean", "sd"}``
    and not kept.
    """
    options = options or CIOptions()
    name, fn, _ = _resolve_statistic(statistic)
    sample = as_sample(data, "data", min_size=1)
    seed = options.seed if options.seed is not None else time.time_ns()
    rng = random.Random(seed)
    n = len(sample)
    logger.debug(
        "Bootstrap %s: %d iterations, seed=%d", name, options.iterations, seed
    )

    distribution = sorted(
        fn(rng.choices(sample, k=n)) for _ in range(options.iterations)
    )
    alpha = 1.0 - options.confidence_level
    lower = descriptive.quantile(distribution, alpha / 2.0)
    upper = descriptive.quantile(distribution, 1.0 - alpha / 2.0)
    spread = descriptive.stdev(distribution)

    return ConfidenceInterval(
        statistic=name,
        point_estimate=fn(sample),
        interval=(lower, upper),
        confidence_level=options.confidence_level,
        method=CIMethod.BOOTSTRAP,
        standard_error=spread,
        iterations=options.iterations,
        seed=seed,
        bootstrap_distribution={
            "mean": descriptive.mean(distribution),
            "sd": spread,
        },
    )
