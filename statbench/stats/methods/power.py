"""
statbench.stats.methods.power
=============================

Normal-approximation power analysis for t-tests and one-way ANOVA.

A-priori analyses solve for the sample size per group that reaches the target
power; post-hoc analyses compute the power achieved by a given sample size.
The two directions are inverse to each other, up to rounding n up to an
integer:

- t-test (Cohen's d): ``n = ceil(2 ((z_a + z_b) / |d|)^2)`` and
  ``power = 1 - Phi(z_a - |d| sqrt(n / 2))``
- ANOVA (Cohen's f, k groups): ``n = ceil(((z_a + z_b) / f)^2 / k)`` and
  ``power = 1 - Phi(z_a - f sqrt(k n))``

``z_a`` is ``z_{1-alpha/2}`` for a two-sided t-test and ``z_{1-alpha}``
otherwise (the ANOVA F-test is one-sided), ``z_b = z_{power}``.

Examples
--------
>>> from statbench.core.config import PowerOptions
>>> from statbench.stats.methods.power import analyze
>>> plan = analyze("t_test", PowerOptions(effect_size=0.5))
>>> plan.n_per_group
63
>>> check = analyze("t_test", PowerOptions(effect_size=0.5, analysis_type="post_hoc", n_per_group=63))
>>> check.power >= 0.80
True
"""

from __future__ import annotations
import math
from typing import Union

from statbench.core.config import PowerOptions
from statbench.core.names import Alternative, PowerAnalysisType, PowerTest, coerce_enum
from statbench.core.result import PowerResult
from statbench.stats.common.distributions import normal_cdf, normal_quantile

MIN_N_PER_GROUP = 2
ADEQUATE_POWER = 0.80
MARGINAL_POWER = 0.60


def _z_alpha(alpha: float, alternative: Alternative) -> float:
    if alternative is Alternative.TWO_SIDED:
        return normal_quantile(1.0 - alpha / 2.0)
    return normal_quantile(1.0 - alpha)


def cohens_f(options: PowerOptions) -> float:
    """Cohen's f from the options, converting eta-squared when given."""
    if options.anova_effect == "eta_squared":
        eta_sq = options.effect_size
        return math.sqrt(eta_sq / (1.0 - eta_sq))
    return abs(options.effect_size)


def _power_recommendation(power: float) -> str:
    if power >= ADEQUATE_POWER:
        return f"Adequate power ({power:.2f}) to detect the specified effect"
    if power >= MARGINAL_POWER:
        return f"Marginal power ({power:.2f}); consider increasing the sample size"
    return f"Underpowered ({power:.2f}); a larger sample is needed to detect this effect"


def _sample_size_recommendation(n_per_group: int, power: float) -> str:
    return (
        f"Collect at least {n_per_group} samples per group "
        f"to achieve {power * 100:.0f}% power"
    )


def t_test_sample_size(options: PowerOptions) -> PowerResult:
    z_a = _z_alpha(options.alpha, options.alternative)
    z_b = normal_quantile(options.power)
    d = abs(options.effect_size)
    n = max(MIN_N_PER_GROUP, math.ceil(2.0 * ((z_a + z_b) / d) ** 2))
    return PowerResult(
        analysis_type=PowerAnalysisType.A_PRIORI,
        test=PowerTest.T_TEST,
        n_per_group=n,
        total_n=2 * n,
        effect_size=options.effect_size,
        alpha=options.alpha,
        power=options.power,
        alternative=options.alternative,
        recommendation=_sample_size_recommendation(n, options.power),
    )


def t_test_power(options: PowerOptions) -> PowerResult:
    n = _require_n(options)
    z_a = _z_alpha(options.alpha, options.alternative)
    delta = abs(options.effect_size) * math.sqrt(n / 2.0)
    power = 1.0 - normal_cdf(z_a - delta)
    return PowerResult(
        analysis_type=PowerAnalysisType.POST_HOC,
        test=PowerTest.T_TEST,
        n_per_group=n,
        total_n=2 * n,
        effect_size=options.effect_size,
        alpha=options.alpha,
        power=power,
        alternative=options.alternative,
        recommendation=_power_recommendation(power),
    )


def anova_sample_size(options: PowerOptions) -> PowerResult:
    k = _require_k(options)
    f = cohens_f(options)
    z_a = normal_quantile(1.0 - options.alpha)
    z_b = normal_quantile(options.power)
    n = max(MIN_N_PER_GROUP, math.ceil(((z_a + z_b) / f) ** 2 / k))
    return PowerResult(
        analysis_type=PowerAnalysisType.A_PRIORI,
        test=PowerTest.ANOVA,
        n_per_group=n,
        total_n=k * n,
        effect_size=f,
        alpha=options.alpha,
        power=options.power,
        alternative=Alternative.GREATER,
        k=k,
        recommendation=_sample_size_recommendation(n, options.power),
    )


def anova_power(options: PowerOptions) -> PowerResult:
    k = _require_k(options)
    n = _require_n(options)
    f = cohens_f(options)
    z_a = normal_quantile(1.0 - options.alpha)
    delta = f * math.sqrt(k * n)
    power = 1.0 - normal_cdf(z_a - delta)
    return PowerResult(
        analysis_type=PowerAnalysisType.POST_HOC,
        test=PowerTest.ANOVA,
        n_per_group=n,
        total_n=k * n,
        effect_size=f,
        alpha=options.alpha,
        power=power,
        alternative=Alternative.GREATER,
        k=k,
        recommendation=_power_recommendation(power),
    )


def _require_n(options: PowerOptions) -> int:
    if options.n_per_group is None:
        raise ValueError("n_per_group is required for a post-hoc power analysis")
    return options.n_per_group


def _require_k(options: PowerOptions) -> int:
    if options.k is None:
        raise ValueError("k (number of groups) is required for an ANOVA power analysis")
    return options.k


_DISPATCH = {
    (PowerTest.T_TEST, PowerAnalysisType.A_PRIORI): t_test_sample_size,
    (PowerTest.T_TEST, PowerAnalysisType.POST_HOC): t_test_power,
    (PowerTest.ANOVA, PowerAnalysisType.A_PRIORI): anova_sample_size,
    (PowerTest.ANOVA, PowerAnalysisType.POST_HOC): anova_power,
}


def analyze(test: Union[PowerTest, str], options: PowerOptions) -> PowerResult:
    """
    Run the power analysis selected by `test` and ``options.analysis_type``.

    Raises:
        ValueError: for an unknown test or analysis type, or when a post-hoc
            analysis lacks ``n_per_group`` or an ANOVA lacks ``k``
    """
    test = coerce_enum(PowerTest, test)
    handler = _DISPATCH.get((test, options.analysis_type))
    if handler is None:
        raise ValueError(
            f"Unsupported power analysis: {test.value} / {options.analysis_type!r}"
        )
    return handler(options)
