"""
statbench.api.analysis
======================

Keyword-style entry points for effect sizes, confidence intervals and
power analysis.

Each function builds the corresponding option object from its keyword
arguments (so string values are validated the same way) and delegates to the
module in `statbench.stats.methods`.

Examples
--------
>>> from statbench.api.analysis import effect_size, power_analysis
>>> effect_size([4, 4.5, 5, 5.5, 6], [5, 5.5, 6, 6.5, 7], type="hedges_g")["interpretation"]
'large'
>>> power_analysis("t_test", effect_size=0.5).n_per_group
63
"""

from __future__ import annotations
from typing import Any, Dict, Literal, Optional, Sequence, Union

from statbench.core.config import (
    DEFAULT_ALPHA,
    DEFAULT_BOOTSTRAP_ITERATIONS,
    DEFAULT_CONFIDENCE_LEVEL,
    DEFAULT_POWER,
    CIOptions,
    EffectSizeOptions,
    PowerOptions,
)
from statbench.core.names import Alternative, CIMethod, EffectSizeType, PowerAnalysisType, PowerTest
from statbench.core.result import ConfidenceInterval, PowerResult
from statbench.stats.methods import confidence_interval as ci_engine
from statbench.stats.methods import effect_size as effect_sizes
from statbench.stats.methods import power as power_methods


def effect_size(
    group1: Sequence[float],
    group2: Sequence[float],
    type: Union[EffectSizeType, str] = EffectSizeType.COHENS_D,
    paired: bool = False,
) -> Dict[str, Any]:
    """
    Standardized effect size between two samples.

    Parameters
    ----------
    group1, group2 : sequence of float
        The samples; for Glass's delta `group1` is the control group
    type : {"cohens_d", "hedges_g", "glass_delta"}, default="cohens_d"
    paired : bool, default=False
        Use the paired Cohen's d on ``group2 - group1``
    """
    return effect_sizes.calculate(group1, group2, EffectSizeOptions(type=type, paired=paired))


def confidence_interval(
    data: Sequence[float],
    statistic: ci_engine.StatisticSpec = "mean",
    method: Union[CIMethod, str] = CIMethod.ANALYTICAL,
    confidence_level: float = DEFAULT_CONFIDENCE_LEVEL,
    iterations: int = DEFAULT_BOOTSTRAP_ITERATIONS,
    seed: Optional[int] = None,
) -> ConfidenceInterval:
    """
    Confidence interval for a statistic of one sample.

    Parameters
    ----------
    data : sequence of float
    statistic : {"mean", "median", "variance", "stdev"} or callable, default="mean"
    method : {"analytical", "bootstrap"}, default="analytical"
    confidence_level : float, default=0.95
    iterations : int, default=10000
        Bootstrap resamples
    seed : int, optional
        Bootstrap seed, recorded on the result
    """
    options = CIOptions(
        method=method,
        confidence_level=confidence_level,
        iterations=iterations,
        seed=seed,
    )
    return ci_engine.calculate(data, statistic, options)


def power_analysis(
    test: Union[PowerTest, str] = PowerTest.T_TEST,
    *,
    effect_size: float,
    analysis_type: Union[PowerAnalysisType, str] = PowerAnalysisType.A_PRIORI,
    alpha: float = DEFAULT_ALPHA,
    power: float = DEFAULT_POWER,
    n_per_group: Optional[int] = None,
    k: Optional[int] = None,
    alternative: Union[Alternative, str] = Alternative.TWO_SIDED,
    anova_effect: Literal["f", "eta_squared"] = "f",
) -> PowerResult:
    """
    Sample size (a-priori) or achieved power (post-hoc) for a planned test.

    Parameters
    ----------
    test : {"t_test", "anova"}, default="t_test"
    effect_size : float
        Cohen's d (t-test) or Cohen's f / eta-squared (ANOVA)
    analysis_type : {"a_priori", "post_hoc"}, default="a_priori"
    alpha : float, default=0.05
    power : float, default=0.80
    n_per_group : int, optional
        Required for post-hoc analyses
    k : int, optional
        Number of groups, required for ANOVA
    alternative : {"two_sided", "less", "greater"}, default="two_sided"
    anova_effect : {"f", "eta_squared"}, default="f"
    """
    options = PowerOptions(
        effect_size=effect_size,
        analysis_type=analysis_type,
        alpha=alpha,
        power=power,
        n_per_group=n_per_group,
        k=k,
        alternative=alternative,
        anova_effect=anova_effect,
    )
    return power_methods.analyze(test, options)
