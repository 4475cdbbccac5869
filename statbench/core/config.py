"""
statbench.core.config
=====================

Per-component option objects.

Each statistical entry point takes one of these dataclasses instead of a loose
keyword map. Fields are typed and defaulted; enum-typed fields also accept the
enum's string value. Everything is validated in `__post_init__`, so an invalid
configuration fails where it is built, with a message naming the bad value.

Examples
--------
>>> from statbench.core.config import TTestOptions, CIOptions
>>> TTestOptions(alternative="greater").alternative.value
'greater'
>>> CIOptions(confidence_level=1.5)
Traceback (most recent call last):
...
ValueError: confidence_level must be in (0, 1), got 1.5
"""

from __future__ import annotations
import math
from dataclasses import dataclass
from typing import List, Literal, Optional, Union

from statbench.core.names import (
    Alternative,
    Center,
    CIMethod,
    CorrectionMethod,
    EffectSizeType,
    PowerAnalysisType,
    TestKind,
    coerce_enum,
)

DEFAULT_ALPHA = 0.05
DEFAULT_CONFIDENCE_LEVEL = 0.95
DEFAULT_BOOTSTRAP_ITERATIONS = 10_000
DEFAULT_POWER = 0.80


def check_open_unit(name: str, value: float) -> None:
    """Raise unless `value` lies strictly inside (0, 1)."""
    if not (isinstance(value, (int, float)) and 0 < value < 1):
        raise ValueError(f"{name} must be in (0, 1), got {value}")


@dataclass
class TTestOptions:
    """Options for the independent-samples t-test.

    Parameters
    ----------
    equal_variance : bool, default=False
        Pool the variances (Student's t). The default is Welch's t.
    alternative : Alternative or str, default="two_sided"
        Direction of the alternative for ``mean1 - mean2``
    confidence_level : float, default=0.95
        Confidence level of the interval for the mean difference
    """

    equal_variance: bool = False
    alternative: Union[Alternative, str] = Alternative.TWO_SIDED
    confidence_level: float = DEFAULT_CONFIDENCE_LEVEL

    def __post_init__(self) -> None:
        self.alternative = coerce_enum(Alternative, self.alternative)
        check_open_unit("confidence_level", self.confidence_level)


@dataclass
class PairedTTestOptions:
    """Options for the paired t-test (`mu` is the hypothesized mean difference)."""

    mu: float = 0.0
    alternative: Union[Alternative, str] = Alternative.TWO_SIDED
    confidence_level: float = DEFAULT_CONFIDENCE_LEVEL

    def __post_init__(self) -> None:
        self.alternative = coerce_enum(Alternative, self.alternative)
        check_open_unit("confidence_level", self.confidence_level)
        if not math.isfinite(self.mu):
            raise ValueError(f"mu must be finite, got {self.mu}")


@dataclass
class AnovaOptions:
    """Options for one-way ANOVA (`labels` are echoed into the metadata)."""

    labels: Optional[List[str]] = None


@dataclass
class RankTestOptions:
    """Options shared by Mann-Whitney, Wilcoxon and Kruskal-Wallis."""

    alternative: Union[Alternative, str] = Alternative.TWO_SIDED

    def __post_init__(self) -> None:
        self.alternative = coerce_enum(Alternative, self.alternative)


@dataclass
class EffectSizeOptions:
    """Effect size selection for `effect_size.calculate`."""

    type: Union[EffectSizeType, str] = EffectSizeType.COHENS_D
    paired: bool = False

    def __post_init__(self) -> None:
        self.type = coerce_enum(EffectSizeType, self.type)


@dataclass
class CIOptions:
    """
    Options for the confidence interval engine.

    Parameters
    ----------
    method : CIMethod or str, default="analytical"
        Analytical (closed form) or bootstrap
    confidence_level : float, default=0.95
    iterations : int, default=10000
        Bootstrap resamples
    seed : int, optional
        Seed for the bootstrap generator; a time-derived seed is used when None
    """

    method: Union[CIMethod, str] = CIMethod.ANALYTICAL
    confidence_level: float = DEFAULT_CONFIDENCE_LEVEL
    iterations: int = DEFAULT_BOOTSTRAP_ITERATIONS
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        self.method = coerce_enum(CIMethod, self.method)
        check_open_unit("confidence_level", self.confidence_level)
        if not isinstance(self.iterations, int) or self.iterations < 1:
            raise ValueError(f"iterations must be a positive integer, got {self.iterations}")


@dataclass
class PowerOptions:
    """
    Options for power analysis.

    Parameters
    ----------
    effect_size : float
        Cohen's d for t-tests; Cohen's f (or eta-squared, see
        `anova_effect`) for ANOVA
    analysis_type : PowerAnalysisType or str, default="a_priori"
        "a_priori" solves for n, "post_hoc" computes achieved power
    alpha : float, default=0.05
    power : float, default=0.80
        Target power (a-priori only)
    n_per_group : int, optional
        Required for post-hoc analyses
    k : int, optional
        Number of groups (ANOVA only)
    alternative : Alternative or str, default="two_sided"
        Sidedness of the t-test (ANOVA is always one-sided)
    anova_effect : {"f", "eta_squared"}, default="f"
        How `effect_size` is expressed for ANOVA
    """

    effect_size: float
    analysis_type: Union[PowerAnalysisType, str] = PowerAnalysisType.A_PRIORI
    alpha: float = DEFAULT_ALPHA
    power: float = DEFAULT_POWER
    n_per_group: Optional[int] = None
    k: Optional[int] = None
    alternative: Union[Alternative, str] = Alternative.TWO_SIDED
    anova_effect: Literal["f", "eta_squared"] = "f"

    def __post_init__(self) -> None:
        self.analysis_type = coerce_enum(PowerAnalysisType, self.analysis_type)
        self.alternative = coerce_enum(Alternative, self.alternative)
        check_open_unit("alpha", self.alpha)
        check_open_unit("power", self.power)
        if not math.isfinite(self.effect_size) or self.effect_size == 0:
            raise ValueError(
                f"effect_size must be finite and non-zero, got {self.effect_size}"
            )
        if self.anova_effect not in ("f", "eta_squared"):
            raise ValueError(
                f"anova_effect must be 'f' or 'eta_squared', got {self.anova_effect!r}"
            )
        if self.anova_effect == "eta_squared" and not 0 < self.effect_size < 1:
            raise ValueError(f"eta_squared must be in (0, 1), got {self.effect_size}")
        if self.n_per_group is not None and self.n_per_group < 2:
            raise ValueError(f"n_per_group must be at least 2, got {self.n_per_group}")
        if self.k is not None and self.k < 2:
            raise ValueError(f"k must be at least 2, got {self.k}")


@dataclass
class CorrectionOptions:
    """
    Options for multiple-comparison correction.

    For Benjamini-Hochberg, `fdr_level` (when given) replaces `alpha` as the
    threshold for the significance flags.
    """

    method: Union[CorrectionMethod, str] = CorrectionMethod.HOLM
    alpha: float = DEFAULT_ALPHA
    fdr_level: Optional[float] = None

    def __post_init__(self) -> None:
        self.method = coerce_enum(CorrectionMethod, self.method)
        check_open_unit("alpha", self.alpha)
        if self.fdr_level is not None:
            check_open_unit("fdr_level", self.fdr_level)

    @property
    def threshold(self) -> float:
        """Significance threshold for the flags of this correction."""
        if self.method is CorrectionMethod.BENJAMINI_HOCHBERG and self.fdr_level:
            return self.fdr_level
        return self.alpha


@dataclass
class LeveneOptions:
    """Options for Levene's test (`center="median"` is Brown-Forsythe)."""

    center: Union[Center, str] = Center.MEDIAN
    alpha: float = DEFAULT_ALPHA

    def __post_init__(self) -> None:
        self.center = coerce_enum(Center, self.center)
        check_open_unit("alpha", self.alpha)


@dataclass
class CompareOptions:
    """
    Options for the test-selection orchestrator.

    Parameters
    ----------
    test : TestKind or str, optional
        Force a specific test instead of selecting one
    check_assumptions : bool, default=True
        Screen the samples with the skewness/kurtosis quick check before
        choosing a parametric test
    alternative : Alternative or str, default="two_sided"
    confidence_level : float, default=0.95
    labels : list of str, optional
        Group labels (multi-group comparisons)
    """

    test: Optional[Union[TestKind, str]] = None
    check_assumptions: bool = True
    alternative: Union[Alternative, str] = Alternative.TWO_SIDED
    confidence_level: float = DEFAULT_CONFIDENCE_LEVEL
    labels: Optional[List[str]] = None

    def __post_init__(self) -> None:
        if self.test is not None:
            self.test = coerce_enum(TestKind, self.test)
        self.alternative = coerce_enum(Alternative, self.alternative)
        check_open_unit("confidence_level", self.confidence_level)
