"""
statbench.core.result
=====================

Record types returned by the statistical layer.

- `Result`: the uniform output of every hypothesis test.
- `NormalityResult`, `VarianceTestResult`: assumption diagnostics.
- `ConfidenceInterval`: output of the CI engine.
- `PowerResult`: output of the power analysis.
- `CorrectionRecord`: one row of a multiple-comparison correction.

All records are frozen dataclasses. A `Result` is built once per test call;
the only sanctioned "change" is `with_effect_size`, which returns a new record.

Examples
--------
>>> from statbench.core.result import Result
>>> from statbench.core.names import TestKind
>>> r = Result(test=TestKind.WELCH_T, statistic=-2.5, p_value=0.03)
>>> r.significant()
True
>>> r.significant(alpha=0.01)
False
>>> print(r.summarize())
Test: welch_t_test
Statistic: -2.5
P-value: 0.03
Result: significant
"""

from __future__ import annotations
import math
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional, Tuple

from statbench.core.names import (
    Alternative,
    CIMethod,
    CorrectionMethod,
    PowerAnalysisType,
    PowerTest,
    TestKind,
)

Interval = Tuple[float, float]


def _check_p_value(p_value: float) -> None:
    if math.isnan(p_value) or not 0.0 <= p_value <= 1.0:
        raise ValueError(f"p_value must be in [0, 1], got {p_value}")


def _check_interval(interval: Optional[Interval]) -> None:
    if interval is None:
        return
    lower, upper = interval
    if lower > upper:
        raise ValueError(f"Interval lower bound {lower} exceeds upper bound {upper}")


def _round(value: float, digits: int) -> str:
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    return str(round(value, digits))


def format_p_value(p: float) -> str:
    """Format a p-value for display (`< 0.001` below one in a thousand)."""
    if p < 0.001:
        return "< 0.001"
    return _round(p, 4)


@dataclass(frozen=True)
class Result:
    """
    Standard result of a hypothesis test.

    Attributes
    ----------
    test : TestKind
        Which test produced the record
    statistic : float
        Test statistic (t, F, U, W or H)
    p_value : float
        p-value in [0, 1]
    effect_size : dict, optional
        Effect size keyed by measure, e.g. ``{"cohens_d": ..., "interpretation": ...}``
    confidence_interval : (float, float), optional
        Interval for the tested quantity, lower <= upper
    interpretation : str
        Human-readable verdict
    metadata : dict
        Degrees of freedom, group means, sample sizes and intermediate sums
    """

    test: TestKind
    statistic: float
    p_value: float
    effect_size: Optional[Dict[str, Any]] = None
    confidence_interval: Optional[Interval] = None
    interpretation: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        _check_p_value(self.p_value)
        _check_interval(self.confidence_interval)

    def significant(self, alpha: float = 0.05) -> bool:
        """Return True if the p-value is below `alpha`."""
        return self.p_value < alpha

    def with_effect_size(self, effect_size: Dict[str, Any]) -> "Result":
        """Return a copy of this record carrying `effect_size`."""
        return replace(self, effect_size=dict(effect_size))

    def summarize(self) -> str:
        """Generate a short multi-line summary of the result."""
        status = "significant" if self.significant() else "not significant"
        lines = [
            f"Test: {self.test.value}",
            f"Statistic: {_round(self.statistic, 4)}",
            f"P-value: {format_p_value(self.p_value)}",
            f"Result: {status}",
        ]
        if self.effect_size:
            lines.append(f"Effect size: {_format_effect_size(self.effect_size)}")
        if self.confidence_interval is not None:
            lower, upper = self.confidence_interval
            level = self.metadata.get("confidence_level", 0.95)
            lines.append(
                f"{level * 100:g}% CI: [{_round(lower, 4)}, {_round(upper, 4)}]"
            )
        return "\n".join(lines)


# measure key -> display label, in lookup order
_EFFECT_LABELS = (
    ("cohens_d", "Cohen's d"),
    ("hedges_g", "Hedges' g"),
    ("glass_delta", "Glass's delta"),
    ("eta_squared", "eta^2"),
    ("rank_biserial", "r_rb"),
    ("epsilon_squared", "epsilon^2"),
    ("r", "r"),
)


def effect_measure(effect_size: Dict[str, Any]) -> Optional[Tuple[str, float]]:
    """Return the (measure, value) pair that headlines an effect-size map."""
    for key, _ in _EFFECT_LABELS:
        if key in effect_size:
            return key, float(effect_size[key])
    return None


def _format_effect_size(effect_size: Dict[str, Any]) -> str:
    measure = effect_measure(effect_size)
    if measure is None:
        return "N/A"
    key, value = measure
    label = dict(_EFFECT_LABELS)[key]
    text = f"{label} = {_round(value, 3)}"
    if "interpretation" in effect_size:
        text += f" ({effect_size['interpretation']})"
    return text


@dataclass(frozen=True)
class NormalityResult:
    """Outcome of a normality test (Shapiro-Wilk)."""

    test: TestKind
    statistic: float
    p_value: float
    n: int
    is_normal: bool
    interpretation: str = ""

    def __post_init__(self) -> None:
        _check_p_value(self.p_value)


@dataclass(frozen=True)
class VarianceTestResult:
    """Outcome of a variance-equality test (Levene or F-test).

    `statistic` is ``inf`` when one group is constant and the other is not.
    """

    test: TestKind
    statistic: float
    p_value: float
    equal_variances: bool
    df1: int
    df2: int
    interpretation: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        _check_p_value(self.p_value)


@dataclass(frozen=True)
class ConfidenceInterval:
    """A confidence interval for a single-sample statistic."""

    statistic: str
    point_estimate: float
    interval: Interval
    confidence_level: float
    method: CIMethod
    margin_of_error: Optional[float] = None
    standard_error: Optional[float] = None
    iterations: Optional[int] = None
    seed: Optional[int] = None
    bootstrap_distribution: Optional[Dict[str, float]] = None

    def __post_init__(self) -> None:
        _check_interval(self.interval)

    @property
    def lower(self) -> float:
        return self.interval[0]

    @property
    def upper(self) -> float:
        return self.interval[1]

    def contains(self, value: float) -> bool:
        return self.interval[0] <= value <= self.interval[1]


@dataclass(frozen=True)
class PowerResult:
    """A-priori sample size or post-hoc power for a planned test."""

    analysis_type: PowerAnalysisType
    test: PowerTest
    n_per_group: int
    total_n: int
    effect_size: float
    alpha: float
    power: float
    alternative: Alternative = Alternative.TWO_SIDED
    k: Optional[int] = None
    recommendation: str = ""


@dataclass(frozen=True)
class CorrectionRecord:
    """One p-value before and after a multiple-comparison correction."""

    test_index: int
    original_p: float
    adjusted_p: float
    alpha: float
    significant_original: bool
    significant_adjusted: bool
    method: CorrectionMethod
