"""
statbench.stats.methods.multiple_comparisons
============================================

Adjusting p-values for a family of tests.

- `bonferroni`: ``min(n p, 1)``, family-wise error control
- `holm`: step-down Bonferroni, family-wise error control, uniformly more
  powerful than Bonferroni
- `benjamini_hochberg`: step-up procedure controlling the false discovery rate

Adjusted p-values keep the input order, lie in [0, 1] and, for any input,
``bonferroni >= holm >= benjamini_hochberg`` element by element. Ties in the
input are ordered stably (by position).

Examples
--------
>>> from statbench.stats.methods.multiple_comparisons import bonferroni, holm
>>> [round(p, 4) for p in bonferroni([0.01, 0.03, 0.04, 0.20])]
[0.04, 0.12, 0.16, 0.8]
>>> [round(p, 4) for p in holm([0.01, 0.03, 0.04, 0.20])]
[0.04, 0.09, 0.09, 0.2]
"""

from __future__ import annotations
from typing import List, Optional, Sequence

from statbench.core.config import CorrectionOptions
from statbench.core.names import CorrectionMethod
from statbench.core.result import CorrectionRecord


def _validate(p_values: Sequence[float]) -> List[float]:
    values = [float(p) for p in p_values]
    for i, p in enumerate(values):
        if not 0.0 <= p <= 1.0:
            raise ValueError(f"p-value at index {i} must be in [0, 1], got {p}")
    return values


def _ascending_order(values: Sequence[float]) -> List[int]:
    # sorted() is stable, so tied p-values keep their input order
    return sorted(range(len(values)), key=lambda i: values[i])


def bonferroni(p_values: Sequence[float]) -> List[float]:
    values = _validate(p_values)
    n = len(values)
    return [min(p * n, 1.0) for p in values]


def holm(p_values: Sequence[float]) -> List[float]:
    """
    Holm-Bonferroni step-down adjustment.

    Sorted ascending, the p-value of rank r (1-based) is multiplied by
    ``n - r + 1``; a running maximum then keeps the sequence monotone.
    """
    values = _validate(p_values)
    n = len(values)
    adjusted = [0.0] * n
    running_max = 0.0
    for rank, index in enumerate(_ascending_order(values), start=1):
        running_max = max(running_max, min(values[index] * (n - rank + 1), 1.0))
        adjusted[index] = running_max
    return adjusted


def benjamini_hochberg(p_values: Sequence[float]) -> List[float]:
    """
    Benjamini-Hochberg step-up adjustment.

    Sorted ascending, the p-value of rank r is multiplied by ``n / r``; a
    running minimum taken from the largest rank down keeps it monotone.
    """
    values = _validate(p_values)
    n = len(values)
    adjusted = [0.0] * n
    running_min = 1.0
    order = _ascending_order(values)
    for rank in range(n, 0, -1):
        index = order[rank - 1]
        running_min = min(running_min, values[index] * n / rank)
        adjusted[index] = running_min
    return adjusted


_ADJUSTERS = {
    CorrectionMethod.BONFERRONI: bonferroni,
    CorrectionMethod.HOLM: holm,
    CorrectionMethod.BENJAMINI_HOCHBERG: benjamini_hochberg,
}


def adjust(p_values: Sequence[float], method: CorrectionMethod) -> List[float]:
    adjuster = _ADJUSTERS.get(method)
    if adjuster is None:
        raise ValueError(f"Unknown correction method: {method!r}")
    return adjuster(p_values)


def correct(
    p_values: Sequence[float], options: Optional[CorrectionOptions] = None
) -> List[CorrectionRecord]:
    """
    Adjust a family of p-values and flag which remain significant.

    Returns one `CorrectionRecord` per input, in input order, with a 1-based
    `test_index`. The significance threshold is ``options.alpha``, or
    ``options.fdr_level`` for Benjamini-Hochberg when it is set.
    """
    options = options or CorrectionOptions()
    values = _validate(p_values)
    adjusted = adjust(values, options.method)
    threshold = options.threshold
    return [
        CorrectionRecord(
            test_index=i + 1,
            original_p=p,
            adjusted_p=adj,
            alpha=threshold,
            significant_original=p < threshold,
            significant_adjusted=adj < threshold,
            method=options.method,
        )
        for i, (p, adj) in enumerate(zip(values, adjusted))
    ]


def reject(
    p_values: Sequence[float], options: Optional[CorrectionOptions] = None
) -> List[bool]:
    """Booleans marking the hypotheses rejected after correction."""
    return [record.significant_adjusted for record in correct(p_values, options)]


def bonferroni_alpha(n_tests: int, family_wise_alpha: float = 0.05) -> float:
    """Per-test significance level that keeps the family-wise rate at `family_wise_alpha`."""
    if n_tests < 1:
        raise ValueError(f"n_tests must be at least 1, got {n_tests}")
    return family_wise_alpha / n_tests
