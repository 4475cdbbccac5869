"""
statbench.stats.common.testing
==============================

Small pieces shared by every hypothesis test: turning a statistic's tail
probabilities into a p-value for the requested alternative, and the wording
used in result interpretations.

Examples
--------
>>> from statbench.core.names import Alternative
>>> from statbench.stats.common.testing import p_value_for, significance_phrase
>>> p_value_for(0.98, 0.02, Alternative.TWO_SIDED)
0.04
>>> significance_phrase(0.0004)
'Highly significant'
"""

from __future__ import annotations

from statbench.core.names import Alternative
from statbench.core.result import format_p_value


def p_value_for(lower_tail: float, upper_tail: float, alternative: Alternative) -> float:
    """
    p-value from the lower and upper tail probabilities of the observed statistic.

    ``less`` reads the lower tail, ``greater`` the upper tail, and
    ``two_sided`` doubles the smaller of the two (capped at 1).
    """
    if alternative is Alternative.LESS:
        p = lower_tail
    elif alternative is Alternative.GREATER:
        p = upper_tail
    elif alternative is Alternative.TWO_SIDED:
        p = 2.0 * min(lower_tail, upper_tail)
    else:
        raise ValueError(f"Unknown alternative: {alternative!r}")
    return min(1.0, max(0.0, p))


def significance_phrase(p_value: float) -> str:
    if p_value < 0.001:
        return "Highly significant"
    if p_value < 0.01:
        return "Very significant"
    if p_value < 0.05:
        return "Significant"
    return "No significant"


def describe_p_value(p_value: float) -> str:
    """``p < 0.001`` or ``p = 0.0123``."""
    text = format_p_value(p_value)
    return f"p {text}" if text.startswith("<") else f"p = {text}"


def interpret(p_value: float, subject: str) -> str:
    """One-line verdict such as ``Significant difference between groups (p = 0.012)``."""
    return f"{significance_phrase(p_value)} {subject} ({describe_p_value(p_value)})"
