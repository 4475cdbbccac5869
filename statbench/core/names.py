"""
statbench.core.names
====================

Typed names shared across the package.

- `TestKind`: the closed set of tests a `Result` can come from.
- `Alternative`, `Center`, `CIMethod`, `StatisticKind`, `EffectSizeType`,
  `CorrectionMethod`, `PowerTest`, `PowerAnalysisType`: option vocabularies.
- `coerce_enum`: turn a user-supplied string into one of the above, or fail
  with a message naming the bad value.

Examples
--------
>>> from statbench.core.names import TestKind, Alternative, coerce_enum
>>> TestKind.WELCH_T.value
'welch_t_test'
>>> coerce_enum(Alternative, "less") is Alternative.LESS
True
>>> coerce_enum(Alternative, "sideways")
Traceback (most recent call last):
...
ValueError: Unknown alternative: 'sideways' (expected one of: two_sided, less, greater)
"""

from __future__ import annotations
import re
from enum import Enum
from typing import Type, TypeVar, Union


class TestKind(str, Enum):
    """Tests that produce a result record.

    - STUDENT_T / WELCH_T / PAIRED_T: t-tests
    - ANOVA: one-way analysis of variance
    - MANN_WHITNEY / WILCOXON / KRUSKAL_WALLIS: rank tests
    - SHAPIRO_WILK / LEVENE / F_TEST: assumption diagnostics
    """

    __test__ = False  # keep pytest from collecting the enum

    STUDENT_T = "student_t_test"
    WELCH_T = "welch_t_test"
    PAIRED_T = "paired_t_test"
    ANOVA = "anova"
    MANN_WHITNEY = "mann_whitney"
    WILCOXON = "wilcoxon_signed_rank"
    KRUSKAL_WALLIS = "kruskal_wallis"
    SHAPIRO_WILK = "shapiro_wilk"
    LEVENE = "levene"
    F_TEST = "f_test"


class Alternative(str, Enum):
    """Direction of the alternative hypothesis."""

    TWO_SIDED = "two_sided"
    LESS = "less"
    GREATER = "greater"


class Center(str, Enum):
    """Center used by Levene's test (MEDIAN is the Brown-Forsythe variant)."""

    MEDIAN = "median"
    MEAN = "mean"


class CIMethod(str, Enum):
    ANALYTICAL = "analytical"
    BOOTSTRAP = "bootstrap"


class StatisticKind(str, Enum):
    """Statistics the confidence interval engine knows by name."""

    MEAN = "mean"
    MEDIAN = "median"
    VARIANCE = "variance"
    STDEV = "stdev"


class EffectSizeType(str, Enum):
    COHENS_D = "cohens_d"
    HEDGES_G = "hedges_g"
    GLASS_DELTA = "glass_delta"


class CorrectionMethod(str, Enum):
    """Multiple-comparison corrections.

    BONFERRONI and HOLM control the family-wise error rate,
    BENJAMINI_HOCHBERG controls the false discovery rate.
    """

    BONFERRONI = "bonferroni"
    HOLM = "holm"
    BENJAMINI_HOCHBERG = "benjamini_hochberg"


class PowerTest(str, Enum):
    T_TEST = "t_test"
    ANOVA = "anova"


class PowerAnalysisType(str, Enum):
    A_PRIORI = "a_priori"
    POST_HOC = "post_hoc"


E = TypeVar("E", bound=Enum)


def coerce_enum(enum_cls: Type[E], value: Union[E, str]) -> E:
    """Return `value` as a member of `enum_cls`.

    Accepts members, their string values, and (case-insensitive) member names.
    Raises `ValueError` naming the invalid value otherwise.
    """
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        for member in enum_cls:
            if value == member.value or value.upper() == member.name:
                return member
    # CamelCase -> snake_case for the message
    label = re.sub(r"(?<!^)(?=[A-Z][a-z])", "_", enum_cls.__name__).lower()
    expected = ", ".join(str(m.value) for m in enum_cls)
    raise ValueError(f"Unknown {label}: {value!r} (expected one of: {expected})")
