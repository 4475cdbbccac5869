"""
statbench.stats.common.samples
==============================

Input contracts for the test layer.

Tests call these helpers before computing anything, so a sample that is too
small, contains a non-finite value, or does not pair up with its partner fails
immediately with a `ValueError` that names the offending argument.

Examples
--------
>>> from statbench.stats.common.samples import as_sample
>>> as_sample([1, 2, 3], "group1", min_size=2)
[1.0, 2.0, 3.0]
>>> as_sample([1.0], "group1", min_size=2)
Traceback (most recent call last):
...
ValueError: group1 needs at least 2 observations, got 1
"""

from __future__ import annotations
import math
from typing import List, Sequence, Tuple


def as_sample(values: Sequence[float], name: str = "sample", min_size: int = 1) -> List[float]:
    """Validate a numeric sample and return it as a list of floats."""
    sample = [float(x) for x in values]
    for i, x in enumerate(sample):
        if not math.isfinite(x):
            raise ValueError(f"{name} contains a non-finite value at index {i}: {x}")
    if len(sample) < min_size:
        raise ValueError(
            f"{name} needs at least {min_size} observations, got {len(sample)}"
        )
    return sample


def as_paired(
    group1: Sequence[float], group2: Sequence[float], min_size: int = 1
) -> Tuple[List[float], List[float]]:
    """Validate two samples that must be paired element by element."""
    first = as_sample(group1, "group1")
    second = as_sample(group2, "group2")
    if len(first) != len(second):
        raise ValueError(
            f"Paired samples must have equal length, got {len(first)} and {len(second)}"
        )
    if len(first) < min_size:
        raise ValueError(
            f"Paired samples need at least {min_size} pairs, got {len(first)}"
        )
    return first, second


def as_groups(
    groups: Sequence[Sequence[float]], min_groups: int = 2, min_size: int = 1
) -> List[List[float]]:
    """Validate a collection of independent groups."""
    if len(groups) < min_groups:
        raise ValueError(f"Need at least {min_groups} groups, got {len(groups)}")
    return [
        as_sample(group, f"group {i + 1}", min_size=min_size)
        for i, group in enumerate(groups)
    ]


def paired_differences(group1: Sequence[float], group2: Sequence[float]) -> List[float]:
    """Element-wise ``group2 - group1``."""
    return [b - a for a, b in zip(group1, group2)]
