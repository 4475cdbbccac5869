"""
statbench: statistical inference for comparing samples.

statbench answers the questions that come up when two or more sets of
measurements are compared: is the difference real, how large is it, how
precisely is it known, and how much data would be needed to see it?

Every hypothesis test returns the same frozen `Result` record (statistic,
p-value, effect size, confidence interval, interpretation, metadata), so
results from different tests can be reported, corrected for multiplicity and
tabulated side by side. The numerics rest on a self-contained special-function
core (normal, t, F and chi-squared distributions via the incomplete beta and
gamma functions) and carry no array-library dependency.

Layout
------
- `statbench.core`: enums, option dataclasses and result records
- `statbench.stats.common`: special functions, descriptive statistics, input checks
- `statbench.stats.methods`: tests, effect sizes, intervals, power, corrections
- `statbench.api`: test selection and keyword-style entry points
- `statbench.reporting`: polars tables of results

The library logs through the standard `logging` module under the
``statbench`` logger and stays silent unless the application configures it.

Example
-------
>>> import statbench
>>> r = statbench.compare([5.1, 4.9, 5.3, 5.0, 5.2], [6.2, 6.0, 6.4, 5.9, 6.1])
>>> r.test.value, r.significant()
('welch_t_test', True)
"""

import logging

from statbench.__version__ import __version__
from statbench.api.analysis import confidence_interval, effect_size, power_analysis
from statbench.api.compare import compare, compare_multiple, compare_paired
from statbench.core.result import Result

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "__version__",
    "Result",
    "compare",
    "compare_paired",
    "compare_multiple",
    "effect_size",
    "confidence_interval",
    "power_analysis",
]
