"""
Statistical computations.

1. **Common** (statbench.stats.common):
   Special functions and distributions, descriptive statistics, input
   validation and p-value helpers. Independent of any particular test.

2. **Methods** (statbench.stats.methods):
   Hypothesis tests, effect sizes, confidence intervals, power analysis,
   multiple-comparison corrections and assumption diagnostics, composed from
   the pieces in `common`.

Example:
--------
>>> from statbench.stats.common.distributions import normal_cdf
>>> normal_cdf(0.0)
0.5
>>> from statbench.stats.methods.multiple_comparisons import bonferroni
>>> bonferroni([0.01, 0.2])
[0.02, 0.4]
"""
