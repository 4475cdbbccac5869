"""
statbench.api - User-Friendly Facade
====================================

Entry points organized by what the user wants to find out, rather than by
statistical machinery.

- `compare.compare` / `compare_paired` / `compare_multiple`: choose and run the
  right test for two groups, paired samples, or several groups
- `analysis.effect_size`: standardized effect size between two samples
- `analysis.confidence_interval`: interval for a statistic of one sample
- `analysis.power_analysis`: sample size planning and achieved power

The most common of these are re-exported from the top-level `statbench`
package.
"""
