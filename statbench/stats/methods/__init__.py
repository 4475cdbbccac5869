"""
Statistical methods built on `statbench.stats.common`.

Available methods:
- `parametric`: t-tests and one-way ANOVA
- `nonparametric`: Mann-Whitney U, Wilcoxon signed-rank, Kruskal-Wallis H
- `effect_size`: Cohen's d, Hedges' g, Glass's delta and friends
- `confidence_interval`: analytical and bootstrap intervals
- `power`: a-priori sample size and post-hoc power
- `multiple_comparisons`: Bonferroni, Holm, Benjamini-Hochberg
- `normality`, `variance`: assumption diagnostics
"""
