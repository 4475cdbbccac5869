"""
statbench.stats.common
======================

Generic numerical foundations.

The modules here know nothing about particular tests: `distributions` holds
the special functions and CDFs/quantiles, `descriptive` the sample summaries,
`samples` the input contracts and `testing` the p-value and wording helpers
every test shares.
"""
