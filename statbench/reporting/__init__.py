"""
statbench.reporting
===================

Tabular views (polars DataFrames) of result and correction records.
"""
