"""
statbench.core
==============

Building blocks shared by every statistical module: the typed names
(`names`), the per-component option dataclasses (`config`) and the frozen
result records (`result`).
"""
