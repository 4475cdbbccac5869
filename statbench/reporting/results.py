"""
statbench.reporting.results
===========================

Tabulate result records as polars DataFrames.

- `results_frame`: one row per `Result` (test, statistic, p-value, headline
  effect size, confidence interval, interpretation)
- `corrections_frame`: one row per `CorrectionRecord`
- `ResultsReporter`: a small wrapper around a results frame with the usual
  follow-up queries (significant rows, per-test counts)

Examples
--------
>>> from statbench.api.compare import compare
>>> from statbench.reporting.results import results_frame
>>> r = compare([5.1, 4.9, 5.3, 5.0, 5.2], [6.2, 6.0, 6.4, 5.9, 6.1])
>>> df = results_frame([r], labels=["baseline vs candidate"])
>>> df.select("label", "test", "effect_measure").row(0)
('baseline vs candidate', 'welch_t_test', 'cohens_d')
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

import polars as pl

from statbench.core.result import CorrectionRecord, Result, effect_measure

RESULTS_SCHEMA: Dict[str, pl.DataType] = {
    "label": pl.Utf8,
    "test": pl.Utf8,
    "statistic": pl.Float64,
    "p_value": pl.Float64,
    "significant": pl.Boolean,
    "effect_measure": pl.Utf8,
    "effect_size": pl.Float64,
    "effect_interpretation": pl.Utf8,
    "ci_lower": pl.Float64,
    "ci_upper": pl.Float64,
    "interpretation": pl.Utf8,
}

CORRECTIONS_SCHEMA: Dict[str, pl.DataType] = {
    "test_index": pl.Int64,
    "method": pl.Utf8,
    "original_p": pl.Float64,
    "adjusted_p": pl.Float64,
    "alpha": pl.Float64,
    "significant_original": pl.Boolean,
    "significant_adjusted": pl.Boolean,
}


def _result_row(result: Result, label: Optional[str], alpha: float) -> Dict[str, object]:
    measure = effect_measure(result.effect_size) if result.effect_size else None
    lower, upper = result.confidence_interval or (None, None)
    return {
        "label": label,
        "test": result.test.value,
        "statistic": result.statistic,
        "p_value": result.p_value,
        "significant": result.significant(alpha),
        "effect_measure": measure[0] if measure else None,
        "effect_size": measure[1] if measure else None,
        "effect_interpretation": (result.effect_size or {}).get("interpretation"),
        "ci_lower": lower,
        "ci_upper": upper,
        "interpretation": result.interpretation,
    }


def results_frame(
    results: Sequence[Result],
    labels: Optional[Sequence[str]] = None,
    alpha: float = 0.05,
) -> pl.DataFrame:
    """
    One row per result, in input order.

    Parameters
    ----------
    results : sequence of Result
    labels : sequence of str, optional
        Row labels, one per result
    alpha : float, default=0.05
        Level for the ``significant`` column
    """
    if labels is not None and len(labels) != len(results):
        raise ValueError(f"Got {len(labels)} labels for {len(results)} results")
    row_labels: List[Optional[str]] = list(labels) if labels is not None else [None] * len(results)
    rows = [_result_row(r, label, alpha) for r, label in zip(results, row_labels)]
    if not rows:
        return pl.DataFrame(schema=RESULTS_SCHEMA)
    return pl.DataFrame(rows, schema=RESULTS_SCHEMA)


def corrections_frame(records: Sequence[CorrectionRecord]) -> pl.DataFrame:
    """One row per corrected p-value, in input order."""
    rows = [
        {
            "test_index": rec.test_index,
            "method": rec.method.value,
            "original_p": rec.original_p,
            "adjusted_p": rec.adjusted_p,
            "alpha": rec.alpha,
            "significant_original": rec.significant_original,
            "significant_adjusted": rec.significant_adjusted,
        }
        for rec in records
    ]
    if not rows:
        return pl.DataFrame(schema=CORRECTIONS_SCHEMA)
    return pl.DataFrame(rows, schema=CORRECTIONS_SCHEMA)


@dataclass
class ResultsReporter:
    """Queries over a results frame built by `results_frame`."""

    df: pl.DataFrame

    @classmethod
    def from_results(
        cls,
        results: Sequence[Result],
        labels: Optional[Sequence[str]] = None,
        alpha: float = 0.05,
    ) -> "ResultsReporter":
        return cls(results_frame(results, labels=labels, alpha=alpha))

    def significant(self) -> pl.DataFrame:
        """Rows whose test was significant, smallest p-value first."""
        return self.df.filter(pl.col("significant")).sort("p_value")

    def counts_by_test(self) -> pl.DataFrame:
        """Number of results and of significant results per test kind."""
        return (
            self.df.group_by("test")
            .agg(
                pl.len().alias("n_results"),
                pl.col("significant").sum().alias("n_significant"),
            )
            .sort("test")
        )
