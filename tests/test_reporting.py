"""polars tables built from result records."""

from __future__ import annotations

import polars as pl
import pytest

from statbench.api.compare import compare, compare_multiple
from statbench.core.config import CorrectionOptions
from statbench.reporting.results import (
    CORRECTIONS_SCHEMA,
    RESULTS_SCHEMA,
    ResultsReporter,
    corrections_frame,
    results_frame,
)
from statbench.stats.methods.multiple_comparisons import correct
from statbench.stats.methods.nonparametric import mann_whitney


@pytest.fixture
def results():
    return [
        compare([5.1, 4.9, 5.3, 5.0, 5.2], [6.2, 6.0, 6.4, 5.9, 6.1]),
        compare([5.1, 4.9, 5.3, 5.0, 5.2], [5.0, 5.2, 5.1, 4.9, 5.3]),
        mann_whitney([1, 2, 3, 4, 5], [6, 7, 8, 9, 10]),
        compare_multiple([[1.0, 2.0, 3.0], [1.5, 2.5, 3.5], [8.0, 9.0, 10.0]]),
    ]


class TestResultsFrame:
    def test_one_row_per_result(self, results):
        df = results_frame(results, labels=["a", "b", "c", "d"])
        assert df.columns == list(RESULTS_SCHEMA)
        assert df.height == 4
        assert df["label"].to_list() == ["a", "b", "c", "d"]
        assert df["test"].to_list() == ["welch_t_test", "welch_t_test", "mann_whitney", "anova"]
        assert df["effect_measure"].to_list() == ["cohens_d", "cohens_d", "rank_biserial", "eta_squared"]

    def test_confidence_interval_columns(self, results):
        df = results_frame(results)
        first = df.row(0, named=True)
        assert first["ci_lower"] == results[0].confidence_interval[0]
        assert first["ci_upper"] == results[0].confidence_interval[1]
        assert df["ci_lower"].null_count() == 2

    def test_significance_uses_alpha(self, results):
        loose = results_frame(results, alpha=0.05)
        strict = results_frame(results, alpha=1e-12)
        assert loose["significant"].to_list()[:2] == [True, False]
        assert not any(strict["significant"].to_list())

    def test_labels_must_match(self, results):
        with pytest.raises(ValueError, match="Got 1 labels for 4 results"):
            results_frame(results, labels=["only"])

    def test_empty(self):
        df = results_frame([])
        assert df.height == 0
        assert df.schema == pl.Schema(RESULTS_SCHEMA)


class TestReporter:
    def test_significant_rows_sorted_by_p_value(self, results):
        reporter = ResultsReporter.from_results(results, labels=["a", "b", "c", "d"])
        significant = reporter.significant()
        assert "b" not in significant["label"].to_list()
        p_values = significant["p_value"].to_list()
        assert p_values == sorted(p_values)

    def test_counts_by_test(self, results):
        counts = ResultsReporter.from_results(results).counts_by_test()
        rows = {row["test"]: row for row in counts.iter_rows(named=True)}
        assert rows["welch_t_test"]["n_results"] == 2
        assert rows["welch_t_test"]["n_significant"] == 1
        assert rows["mann_whitney"]["n_results"] == 1
        assert counts["test"].to_list() == sorted(rows)


class TestCorrectionsFrame:
    def test_rows_follow_records(self):
        records = correct([0.01, 0.03, 0.04, 0.20], CorrectionOptions(method="bonferroni"))
        df = corrections_frame(records)
        assert df.columns == list(CORRECTIONS_SCHEMA)
        assert df["test_index"].to_list() == [1, 2, 3, 4]
        assert df["method"].unique().to_list() == ["bonferroni"]
        assert df["significant_adjusted"].to_list() == [True, False, False, False]
        assert df["adjusted_p"].to_list() == pytest.approx([0.04, 0.12, 0.16, 0.8])

    def test_empty(self):
        assert corrections_frame([]).height == 0
