"""Tests for module scoring and TopCluster assignment."""

import numpy as np
import pandas as pd
import pytest

from modclassify.core.errors import InputError
from modclassify.core.modules import UNCLASSIFIED
from modclassify.scoring.module_scores import assign_top_cluster, compute_module_scores
from modclassify.scoring.table import SIMPLICITY_SCORE, TOP_CLUSTER


class TestComputeModuleScores:
    """Tests for compute_module_scores()."""

    def test_module_means(self, expression_df, gene_modules):
        table, order = compute_module_scores(expression_df, gene_modules, None)

        assert order == ["A", "B", "C"]
        expected = pd.DataFrame(
            {
                "A": [4.0, 0.0, 1.0, 2.0],
                "B": [1.0, 5.0, 1.0, 2.0],
                "C": [0.0, 1.0, 2.0, 0.0],
            },
            index=pd.Index(["S1", "S2", "S3", "S4"]),
        )
        pd.testing.assert_frame_equal(table.scores, expected)

    def test_two_gene_mean(self):
        df = pd.DataFrame({"S1": [2.0, 6.0]}, index=["g1", "g2"])
        table, _ = compute_module_scores(df, {"A": ["g1", "g2"]})
        assert table.scores.loc["S1", "A"] == pytest.approx(4.0)

    def test_accepts_biomatrix(self, expression_matrix, expression_df, gene_modules):
        from_matrix, _ = compute_module_scores(expression_matrix, gene_modules)
        from_df, _ = compute_module_scores(expression_df, gene_modules)
        assert from_matrix.equals(from_df)

    def test_top_cluster(self, expression_df, gene_modules):
        table, _ = compute_module_scores(expression_df, gene_modules)
        assert list(table.top_cluster) == ["A", "B", "C", "A"]
        assert table.simplicity is None

    def test_tie_goes_to_earliest_module(self, expression_df, gene_modules):
        # S4 scores 2.0 for both A and B
        table, order = compute_module_scores(expression_df, gene_modules, ["B", "A"])
        assert order == ["B", "A", "C"]
        assert table.top_cluster["S4"] == "B"

    def test_one_row_per_sample_in_matrix_order(self, expression_df, gene_modules):
        table, _ = compute_module_scores(expression_df, gene_modules)
        assert list(table.sample_ids) == list(expression_df.columns)

    def test_unmeasured_values_ignored(self):
        df = pd.DataFrame({"S1": [2.0, np.nan], "S2": [np.nan, np.nan]}, index=["g1", "g2"])
        table, _ = compute_module_scores(df, {"A": ["g1", "g2"], "B": ["g1"]})
        assert table.scores.loc["S1", "A"] == pytest.approx(2.0)
        assert np.isnan(table.scores.loc["S2", "A"])

    def test_module_without_overlap(self, expression_df, gene_modules, caplog):
        modules = {**gene_modules, "D": ["NOT_IN_MATRIX"]}
        with caplog.at_level("WARNING"):
            table, _ = compute_module_scores(expression_df, modules)

        assert table.scores["D"].isna().all()
        assert "D" not in set(table.top_cluster)
        assert "none of its 1 genes" in caplog.text

    def test_low_overlap_warns(self, expression_df, caplog):
        with caplog.at_level("WARNING"):
            table, _ = compute_module_scores(expression_df, {"A": ["g1", "x", "y"]})
        assert "only 1/3 genes" in caplog.text
        assert table.scores.loc["S1", "A"] == pytest.approx(3.0)

    def test_unclassified_sample(self, expression_with_unmeasured_sample, gene_modules):
        table, _ = compute_module_scores(expression_with_unmeasured_sample, gene_modules)
        assert table.top_cluster["S5"] == UNCLASSIFIED
        assert table.top_cluster["S1"] == "A"

    def test_sample_built_from_none_is_unclassified(self):
        df = pd.DataFrame({"S1": [1.0, 2.0], "S2": [None, None]}, index=["g1", "g2"])
        assert df["S2"].dtype == object

        table, _ = compute_module_scores(df, {"A": ["g1"], "B": ["g2"]})
        assert table.top_cluster["S2"] == UNCLASSIFIED
        assert table.top_cluster["S1"] == "B"
        assert table.scores.loc["S2"].isna().all()

    def test_non_numeric_matrix_rejected(self, expression_df, gene_modules):
        df = expression_df.copy()
        df["S1"] = ["x"] * len(df)
        with pytest.raises(InputError):
            compute_module_scores(df, gene_modules)

    def test_duplicate_genes_rejected(self, gene_modules):
        df = pd.DataFrame({"S1": [1.0, 2.0]}, index=["g1", "g1"])
        with pytest.raises(InputError, match="duplicated"):
            compute_module_scores(df, gene_modules)

    def test_malformed_modules_rejected(self, expression_df):
        with pytest.raises(InputError):
            compute_module_scores(expression_df, {"A": "g1"})

    def test_nested_gene_list_rejected(self):
        df = pd.DataFrame({"S1": [1.0]}, index=["g1"])
        with pytest.raises(InputError, match="'A'"):
            compute_module_scores(df, {"A": [["g1"]]})

    def test_does_not_mutate_input(self, expression_df, gene_modules):
        before = expression_df.copy()
        compute_module_scores(expression_df, gene_modules)
        pd.testing.assert_frame_equal(expression_df, before)


class TestAssignTopCluster:

    def test_undefined_scores_never_win(self):
        scores = pd.DataFrame({"A": [np.nan, -5.0], "B": [-1.0, np.nan]}, index=["s1", "s2"])
        assert list(assign_top_cluster(scores)) == ["B", "A"]

    def test_all_undefined(self):
        scores = pd.DataFrame({"A": [np.nan], "B": [np.nan]}, index=["s1"])
        assert list(assign_top_cluster(scores)) == [UNCLASSIFIED]


class TestScoreTable:
    """Record access and flattening of the score table."""

    def test_record(self, expression_df, gene_modules):
        table, _ = compute_module_scores(expression_df, gene_modules)
        record = table.record("S2")
        assert record.scores == {"A": 0.0, "B": 5.0, "C": 1.0}
        assert record.top_cluster == "B"
        assert record.simplicity is None

    def test_record_missing_scores_are_none(self, expression_with_unmeasured_sample, gene_modules):
        table, _ = compute_module_scores(expression_with_unmeasured_sample, gene_modules)
        record = table.record("S5")
        assert record.scores == {"A": None, "B": None, "C": None}

    def test_unknown_sample(self, expression_df, gene_modules):
        table, _ = compute_module_scores(expression_df, gene_modules)
        with pytest.raises(KeyError):
            table.record("NOPE")

    def test_to_dataframe_columns(self, expression_df, gene_modules):
        table, _ = compute_module_scores(expression_df, gene_modules)
        assert list(table.to_dataframe().columns) == ["A", "B", "C", TOP_CLUSTER]
        table = table.with_simplicity(pd.Series(0.0, index=table.sample_ids))
        assert list(table.to_dataframe().columns) == ["A", "B", "C", TOP_CLUSTER, SIMPLICITY_SCORE]
        assert len(table.records()) == 4
