"""Tests for BioMatrix construction and validation."""

import numpy as np
import pandas as pd
import pytest

from modclassify.core.biomatrix import BioMatrix
from modclassify.core.errors import InputError


class TestBioMatrixValidation:
    """Malformed matrices are rejected at construction."""

    def test_valid_matrix(self):
        matrix = BioMatrix(
            data=np.array([[1, 2], [3, 4]]),
            feature_ids=pd.Index(["RUNX2", "SP7"]),
            sample_ids=pd.Index(["OS_001", "OS_002"]),
        )
        assert matrix.shape == (2, 2)
        assert matrix.data.dtype == np.float64
        assert matrix.sample_metadata.index.equals(matrix.sample_ids)

    def test_not_2d(self):
        with pytest.raises(InputError, match="2D"):
            BioMatrix(np.array([1.0, 2.0]), pd.Index(["a", "b"]), pd.Index(["s"]))

    def test_not_array(self):
        with pytest.raises(InputError, match="np.ndarray"):
            BioMatrix([[1.0]], pd.Index(["a"]), pd.Index(["s"]))

    def test_non_numeric_dtype(self):
        with pytest.raises(InputError, match="numeric"):
            BioMatrix(np.array([["x"]], dtype=object), pd.Index(["a"]), pd.Index(["s"]))

    def test_infinite_values(self):
        with pytest.raises(InputError, match="infinite"):
            BioMatrix(np.array([[np.inf, 1.0]]), pd.Index(["a"]), pd.Index(["s1", "s2"]))

    def test_nan_allowed(self):
        matrix = BioMatrix(np.array([[np.nan, 1.0]]), pd.Index(["a"]), pd.Index(["s1", "s2"]))
        assert np.isnan(matrix.data[0, 0])

    def test_shape_mismatch(self):
        with pytest.raises(InputError, match="sample_ids length"):
            BioMatrix(np.zeros((2, 2)), pd.Index(["a", "b"]), pd.Index(["s1"]))

    def test_duplicate_sample_ids(self):
        with pytest.raises(InputError, match="duplicated"):
            BioMatrix(np.zeros((1, 2)), pd.Index(["a"]), pd.Index(["s1", "s1"]))

    def test_duplicate_gene_ids(self):
        with pytest.raises(InputError, match="duplicated"):
            BioMatrix(np.zeros((2, 1)), pd.Index(["a", "a"]), pd.Index(["s1"]))

    def test_null_labels(self):
        with pytest.raises(InputError, match="null"):
            BioMatrix(np.zeros((2, 1)), pd.Index(["a", None]), pd.Index(["s1"]))

    def test_missing_labels(self):
        with pytest.raises(InputError, match="must be provided"):
            BioMatrix(np.zeros((1, 1)), None, pd.Index(["s1"]))

    def test_metadata_index_mismatch(self):
        with pytest.raises(InputError, match="sample_metadata"):
            BioMatrix(
                np.zeros((1, 2)),
                pd.Index(["a"]),
                pd.Index(["s1", "s2"]),
                sample_metadata=pd.DataFrame(index=["s2", "s1"]),
            )


class TestFromDataFrame:
    """Tests for BioMatrix.from_dataframe()."""

    def test_labels_from_axes(self, expression_df):
        matrix = BioMatrix.from_dataframe(expression_df)
        assert list(matrix.feature_ids) == list(expression_df.index)
        assert list(matrix.sample_ids) == ["S1", "S2", "S3", "S4"]
        np.testing.assert_array_equal(matrix.data, expression_df.to_numpy())

    def test_string_column_rejected(self, expression_df):
        df = expression_df.copy()
        df["S2"] = df["S2"].astype(str)
        with pytest.raises(InputError, match="non-numeric"):
            BioMatrix.from_dataframe(df)

    def test_all_missing_object_column_read_as_nan(self):
        df = pd.DataFrame({"S1": [1.0, 2.0], "S2": [None, None]}, index=["g1", "g2"])
        matrix = BioMatrix.from_dataframe(df)
        assert np.isnan(matrix.data[:, 1]).all()
        np.testing.assert_array_equal(matrix.data[:, 0], [1.0, 2.0])
        assert df["S2"].dtype == object

    def test_partly_missing_string_column_rejected(self):
        df = pd.DataFrame({"S1": [1.0, 2.0], "S2": [None, "x"]}, index=["g1", "g2"])
        with pytest.raises(InputError, match="non-numeric"):
            BioMatrix.from_dataframe(df)

    def test_not_a_dataframe(self):
        with pytest.raises(InputError):
            BioMatrix.from_dataframe(np.zeros((2, 2)))

    def test_round_trip(self, expression_df):
        pd.testing.assert_frame_equal(
            BioMatrix.from_dataframe(expression_df).to_dataframe(), expression_df
        )


class TestSelectFeatures:

    def test_keeps_requested_order(self, expression_matrix):
        sub = expression_matrix.select_features(["g4", "g1"])
        assert list(sub.feature_ids) == ["g4", "g1"]
        np.testing.assert_array_equal(sub.data[0], expression_matrix.data[3])

    def test_skips_absent_genes(self, expression_matrix):
        sub = expression_matrix.select_features(["g1", "NOT_A_GENE"])
        assert list(sub.feature_ids) == ["g1"]

    def test_no_overlap_gives_empty_matrix(self, expression_matrix):
        sub = expression_matrix.select_features(["x", "y"])
        assert sub.shape == (0, 4)
        assert "0 features" in repr(sub)
