"""
Core data structure for gene-expression matrices.

BioMatrix couples a dense numeric matrix with its gene and sample labels and
checks, once, at construction time, everything the scoring stages rely on:
two dimensions, numeric values, unique non-null labels on both axes.

Biological Context:
    Expression matrices are the fundamental data structure in transcriptomics:
    - Rows = features (genes)
    - Columns = samples (tumours, patients, cell lines)
    - Values = normalized expression (e.g. log1p, then row-wise z-scored)

    Missing values (NaN) are allowed and mean "unmeasured". They are ignored
    when module scores are averaged, never coerced to zero.

Engineering Design:
    - Immutable: properties only, selections return new instances
    - Type-safe: NumPy arrays for data, Pandas for labels and metadata
    - Validated: constructor raises InputError on any malformed input

Examples:
    >>> import numpy as np
    >>> import pandas as pd
    >>> from modclassify.core.biomatrix import BioMatrix
    >>>
    >>> matrix = BioMatrix(
    ...     data=np.array([[2.0, 4.0], [6.0, 8.0]]),
    ...     feature_ids=pd.Index(["RUNX2", "SP7"]),
    ...     sample_ids=pd.Index(["OS_001", "OS_002"]),
    ... )
    >>> matrix.shape
    (2, 2)
    >>>
    >>> # Or straight from a genes x samples DataFrame
    >>> matrix = BioMatrix.from_dataframe(df)
"""

from __future__ import annotations

from typing import Optional
import numpy as np
import pandas as pd

from modclassify.core.errors import InputError

__all__ = ['BioMatrix']


class BioMatrix:
    """
    Immutable container for an expression matrix and its labels.

    Attributes:
        data: Numerical expression matrix (genes × samples), float64
        feature_ids: Row identifiers (gene symbols, Ensembl IDs)
        sample_ids: Column identifiers (sample IDs)
        sample_metadata: Optional sample annotations, indexed by sample_ids

    Shape Invariants:
        - data.shape[0] == len(feature_ids)
        - data.shape[1] == len(sample_ids)
        - feature_ids and sample_ids are unique and contain no nulls
        - sample_metadata.index equals sample_ids
    """

    def __init__(
        self,
        data: np.ndarray,
        feature_ids: pd.Index,
        sample_ids: pd.Index,
        sample_metadata: Optional[pd.DataFrame] = None,
    ):
        """
        Initialize BioMatrix with validation.

        Args:
            data: Expression matrix (genes × samples). Must be numeric; it is
                stored as float64 so NaN can represent unmeasured values.
            feature_ids: Row identifiers, unique and non-null
            sample_ids: Column identifiers, unique and non-null
            sample_metadata: DataFrame with sample annotations. Defaults to an
                empty frame indexed by sample_ids.

        Raises:
            InputError: If data is not a 2D numeric array, shapes disagree,
                or labels are duplicated or missing
        """
        if not isinstance(data, np.ndarray):
            raise InputError(f"data must be np.ndarray, got {type(data).__name__}")
        if data.ndim != 2:
            raise InputError(f"data must be 2D (genes x samples), got shape {data.shape}")
        if data.dtype == bool or not np.issubdtype(data.dtype, np.number):
            raise InputError(f"data must be numeric, got dtype {data.dtype}")
        if np.isinf(data).any():
            raise InputError(
                f"data contains {int(np.isinf(data).sum())} infinite values; "
                "only finite values or NaN (unmeasured) are allowed"
            )

        feature_ids = _as_index(feature_ids, "feature_ids")
        sample_ids = _as_index(sample_ids, "sample_ids")

        n_features, n_samples = data.shape

        if len(feature_ids) != n_features:
            raise InputError(
                f"feature_ids length ({len(feature_ids)}) must match data rows ({n_features})"
            )
        if len(sample_ids) != n_samples:
            raise InputError(
                f"sample_ids length ({len(sample_ids)}) must match data columns ({n_samples})"
            )

        _check_labels(feature_ids, "feature_ids")
        _check_labels(sample_ids, "sample_ids")

        if sample_metadata is None:
            sample_metadata = pd.DataFrame(index=sample_ids)
        elif not isinstance(sample_metadata, pd.DataFrame):
            raise InputError(
                f"sample_metadata must be pd.DataFrame, got {type(sample_metadata).__name__}"
            )
        elif not sample_metadata.index.equals(sample_ids):
            raise InputError(
                "sample_metadata.index must match sample_ids exactly. "
                f"Got {len(sample_metadata.index)} metadata rows for {len(sample_ids)} samples."
            )

        # Store as private attributes (immutability by convention)
        self._data = data.astype(np.float64, copy=False)
        self._feature_ids = feature_ids
        self._sample_ids = sample_ids
        self._sample_metadata = sample_metadata

    @classmethod
    def from_dataframe(
        cls,
        df: pd.DataFrame,
        sample_metadata: Optional[pd.DataFrame] = None,
    ) -> BioMatrix:
        """
        Build a BioMatrix from a genes × samples DataFrame.

        Every column must be numeric. Object columns holding numbers as
        strings are rejected rather than coerced. A column with no measured
        value at all (e.g. built from ``None``) is read as all-NaN.

        Raises:
            InputError: If df is not a DataFrame or has non-numeric columns
        """
        if not isinstance(df, pd.DataFrame):
            raise InputError(f"expression matrix must be pd.DataFrame, got {type(df).__name__}")

        unmeasured = [i for i in range(df.shape[1]) if df.iloc[:, i].isna().all()]
        if unmeasured:
            df = df.copy()
            for i in unmeasured:
                df.isetitem(i, np.full(len(df), np.nan))

        non_numeric = [
            col for col, dtype in df.dtypes.items()
            if dtype == bool or not pd.api.types.is_numeric_dtype(dtype)
        ]
        if non_numeric:
            preview = ", ".join(str(c) for c in non_numeric[:5])
            raise InputError(
                f"expression matrix has {len(non_numeric)} non-numeric column(s): {preview}"
            )

        return cls(
            data=df.to_numpy(dtype=np.float64),
            feature_ids=pd.Index(df.index),
            sample_ids=pd.Index(df.columns),
            sample_metadata=sample_metadata,
        )

    @property
    def data(self) -> np.ndarray:
        """Expression matrix (genes × samples)."""
        return self._data

    @property
    def feature_ids(self) -> pd.Index:
        """Row identifiers (genes)."""
        return self._feature_ids

    @property
    def sample_ids(self) -> pd.Index:
        """Column identifiers (samples)."""
        return self._sample_ids

    @property
    def sample_metadata(self) -> pd.DataFrame:
        """Annotations for samples."""
        return self._sample_metadata

    @property
    def shape(self) -> tuple[int, int]:
        """Matrix dimensions (n_features, n_samples)."""
        return self._data.shape

    @property
    def n_features(self) -> int:
        return self._data.shape[0]

    @property
    def n_samples(self) -> int:
        return self._data.shape[1]

    def select_features(self, genes) -> BioMatrix:
        """
        Subset matrix to the given genes, in the order given.

        Genes absent from the matrix are skipped, so the result may have
        zero rows.

        Examples:
            >>> sub = matrix.select_features(["RUNX2", "SP7", "NOT_A_GENE"])
            >>> list(sub.feature_ids)
            ['RUNX2', 'SP7']
        """
        positions = [self._feature_ids.get_loc(g) for g in genes if g in self._feature_ids]
        return BioMatrix(
            data=self._data[positions, :],
            feature_ids=self._feature_ids[positions],
            sample_ids=self._sample_ids,
            sample_metadata=self._sample_metadata,
        )

    def to_dataframe(self) -> pd.DataFrame:
        """Convert to a genes × samples DataFrame."""
        return pd.DataFrame(self._data, index=self._feature_ids, columns=self._sample_ids)

    def __repr__(self) -> str:
        """String representation for debugging."""
        if self.n_features == 0 or self.n_samples == 0:
            return f"BioMatrix({self.n_features} features × {self.n_samples} samples)"
        return (
            f"BioMatrix({self.n_features} features × {self.n_samples} samples)\n"
            f"  Features: {self.feature_ids[0]}...{self.feature_ids[-1]}\n"
            f"  Samples: {self.sample_ids[0]}...{self.sample_ids[-1]}"
        )


def _as_index(labels, name: str) -> pd.Index:
    if labels is None:
        raise InputError(f"{name} must be provided; the expression matrix needs row and column names")
    if isinstance(labels, pd.Index):
        return labels
    return pd.Index(list(labels))


def _check_labels(labels: pd.Index, name: str) -> None:
    """Reject null or duplicated labels, naming a few offenders."""
    if labels.isna().any():
        raise InputError(f"{name} contains {int(labels.isna().sum())} null label(s)")
    if labels.duplicated().any():
        dupes = labels[labels.duplicated()].unique()
        preview = ", ".join(str(d) for d in dupes[:5])
        raise InputError(f"{name} contains duplicated label(s): {preview}")
