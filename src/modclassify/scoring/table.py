"""
Per-sample score table shared by the scoring stages.

ScoreTable has a fixed schema known before any scoring starts: one float
column per module (keyed by the finalized module order), a ``TopCluster``
label and, once the simplicity stage has run, a ``SimplicityScore``.
Stages never mutate a table; they return a new one with columns added.

Missing values:
    Module scores and simplicity scores are float columns where NaN means
    "undefined" (no gene overlap, or every overlapping value unmeasured).
    ``record()`` exposes a single sample with those NaNs surfaced as None.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np
import pandas as pd

from modclassify.core.errors import InputError

__all__ = [
    'SampleScores',
    'ScoreTable',
    'TOP_CLUSTER',
    'SIMPLICITY_SCORE',
]

TOP_CLUSTER = 'TopCluster'
SIMPLICITY_SCORE = 'SimplicityScore'


@dataclass(frozen=True)
class SampleScores:
    """
    Scores for one sample.

    Attributes:
        sample_id: Sample identifier
        scores: Module name -> score, None where undefined
        top_cluster: Assigned module (or the Unclassified sentinel)
        simplicity: Assignment confidence, None if not computed or undefined
    """

    sample_id: str
    scores: dict[str, Optional[float]]
    top_cluster: str
    simplicity: Optional[float] = None


class ScoreTable:
    """
    Module scores, TopCluster and SimplicityScore for every sample.

    Attributes:
        module_order: Finalized module order; also the module column order
        scores: Float DataFrame (samples × modules), NaN = undefined
        top_cluster: TopCluster label per sample
        simplicity: SimplicityScore per sample, or None before that stage

    Invariants:
        - scores.columns equals module_order
        - top_cluster.index and simplicity.index equal scores.index
    """

    def __init__(
        self,
        scores: pd.DataFrame,
        module_order: Sequence[str],
        top_cluster: pd.Series,
        simplicity: Optional[pd.Series] = None,
    ):
        module_order = list(module_order)
        if list(scores.columns) != module_order:
            raise InputError(
                f"score columns {list(scores.columns)} must match module order {module_order}"
            )
        if not top_cluster.index.equals(scores.index):
            raise InputError("TopCluster index must match the score table's samples")
        if simplicity is not None and not simplicity.index.equals(scores.index):
            raise InputError("SimplicityScore index must match the score table's samples")

        self._scores = scores.astype(np.float64)
        self._module_order = module_order
        self._top_cluster = top_cluster.rename(TOP_CLUSTER)
        self._simplicity = None if simplicity is None else simplicity.astype(np.float64).rename(SIMPLICITY_SCORE)

    @property
    def module_order(self) -> list[str]:
        return list(self._module_order)

    @property
    def scores(self) -> pd.DataFrame:
        return self._scores

    @property
    def top_cluster(self) -> pd.Series:
        return self._top_cluster

    @property
    def simplicity(self) -> Optional[pd.Series]:
        return self._simplicity

    @property
    def sample_ids(self) -> pd.Index:
        return self._scores.index

    @property
    def n_samples(self) -> int:
        return len(self._scores.index)

    def with_simplicity(self, simplicity: pd.Series) -> ScoreTable:
        """Return a copy with ``SimplicityScore`` set (or overwritten)."""
        return ScoreTable(
            scores=self._scores,
            module_order=self._module_order,
            top_cluster=self._top_cluster,
            simplicity=simplicity,
        )

    def take(self, positions: Sequence[int]) -> ScoreTable:
        """Return a copy with rows permuted to ``positions``."""
        positions = list(positions)
        return ScoreTable(
            scores=self._scores.iloc[positions],
            module_order=self._module_order,
            top_cluster=self._top_cluster.iloc[positions],
            simplicity=None if self._simplicity is None else self._simplicity.iloc[positions],
        )

    def record(self, sample_id: str) -> SampleScores:
        """
        Get the scores of one sample.

        Raises:
            KeyError: If the sample is not in the table
        """
        if sample_id not in self._scores.index:
            raise KeyError(f"Sample not found: {sample_id}")

        row = self._scores.loc[sample_id]
        simplicity = None
        if self._simplicity is not None:
            simplicity = _optional(self._simplicity.loc[sample_id])
        return SampleScores(
            sample_id=sample_id,
            scores={m: _optional(row[m]) for m in self._module_order},
            top_cluster=self._top_cluster.loc[sample_id],
            simplicity=simplicity,
        )

    def records(self) -> list[SampleScores]:
        """All samples, in table order."""
        return [self.record(s) for s in self._scores.index]

    def to_dataframe(self) -> pd.DataFrame:
        """
        Flatten to one DataFrame.

        Columns are the modules in module order, then ``TopCluster`` and,
        when computed, ``SimplicityScore``. Index is the sample IDs.
        """
        df = self._scores.copy()
        df[TOP_CLUSTER] = self._top_cluster
        if self._simplicity is not None:
            df[SIMPLICITY_SCORE] = self._simplicity
        return df

    def equals(self, other: ScoreTable) -> bool:
        """True when both tables hold identical values in identical order."""
        return (
            isinstance(other, ScoreTable)
            and self._module_order == other._module_order
            and self.to_dataframe().equals(other.to_dataframe())
        )

    def __repr__(self) -> str:
        stage = "with SimplicityScore" if self._simplicity is not None else "without SimplicityScore"
        return f"ScoreTable({self.n_samples} samples × {len(self._module_order)} modules, {stage})"


def _optional(value) -> Optional[float]:
    value = float(value)
    return None if np.isnan(value) else value
