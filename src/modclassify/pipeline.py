"""
End-to-end module classification.

Runs the three scoring stages in order and returns their combined result:

    expression + modules -> module scores -> simplicity -> ordered heatmap inputs

Examples:
    >>> from modclassify.pipeline import classify_samples
    >>> result = classify_samples(expr_df, gene_lists, method="entropy")
    >>> result.scores.to_dataframe().head()
    >>> result.subtype_counts()
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Mapping, Optional, Sequence, Union

import pandas as pd

from modclassify.core.biomatrix import BioMatrix
from modclassify.core.modules import REFERENCE_MODULE_ORDER, UNCLASSIFIED
from modclassify.scoring.module_scores import compute_module_scores
from modclassify.scoring.ordering import HeatmapInputs, order_and_prepare_heatmap
from modclassify.scoring.simplicity import SimplicityMethod, add_simplicity_scores
from modclassify.scoring.table import ScoreTable

logger = logging.getLogger(__name__)

__all__ = ['ClassificationResult', 'classify_samples']


@dataclass
class ClassificationResult:
    """
    Output of classify_samples().

    Attributes:
        scores: Final score table, rows in heatmap order
        module_order: Finalized module order
        method: Simplicity method used
        heatmap: Inputs for plot_module_heatmap()
    """

    scores: ScoreTable
    module_order: list[str]
    method: SimplicityMethod
    heatmap: HeatmapInputs

    def subtype_counts(self) -> pd.Series:
        """Number of samples per TopCluster, in module order (Unclassified last)."""
        counts = self.scores.top_cluster.value_counts()
        labels = list(self.module_order)
        if UNCLASSIFIED in counts.index:
            labels.append(UNCLASSIFIED)
        return counts.reindex(labels, fill_value=0).astype(int)


def classify_samples(
    matrix: Union[BioMatrix, pd.DataFrame],
    modules: Mapping[str, Sequence[str]],
    module_order: Optional[Sequence[str]] = REFERENCE_MODULE_ORDER,
    method: Union[str, SimplicityMethod] = SimplicityMethod.GAP,
) -> ClassificationResult:
    """
    Score, assign and order samples against a set of gene modules.

    Args:
        matrix: Normalized expression (genes × samples)
        modules: Module name -> gene identifiers
        module_order: Preferred module display order
        method: Simplicity method, ``"gap"`` or ``"entropy"``

    Returns:
        ClassificationResult

    Raises:
        InputError: On malformed inputs or an unknown method, before any
            scoring takes place
    """
    # Reject a bad method before scoring starts
    method = SimplicityMethod.parse(method)

    table, final_order = compute_module_scores(matrix, modules, module_order)
    table = add_simplicity_scores(table, final_order, method)
    heatmap = order_and_prepare_heatmap(table, final_order)

    result = ClassificationResult(
        scores=heatmap.scores_ordered,
        module_order=final_order,
        method=method,
        heatmap=heatmap,
    )
    logger.info(
        "Subtype assignment: "
        + ", ".join(f"{k}={v}" for k, v in result.subtype_counts().items())
    )
    return result
