"""
Sample ordering and heatmap input assembly.

Samples are grouped by TopCluster (groups in module order) and, within each
group, sorted from the most to the least confident SimplicityScore. The sort
is stable, so samples that tie on both keys keep their original order.

The result bundles everything a heatmap renderer needs: the module × sample
score matrix, the normalized simplicity annotation, a 100-colour palette
for that annotation, the sample permutation and the reordered score table.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Sequence

import numpy as np
import pandas as pd
from matplotlib.colors import LinearSegmentedColormap, to_hex

from modclassify.core.errors import InputError
from modclassify.scoring.table import ScoreTable

logger = logging.getLogger(__name__)

__all__ = [
    'HeatmapInputs',
    'order_and_prepare_heatmap',
    'sort_samples',
    'normalize_simplicity',
    'simplicity_palette',
    'ANNOTATION_LABEL',
    'PALETTE_ANCHORS',
    'PALETTE_SIZE',
]

ANNOTATION_LABEL = "Simplicity Score"

# Light and dark shade of sky blue ("deepskyblue4")
PALETTE_ANCHORS: tuple[str, str] = ("#E0F3FF", "#00688B")
PALETTE_SIZE = 100


@dataclass
class HeatmapInputs:
    """
    Everything needed to draw the module classification heatmap.

    Attributes:
        matrix: Module scores (modules × samples), rows in module order,
            columns in sorted sample order
        order: Original row positions of the samples, in sorted order
        annotation: Normalized simplicity per sample (index = sample IDs,
            sorted order), in [0, 1]; NaN where the raw score is undefined
        palette: Hex colours from light to dark for the annotation
        scores_ordered: The score table permuted to ``order``
        metadata: Additional metadata (raw simplicity range)
    """

    matrix: pd.DataFrame
    order: list[int]
    annotation: pd.Series
    palette: list[str]
    scores_ordered: ScoreTable
    metadata: dict = field(default_factory=dict)

    @property
    def module_order(self) -> list[str]:
        return list(self.matrix.index)

    @property
    def sample_ids(self) -> list:
        return list(self.matrix.columns)

    def annotation_frame(self) -> pd.DataFrame:
        """Annotation as a one-column DataFrame labelled ``Simplicity Score``."""
        return self.annotation.rename(ANNOTATION_LABEL).to_frame()


def order_and_prepare_heatmap(
    table: ScoreTable,
    module_order: Sequence[str],
) -> HeatmapInputs:
    """
    Sort samples and assemble the heatmap inputs.

    Args:
        table: ScoreTable with SimplicityScore (from add_simplicity_scores())
        module_order: Finalized module order

    Returns:
        HeatmapInputs

    Raises:
        InputError: If the table has no SimplicityScore or lacks a module
    """
    if table.simplicity is None:
        raise InputError("score table has no SimplicityScore; run add_simplicity_scores() first")
    module_order = list(module_order)
    missing = [m for m in module_order if m not in table.scores.columns]
    if missing:
        raise InputError(f"Modules not in score table: {missing}")

    order = sort_samples(table, module_order)
    scores_ordered = table.take(order)

    matrix = scores_ordered.scores[module_order].T
    simplicity = scores_ordered.simplicity
    annotation = normalize_simplicity(simplicity)

    return HeatmapInputs(
        matrix=matrix,
        order=order,
        annotation=annotation,
        palette=simplicity_palette(),
        scores_ordered=scores_ordered,
        metadata={
            "simplicity_min": _nan_to_none(simplicity.min()),
            "simplicity_max": _nan_to_none(simplicity.max()),
        },
    )


def sort_samples(table: ScoreTable, module_order: Sequence[str]) -> list[int]:
    """
    Row positions sorted by (TopCluster position, SimplicityScore descending).

    Samples whose TopCluster is not in module_order (Unclassified) go after
    every group. Undefined simplicity scores go last within their group.
    """
    rank = {m: i for i, m in enumerate(module_order)}
    n_groups = len(rank)
    top = table.top_cluster.to_numpy()
    simp = table.simplicity.to_numpy(dtype=np.float64)

    def key(i: int):
        undefined = bool(np.isnan(simp[i]))
        return (rank.get(top[i], n_groups), undefined, 0.0 if undefined else -simp[i])

    # sorted() is stable, so full ties keep their input order
    return sorted(range(table.n_samples), key=key)


def normalize_simplicity(simplicity: pd.Series) -> pd.Series:
    """
    Min-max normalize simplicity scores to [0, 1].

    When every defined score is equal (or none is defined) the range is
    zero and every defined sample gets 0. Undefined scores stay NaN.
    """
    lo = simplicity.min()
    hi = simplicity.max()
    if pd.notna(lo) and pd.notna(hi) and hi > lo:
        return (simplicity - lo) / (hi - lo)

    logger.warning("Simplicity scores have zero range; normalized annotation set to 0")
    return simplicity.where(simplicity.isna(), 0.0)


def simplicity_palette(
    anchors: tuple[str, str] = PALETTE_ANCHORS,
    n: int = PALETTE_SIZE,
) -> list[str]:
    """
    ``n`` hex colours linearly interpolated (in RGB) between two anchors.

    Examples:
        >>> colors = simplicity_palette()
        >>> len(colors), colors[0], colors[-1]
        (100, '#e0f3ff', '#00688b')
    """
    cmap = LinearSegmentedColormap.from_list("simplicity", list(anchors), N=n)
    return [to_hex(c) for c in cmap(np.arange(n))]


def _nan_to_none(value):
    return None if pd.isna(value) else float(value)
