"""
Module scoring and top-module assignment.

Each sample's score for a module is the mean expression, in that sample, of
the module's genes that are present in the matrix. Each sample is then
assigned the module with the highest score (its TopCluster).

Missing data:
    - A module with no gene overlap gets an undefined (NaN) score for every
      sample. It is logged, not raised, and never wins the argmax.
    - Unmeasured values are ignored in the mean; a sample whose overlapping
      values are all unmeasured gets an undefined score for that module.
    - A sample with no defined score at all is labelled ``Unclassified``.

Tie-breaking:
    The argmax scans modules in module order and keeps the first maximum,
    so ties go to the module listed earliest.

Examples:
    >>> from modclassify.scoring import compute_module_scores
    >>> table, module_order = compute_module_scores(expr_df, gene_lists)
    >>> table.top_cluster.value_counts()
"""

from __future__ import annotations

import logging
from typing import Mapping, Optional, Sequence, Union

import numpy as np
import pandas as pd

from modclassify.core.biomatrix import BioMatrix
from modclassify.core.modules import (
    GeneModuleSet,
    REFERENCE_MODULE_ORDER,
    UNCLASSIFIED,
    resolve_module_order,
)
from modclassify.scoring.table import ScoreTable

logger = logging.getLogger(__name__)

__all__ = ['compute_module_scores', 'module_means', 'assign_top_cluster']


def compute_module_scores(
    matrix: Union[BioMatrix, pd.DataFrame],
    modules: Mapping[str, Sequence[str]],
    module_order: Optional[Sequence[str]] = REFERENCE_MODULE_ORDER,
) -> tuple[ScoreTable, list[str]]:
    """
    Score every sample against every module and assign its TopCluster.

    Args:
        matrix: Expression matrix (genes × samples), as a BioMatrix or a
            numeric DataFrame with gene index and sample columns. Values are
            used as given; normalize before calling.
        modules: Module name -> gene identifiers
        module_order: Preferred display order. Listed modules come first,
            the rest follow in mapping order. None keeps mapping order.

    Returns:
        (ScoreTable, module_order) where the table has one row per sample in
        the matrix's column order and module_order is the finalized order.

    Raises:
        InputError: If the matrix or module set is malformed. Raised before
            any score is computed.
    """
    # Validate everything up front so nothing is half-computed on failure
    if not isinstance(matrix, BioMatrix):
        matrix = BioMatrix.from_dataframe(matrix)
    module_set = GeneModuleSet(modules)
    final_order = resolve_module_order(module_set, module_order)

    logger.info(
        f"Scoring {matrix.n_samples} samples against {len(final_order)} modules "
        f"({matrix.n_features} genes in matrix)"
    )

    scores = module_means(matrix, module_set, final_order)
    top_cluster = assign_top_cluster(scores)

    table = ScoreTable(scores=scores, module_order=final_order, top_cluster=top_cluster)
    return table, final_order


def module_means(
    matrix: BioMatrix,
    modules: GeneModuleSet,
    module_order: Sequence[str],
) -> pd.DataFrame:
    """
    NaN-ignoring mean of each module's overlapping genes, per sample.

    Returns:
        Float DataFrame (samples × modules) with columns in module_order.
    """
    columns = {}
    for name in module_order:
        genes = modules.overlap(name, matrix.feature_ids)
        n_listed = len(modules[name])

        if not genes:
            logger.warning(
                f"Module '{name}': none of its {n_listed} genes are in the matrix; "
                "its scores are undefined"
            )
            columns[name] = np.full(matrix.n_samples, np.nan)
            continue

        if len(genes) < n_listed / 2:
            logger.warning(
                f"Module '{name}': only {len(genes)}/{n_listed} genes are in the matrix"
            )
        else:
            logger.debug(f"Module '{name}': {len(genes)}/{n_listed} genes present")
        values = matrix.select_features(genes).data

        measured = ~np.isnan(values)
        n_measured = measured.sum(axis=0)
        totals = np.where(measured, values, 0.0).sum(axis=0)
        with np.errstate(invalid='ignore', divide='ignore'):
            columns[name] = np.where(n_measured > 0, totals / n_measured, np.nan)

    return pd.DataFrame(columns, index=matrix.sample_ids, columns=list(module_order))


def assign_top_cluster(scores: pd.DataFrame) -> pd.Series:
    """
    Stable argmax over defined scores, scanning columns left to right.

    Samples with no defined score are labelled ``UNCLASSIFIED``.
    """
    values = scores.to_numpy(dtype=np.float64)
    defined = ~np.isnan(values)
    has_any = defined.any(axis=1)

    # np.argmax returns the first maximum, which is the tie-break we want
    masked = np.where(defined, values, -np.inf)
    best = np.argmax(masked, axis=1)

    names = np.asarray(scores.columns, dtype=object)
    labels = [names[j] if ok else UNCLASSIFIED for j, ok in zip(best, has_any)]

    n_unclassified = int((~has_any).sum())
    if n_unclassified:
        logger.warning(
            f"{n_unclassified} sample(s) have no defined module score and are labelled "
            f"'{UNCLASSIFIED}'"
        )

    return pd.Series(labels, index=scores.index, dtype=object)
