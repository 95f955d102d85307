"""
Simplicity scores: how unambiguous each sample's TopCluster assignment is.

Two definitions are available, selected with SimplicityMethod:

GAP
    Rank the sample's module scores r1 >= r2 >= ... >= rN.

    - ADDS = sum over i >= 2 of (r1 - ri): dominance of the top module over
      every other module.
    - ADNS = sum of (middle[p] - shifted[q]) over p <= q, where middle is
      r2..r(N-1) and shifted is r3..rN: spread among the non-dominant
      modules, which makes the second tier ambiguous.
    - correction = (r1 - rN) / (N - 1): rescales by the dynamic range.

    simplicity = (ADDS - ADNS) * correction. With fewer than three scores
    the plain range r1 - rN is used instead.

ENTROPY
    Shift the scores so the minimum is zero, normalize to a probability
    distribution p and take the Shannon entropy H. Then

        simplicity = 1 - H / log(N)

    with N the number of modules in the module order. 0 means scores spread
    evenly; values near 1 mean a single module dominates. All-equal scores
    give exactly 0.

Undefined module scores are left out of both computations. A sample with no
defined score at all gets an undefined simplicity score.

Examples:
    >>> from modclassify.scoring import add_simplicity_scores
    >>> table = add_simplicity_scores(table, module_order, method="entropy")
    >>> gap_simplicity([5.0, 2.0])
    3.0
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Sequence, Union

import numpy as np
import pandas as pd
from scipy import stats

from modclassify.core.errors import InputError
from modclassify.scoring.table import ScoreTable

logger = logging.getLogger(__name__)

__all__ = [
    'SimplicityMethod',
    'add_simplicity_scores',
    'gap_simplicity',
    'entropy_simplicity',
]


class SimplicityMethod(Enum):
    """Definitions of the simplicity score."""

    GAP = "gap"  # Dominance gap minus second-tier spread, scaled by range
    ENTROPY = "entropy"  # 1 - normalized Shannon entropy of the score distribution

    @classmethod
    def parse(cls, method: Union[str, SimplicityMethod]) -> SimplicityMethod:
        """
        Resolve a method tag or enum member.

        Raises:
            InputError: If the tag is not a known method
        """
        if isinstance(method, cls):
            return method
        if isinstance(method, str):
            try:
                return cls(method.strip().lower())
            except ValueError:
                pass
        valid = ", ".join(repr(m.value) for m in cls)
        raise InputError(f"Unknown simplicity method {method!r}. Choose from: {valid}")


def gap_simplicity(values: Sequence[float]) -> float:
    """
    Gap-based simplicity of one sample's module scores.

    Args:
        values: Module scores; NaN entries are ignored

    Returns:
        The simplicity score, or NaN if no score is defined
    """
    r = np.sort(_defined(values))[::-1]
    n = len(r)

    if n == 0:
        return float('nan')
    if n < 3:
        return float(r[0] - r[-1])

    adds = np.sum(r[0] - r[1:])

    middle = r[1:n - 1]
    shifted = r[2:n]
    # middle[p] - shifted[q] over the upper triangle p <= q
    diffs = middle[:, np.newaxis] - shifted[np.newaxis, :]
    adns = np.sum(diffs[np.triu_indices(n - 2)])

    correction = (r[0] - r[-1]) / (n - 1)
    return float((adds - adns) * correction)


def entropy_simplicity(values: Sequence[float], n_modules: int) -> float:
    """
    Entropy-based (purity) simplicity of one sample's module scores.

    Args:
        values: Module scores; NaN entries are ignored
        n_modules: Total number of modules, used to normalize the entropy

    Returns:
        1 - H / log(n_modules); 0 when all scores are equal; NaN if no score
        is defined
    """
    x = _defined(values)
    if len(x) == 0:
        return float('nan')

    shifted = x - x.min()
    total = shifted.sum()
    if total == 0:
        return 0.0

    p = shifted / total
    p = p[p > 0]
    h = stats.entropy(p)
    return float(1.0 - h / np.log(n_modules))


def add_simplicity_scores(
    table: ScoreTable,
    module_order: Sequence[str],
    method: Union[str, SimplicityMethod] = SimplicityMethod.GAP,
) -> ScoreTable:
    """
    Compute a SimplicityScore for every sample.

    Args:
        table: ScoreTable from compute_module_scores()
        module_order: Modules to consider, normally the finalized order
        method: ``"gap"``, ``"entropy"`` or a SimplicityMethod member

    Returns:
        New ScoreTable with ``SimplicityScore`` set; every other column is
        unchanged

    Raises:
        InputError: If the method is unknown or a module is not in the table
    """
    method = SimplicityMethod.parse(method)
    module_order = list(module_order)
    missing = [m for m in module_order if m not in table.scores.columns]
    if missing:
        raise InputError(f"Modules not in score table: {missing}")

    values = table.scores[module_order].to_numpy(dtype=np.float64)

    if method is SimplicityMethod.GAP:
        simplicity = [gap_simplicity(row) for row in values]
    elif method is SimplicityMethod.ENTROPY:
        simplicity = [entropy_simplicity(row, len(module_order)) for row in values]
    else:
        raise InputError(f"Unhandled simplicity method: {method}")

    result = pd.Series(simplicity, index=table.sample_ids, dtype=np.float64)
    n_undefined = int(result.isna().sum())
    logger.info(f"Computed {method.value} simplicity for {table.n_samples} samples")
    if n_undefined:
        logger.warning(f"{n_undefined} sample(s) have an undefined simplicity score")

    return table.with_simplicity(result)


def _defined(values: Sequence[float]) -> np.ndarray:
    x = np.asarray(values, dtype=np.float64)
    return x[~np.isnan(x)]
