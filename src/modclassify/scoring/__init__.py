"""
Scoring stages of the module classification pipeline.

Stages, in order:

1. compute_module_scores: per-module mean expression and TopCluster
2. add_simplicity_scores: assignment confidence (gap or entropy method)
3. order_and_prepare_heatmap: sample ordering and heatmap inputs

Each stage takes and returns a ScoreTable; none mutates its input.
"""

from modclassify.scoring.table import (
    SampleScores,
    ScoreTable,
    TOP_CLUSTER,
    SIMPLICITY_SCORE,
)
from modclassify.scoring.module_scores import (
    compute_module_scores,
    module_means,
    assign_top_cluster,
)
from modclassify.scoring.simplicity import (
    SimplicityMethod,
    add_simplicity_scores,
    gap_simplicity,
    entropy_simplicity,
)
from modclassify.scoring.ordering import (
    HeatmapInputs,
    order_and_prepare_heatmap,
    sort_samples,
    normalize_simplicity,
    simplicity_palette,
    ANNOTATION_LABEL,
)

__all__ = [
    # Score table
    'SampleScores',
    'ScoreTable',
    'TOP_CLUSTER',
    'SIMPLICITY_SCORE',
    # Module scores
    'compute_module_scores',
    'module_means',
    'assign_top_cluster',
    # Simplicity
    'SimplicityMethod',
    'add_simplicity_scores',
    'gap_simplicity',
    'entropy_simplicity',
    # Ordering
    'HeatmapInputs',
    'order_and_prepare_heatmap',
    'sort_samples',
    'normalize_simplicity',
    'simplicity_palette',
    'ANNOTATION_LABEL',
]
