"""
Writers for classification results.

Output files:
    - Score table CSV: one row per sample, module score columns in module
      order, then TopCluster and SimplicityScore. Undefined scores are
      written as empty cells.
    - Heatmap inputs directory:
        heatmap_matrix.csv  modules × samples, sorted sample order
        annotation.csv      "Simplicity Score" per sample, normalized
        palette.json        annotation colours, sample order, permutation

All files are written atomically (temp file + rename), so an interrupted
run never leaves a half-written table behind.

Examples:
    >>> from modclassify.io.writers import write_score_table, write_heatmap_inputs
    >>> write_score_table(result.scores, Path("results/scores.csv"))
    >>> write_heatmap_inputs(result.heatmap, Path("results/heatmap"))
"""

from __future__ import annotations

import logging
from pathlib import Path

from modclassify.scoring.ordering import HeatmapInputs
from modclassify.scoring.table import ScoreTable
from modclassify.utils.fileio import atomic_write_json, atomic_write_text

logger = logging.getLogger(__name__)

__all__ = ['write_score_table', 'write_heatmap_inputs']


def write_score_table(table: ScoreTable, path: Path) -> Path:
    """
    Write a ScoreTable to CSV.

    Args:
        table: Score table to write
        path: Output CSV path; parent directories are created

    Returns:
        The path written

    Raises:
        TypeError: If table is not a ScoreTable
    """
    if not isinstance(table, ScoreTable):
        raise TypeError(f"table must be ScoreTable, got {type(table)}")

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    df = table.to_dataframe()
    df.index.name = "sample_id"
    atomic_write_text(path, df.to_csv())

    logger.info(f"Wrote score table ({table.n_samples} samples) to {path}")
    return path


def write_heatmap_inputs(hp: HeatmapInputs, directory: Path) -> dict[str, Path]:
    """
    Write heatmap inputs to a directory.

    Args:
        hp: HeatmapInputs from order_and_prepare_heatmap()
        directory: Output directory; created if needed

    Returns:
        Mapping of artifact name -> path written
    """
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)

    paths = {
        "matrix": directory / "heatmap_matrix.csv",
        "annotation": directory / "annotation.csv",
        "palette": directory / "palette.json",
    }

    matrix = hp.matrix.copy()
    matrix.index.name = "module"
    atomic_write_text(paths["matrix"], matrix.to_csv())

    annotation = hp.annotation_frame()
    annotation.index.name = "sample_id"
    atomic_write_text(paths["annotation"], annotation.to_csv())

    atomic_write_json(paths["palette"], {
        "palette": list(hp.palette),
        "module_order": hp.module_order,
        "sample_order": [str(s) for s in hp.sample_ids],
        "order": [int(i) for i in hp.order],
        **hp.metadata,
    })

    logger.info(f"Wrote heatmap inputs to {directory}")
    return paths
