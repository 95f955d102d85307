"""
Module classification heatmap.

Draws the module × sample score matrix prepared by
``order_and_prepare_heatmap()`` with the normalized simplicity annotation as
a colour strip above the samples. All ordering and normalization happens
upstream; this module only renders.

Layout (unclustered)::

    Simplicity Score  ▕▓▓▓▒▒░░▓▓▒░░▏ ▕▏ annotation colorbar
    Proliferating-like▕            ▏ ▕▏
    Osteoblast-like   ▕  scores    ▏ ▕▏ score colorbar
    ...               ▕            ▏ ▕▏

With ``cluster_rows`` or ``cluster_cols`` the figure is a seaborn clustermap
instead, and the annotation strip becomes its column colours.
"""

from __future__ import annotations

import logging
from typing import Literal

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
from matplotlib.cm import ScalarMappable
from matplotlib.colors import ListedColormap, Normalize
import seaborn as sns

from modclassify.scoring.ordering import ANNOTATION_LABEL, HeatmapInputs
from modclassify.viz.core import Figure
from modclassify.viz.styles import PALETTES, Palette

logger = logging.getLogger(__name__)

__all__ = ['plot_module_heatmap', 'scale_matrix', 'annotation_colors']

ScaleAxis = Literal["none", "row", "column"]


def plot_module_heatmap(
    hp: HeatmapInputs,
    show_colnames: bool = True,
    scale: ScaleAxis = "column",
    border_color: str | None = None,
    cellwidth: float = 6,
    cellheight: float = 14,
    cluster_cols: bool = False,
    cluster_rows: bool = False,
    legend: bool = True,
    palette: Palette | None = None,
    **kwargs,
) -> Figure:
    """
    Plot the module classification heatmap.

    Parameters
    ----------
    hp : HeatmapInputs
        Output of order_and_prepare_heatmap().
    show_colnames : bool, default True
        Label columns with sample IDs.
    scale : {"none", "row", "column"}, default "column"
        Z-score the matrix along modules ("row"), samples ("column") or not
        at all before colouring.
    border_color : str, optional
        Cell border colour; defaults to the palette's border colour.
    cellwidth, cellheight : float
        Cell size in points.
    cluster_cols, cluster_rows : bool, default False
        Hierarchically cluster samples / modules (uses seaborn.clustermap and
        overrides the prepared order on that axis).
    legend : bool, default True
        Draw colorbars.
    palette : Palette, optional
        Colours; defaults to PALETTES["default"].
    **kwargs
        Passed to seaborn.heatmap / seaborn.clustermap.

    Returns
    -------
    Figure
        Wrapper around the matplotlib figure.

    Raises
    ------
    ValueError
        If ``scale`` is not one of the accepted axes.
    """
    if scale not in ("none", "row", "column"):
        raise ValueError(f"scale must be 'none', 'row' or 'column', got {scale!r}")
    if palette is None:
        palette = PALETTES["default"]
    if border_color is None:
        border_color = palette.border

    data = scale_matrix(hp.matrix, scale)
    n_modules, n_samples = data.shape

    width = max(4.0, n_samples * cellwidth / 72 + 3.0)
    height = max(2.5, (n_modules + 1) * cellheight / 72 + 1.5)

    if cluster_cols or cluster_rows:
        fig = _plot_clustered(
            data, hp, palette, border_color, show_colnames, legend,
            cluster_rows, cluster_cols, (width, height), **kwargs
        )
    else:
        fig = _plot_ordered(
            data, hp, palette, border_color, show_colnames, legend, (width, height), **kwargs
        )

    return Figure(
        fig=fig,
        title="Module Classification",
        description=f"{n_modules} modules × {n_samples} samples, scale={scale}",
        metadata={
            "n_modules": n_modules,
            "n_samples": n_samples,
            "scale": scale,
            "cluster_rows": cluster_rows,
            "cluster_cols": cluster_cols,
            "border_color": border_color,
        },
    )


def scale_matrix(matrix: pd.DataFrame, scale: ScaleAxis) -> pd.DataFrame:
    """
    Z-score a matrix along rows or columns, ignoring undefined values.

    Constant rows/columns become undefined (their standard deviation is 0).
    """
    if scale == "none":
        return matrix
    if scale == "row":
        scaled = matrix.sub(matrix.mean(axis=1), axis=0).div(matrix.std(axis=1), axis=0)
    else:
        scaled = matrix.sub(matrix.mean(axis=0), axis=1).div(matrix.std(axis=0), axis=1)
    return scaled.replace([np.inf, -np.inf], np.nan)


def annotation_colors(hp: HeatmapInputs, missing: str = "#e5e7eb") -> pd.Series:
    """Map each normalized annotation value to its palette colour."""
    n = len(hp.palette)

    def to_color(value):
        if pd.isna(value):
            return missing
        return hp.palette[int(round(float(value) * (n - 1)))]

    return hp.annotation.map(to_color).rename(ANNOTATION_LABEL)


def _plot_ordered(data, hp, palette, border_color, show_colnames, legend, figsize, **kwargs):
    n_modules = data.shape[0]
    fig = plt.figure(figsize=figsize)
    gs = fig.add_gridspec(
        2, 2,
        height_ratios=[1, max(n_modules, 1)],
        width_ratios=[1, 0.03],
        hspace=0.05,
        wspace=0.03,
    )
    ax_anno = fig.add_subplot(gs[0, 0])
    ax_heat = fig.add_subplot(gs[1, 0])

    anno_cmap = ListedColormap(hp.palette)
    sns.heatmap(
        hp.annotation.to_frame().T,
        cmap=anno_cmap,
        vmin=0,
        vmax=1,
        cbar=False,
        xticklabels=False,
        yticklabels=[ANNOTATION_LABEL],
        linewidths=0.5,
        linecolor=border_color,
        ax=ax_anno,
    )
    ax_anno.tick_params(axis='y', labelrotation=0, length=0)
    ax_anno.set_xlabel("")

    heatmap_kwargs = {
        "cmap": palette.diverging,
        "center": 0 if _is_centered(data) else None,
        "linewidths": 0.5,
        "linecolor": border_color,
        "xticklabels": show_colnames,
        "yticklabels": True,
        "cbar": legend,
        **kwargs,
    }
    if legend:
        heatmap_kwargs["cbar_ax"] = fig.add_subplot(gs[1, 1])
    sns.heatmap(data, ax=ax_heat, **heatmap_kwargs)
    ax_heat.set_facecolor(palette.missing)
    ax_heat.tick_params(axis='y', labelrotation=0, length=0)
    ax_heat.set_xlabel("")
    ax_heat.set_ylabel("")

    if legend:
        cax = fig.add_subplot(gs[0, 1])
        fig.colorbar(ScalarMappable(norm=Normalize(0, 1), cmap=anno_cmap), cax=cax)
        cax.tick_params(labelsize=6)

    return fig


def _plot_clustered(data, hp, palette, border_color, show_colnames, legend,
                    cluster_rows, cluster_cols, figsize, **kwargs):
    if data.isna().to_numpy().any():
        logger.warning("Undefined scores set to 0 for hierarchical clustering")
        data = data.fillna(0.0)

    grid = sns.clustermap(
        data,
        row_cluster=cluster_rows and data.shape[0] > 1,
        col_cluster=cluster_cols and data.shape[1] > 1,
        col_colors=annotation_colors(hp, palette.missing),
        cmap=palette.diverging,
        linewidths=0.5,
        linecolor=border_color,
        xticklabels=show_colnames,
        yticklabels=True,
        cbar_pos=(0.02, 0.8, 0.03, 0.15) if legend else None,
        figsize=figsize,
        **kwargs,
    )
    return grid.figure


def _is_centered(data: pd.DataFrame) -> bool:
    """True when values straddle zero, so a diverging map is centred on 0."""
    values = data.to_numpy(dtype=np.float64)
    if np.isnan(values).all():
        return False
    return bool(np.nanmin(values) < 0 < np.nanmax(values))
