"""
Visualization for module classification results.

Renders the prepared heatmap inputs as publication-quality static figures
(matplotlib/seaborn). No scoring happens here.

Examples
--------
>>> from modclassify.viz import plot_module_heatmap, configure_style
>>> configure_style("paper")
>>> fig = plot_module_heatmap(result.heatmap, scale="column")
>>> fig.save("figures/module_heatmap.pdf")
"""

from modclassify.viz.core import Figure
from modclassify.viz.styles import Palette, PALETTES, configure_style
from modclassify.viz.heatmap import plot_module_heatmap, scale_matrix, annotation_colors

__all__ = [
    # Core
    "Figure",
    # Styles
    "Palette",
    "PALETTES",
    "configure_style",
    # Heatmap
    "plot_module_heatmap",
    "scale_matrix",
    "annotation_colors",
]
