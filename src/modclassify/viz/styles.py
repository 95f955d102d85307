"""
Visual style for module classification figures.

Conventions
-----------
- Module scores = RdYlBu_r diverging colormap (red = high)
- Simplicity annotation = light to dark sky blue (see scoring.ordering)
- Undefined scores = light gray
- Cell borders from the palette (white by default)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal
import matplotlib.pyplot as plt
import seaborn as sns


@dataclass(frozen=True)
class Palette:
    """
    Colours used by the module heatmap.

    Attributes
    ----------
    diverging : str
        Colormap name for (scaled) module scores
    missing : str
        Colour for undefined scores
    border : str
        Default cell border colour
    """
    diverging: str = "RdYlBu_r"
    missing: str = "#e5e7eb"     # Gray-200
    border: str = "white"


PALETTES = {
    "default": Palette(),
    "print": Palette(diverging="Greys", missing="#ffffff", border="#cccccc"),
}


def configure_style(
    style: Literal["paper", "presentation", "notebook"] = "paper",
    palette: str | Palette = "default",
    font_scale: float = 1.0
) -> Palette:
    """
    Configure matplotlib and seaborn for consistent figure style.

    Parameters
    ----------
    style : {"paper", "presentation", "notebook"}
        Target medium; sets seaborn context and base font size.
    palette : str or Palette
        Palette name or Palette instance.
    font_scale : float
        Multiplier for all font sizes.

    Returns
    -------
    Palette
        The configured palette.
    """
    if isinstance(palette, str):
        palette = PALETTES.get(palette, PALETTES["default"])

    contexts = {
        "paper": ("paper", 9, 300),
        "presentation": ("talk", 14, 150),
        "notebook": ("notebook", 11, 100),
    }
    context, base_size, dpi = contexts.get(style, contexts["paper"])

    sns.set_theme(style="white", context=context, font_scale=font_scale)
    plt.rcParams.update({
        "figure.facecolor": "white",
        "axes.facecolor": "white",
        "font.size": base_size * font_scale,
        "xtick.labelsize": (base_size - 2) * font_scale,
        "ytick.labelsize": base_size * font_scale,
        "figure.dpi": dpi,
        "savefig.dpi": dpi,
    })

    return palette
