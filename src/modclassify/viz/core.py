"""
Figure handle returned by the plotting functions.

Keeps the matplotlib figure together with a title, a one-line description
and the rendering parameters, so callers can save or embed a plot without
re-deriving how it was drawn.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, Optional
import base64
import io

import matplotlib.figure
import matplotlib.pyplot as plt

OutputFormat = Literal["png", "pdf", "svg", "html"]

_FORMATS = ("png", "pdf", "svg", "html")


@dataclass
class Figure:
    """
    A rendered heatmap plus what was used to draw it.

    Attributes
    ----------
    fig : matplotlib.figure.Figure
        Rendered figure
    title : str
        Short title, also used as the HTML page title
    description : str
        Dimensions and scaling of the plot
    metadata : dict
        Rendering parameters (module/sample counts, scale, clustering)

    Examples
    --------
    >>> fig = plot_module_heatmap(result.heatmap)
    >>> fig.save("figures/module_heatmap.pdf")
    >>> fig.close()
    """
    fig: matplotlib.figure.Figure
    title: str
    description: str
    metadata: dict = field(default_factory=dict)

    def save(
        self,
        path: Path | str,
        format: Optional[OutputFormat] = None,
        dpi: int = 300,
        **kwargs
    ) -> Path:
        """
        Write the figure to ``path``, creating parent directories.

        Parameters
        ----------
        path : Path or str
            Destination file
        format : {"png", "pdf", "svg", "html"}, optional
            Defaults to the file extension, or png for unknown extensions.
            "html" writes a standalone page with the PNG inlined.
        dpi : int, default 300
            Resolution for raster output
        **kwargs
            Extra ``savefig`` arguments

        Returns
        -------
        Path
            ``path``
        """
        path = Path(path)
        if format is None:
            suffix = path.suffix.lstrip(".").lower()
            format = suffix if suffix in _FORMATS else "png"
        path.parent.mkdir(parents=True, exist_ok=True)

        if format == "html":
            png = self.to_base64(dpi=dpi)
            path.write_text(
                "<!DOCTYPE html>\n"
                f"<html><head><title>{self.title}</title></head>\n"
                f"<body><p>{self.description}</p>\n"
                f'<img src="data:image/png;base64,{png}" alt="{self.title}">\n'
                "</body></html>\n",
                encoding="utf-8",
            )
            return path

        options = {"dpi": dpi, "bbox_inches": "tight", "facecolor": "white"}
        options.update(kwargs)
        self.fig.savefig(path, format=format, **options)
        return path

    def to_base64(self, format: str = "png", dpi: int = 150) -> str:
        buffer = io.BytesIO()
        self.fig.savefig(buffer, format=format, dpi=dpi, bbox_inches="tight")
        return base64.b64encode(buffer.getvalue()).decode("ascii")

    def close(self):
        plt.close(self.fig)
