"""Layered static map rendering over XYZ basemap tiles."""

from __future__ import annotations

import logging
import math
from pathlib import Path

import contextily as ctx
import geopandas as gpd
import matplotlib.pyplot as plt
from matplotlib.lines import Line2D
from matplotlib.patches import Patch
from mpl_toolkits.axes_grid1.anchored_artists import AnchoredSizeBar
from pydantic import BaseModel, ConfigDict

from .config import ESRI_OCEAN_BASEMAP
from .errors import CRSMismatchError
from .geometry import require_same_crs

logger = logging.getLogger(__name__)


class MapLayer(BaseModel):
    """A GeoDataFrame plus how to draw it."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    data: gpd.GeoDataFrame
    label: str
    color: str | None = None
    edgecolor: str | None = None
    alpha: float = 1.0
    linewidth: float = 1.0
    markersize: float = 12.0
    column: str | None = None
    cmap: str | None = None
    zorder: int = 1


def nice_scale_length(span_m: float) -> float:
    """Pick a 1/2/5 x 10^n metre bar length close to a fifth of ``span_m``."""
    if span_m <= 0 or not math.isfinite(span_m):
        raise ValueError(f"Scale span must be positive and finite, got {span_m}")
    target = span_m / 5
    base = 10 ** math.floor(math.log10(target))
    for step in (5, 2, 1):
        if step * base <= target:
            return float(step * base)
    return float(base)


def _scale_label(length_m: float) -> str:
    if length_m >= 1000:
        km = length_m / 1000
        return f"{km:g} km"
    return f"{length_m:g} m"


def _plot_layer(ax, layer: MapLayer):
    """Plot one layer; return a legend proxy for plain layers, None otherwise."""
    if layer.data.empty:
        logger.warning("Layer %r is empty, skipping", layer.label)
        return None

    kwargs = {
        "ax": ax,
        "alpha": layer.alpha,
        "linewidth": layer.linewidth,
        "zorder": layer.zorder,
    }
    geom_types = set(layer.data.geometry.geom_type.dropna())
    if geom_types & {"Point", "MultiPoint"}:
        kwargs["markersize"] = layer.markersize
    if layer.edgecolor is not None:
        kwargs["edgecolor"] = layer.edgecolor

    if layer.column is not None:
        kwargs.update(
            column=layer.column,
            categorical=True,
            legend=True,
            cmap=layer.cmap,
            legend_kwds={"title": layer.label, "loc": "upper right"},
        )
    elif layer.color is not None:
        kwargs["color"] = layer.color

    layer.data.plot(**kwargs)
    if layer.column is not None:
        return None
    return _legend_proxy(layer, geom_types)


def _legend_proxy(layer: MapLayer, geom_types: set[str]):
    # geopandas collections have no legend handler, so draw a stand-in
    color = layer.color or "C0"
    if geom_types & {"Polygon", "MultiPolygon"}:
        return Patch(facecolor=color, edgecolor=layer.edgecolor, alpha=layer.alpha, label=layer.label)
    if geom_types & {"Point", "MultiPoint"}:
        return Line2D([], [], marker="o", linestyle="", color=color, alpha=layer.alpha, label=layer.label)
    return Line2D([], [], color=color, linewidth=layer.linewidth, alpha=layer.alpha, label=layer.label)


def _add_layer_legend(ax, handles: list) -> None:
    """Legend for the plain layers, kept beside any categorical legend."""
    if not handles:
        return
    categorical = ax.get_legend()
    if categorical is not None:
        ax.add_artist(categorical)
    ax.legend(handles=handles, loc="upper left")


def render_map(
    layers: list[MapLayer],
    output_path: str | Path,
    *,
    title: str,
    basemap: str | None = ESRI_OCEAN_BASEMAP,
    zoom: int | str = "auto",
    scale_bar: bool = True,
    figsize: tuple[float, float] = (10, 10),
    dpi: int = 150,
) -> Path:
    """Draw ``layers`` in order over basemap tiles and save a PNG.

    All layers must share one projected CRS. ``basemap`` is an XYZ URL
    template fetched by contextily; ``None`` renders without tiles.
    """
    if not layers:
        raise ValueError("render_map needs at least one layer")

    require_same_crs(*(layer.data for layer in layers))
    crs = layers[0].data.crs
    if not crs.is_projected:
        raise CRSMismatchError(f"Map layers must use a projected CRS, got {crs.to_string()}")

    output_path = Path(output_path)
    fig, ax = plt.subplots(figsize=figsize)
    try:
        handles = [_plot_layer(ax, layer) for layer in layers]
        _add_layer_legend(ax, [h for h in handles if h is not None])

        if basemap:
            logger.info("Fetching basemap tiles (zoom=%s)", zoom)
            ctx.add_basemap(ax, source=basemap, crs=crs.to_string(), zoom=zoom)

        if scale_bar:
            x0, x1 = ax.get_xlim()
            length_m = nice_scale_length(x1 - x0)
            bar = AnchoredSizeBar(
                ax.transData,
                length_m,
                _scale_label(length_m),
                "lower left",
                pad=0.5,
                borderpad=0.8,
                sep=4,
                frameon=True,
                size_vertical=(x1 - x0) / 200,
            )
            ax.add_artist(bar)

        ax.set_title(title)
        ax.set_axis_off()
        fig.tight_layout()
        fig.savefig(output_path, dpi=dpi)
    finally:
        plt.close(fig)

    logger.info("Map saved: %s", output_path)
    return output_path
