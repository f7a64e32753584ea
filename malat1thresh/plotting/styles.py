"""Shared plotting style settings for deterministic figure outputs."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PlotStyle:
    """Centralized plotting defaults for threshold diagnostics."""

    dpi: int = 200
    figsize_grid: tuple[float, float] = (11.0, 8.5)
    figsize_single: tuple[float, float] = (6.0, 4.5)
    hist_bins: int = 100
    density_color: str = "black"
    fit_color: str = "blue"
    marker_color: str = "red"
    window_color: str = "blue"
    threshold_color: str = "red"
    threshold_lw: float = 2.0
    marker_size: float = 30.0
    point_size: float = 8.0
    legend_fontsize: int = 8
    x_label: str = "Normalized MALAT1 expression"


DEFAULT_PLOT_STYLE = PlotStyle()
