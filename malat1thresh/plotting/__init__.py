"""Plotting API for threshold diagnostics."""

from malat1thresh.plotting.diagnostics import (
    FigureSink,
    plot_quadratic_fit,
    plot_threshold_diagnostics,
    plot_threshold_histogram,
)
from malat1thresh.plotting.styles import DEFAULT_PLOT_STYLE, PlotStyle
from malat1thresh.plotting.utils import sanitize_sample_label, save_figure

__all__ = [
    "PlotStyle",
    "DEFAULT_PLOT_STYLE",
    "save_figure",
    "sanitize_sample_label",
    "FigureSink",
    "plot_threshold_diagnostics",
    "plot_quadratic_fit",
    "plot_threshold_histogram",
]
