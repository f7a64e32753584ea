"""Diagnostic figures built from artifacts recorded during a threshold run."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

import matplotlib.pyplot as plt
import numpy as np

from malat1thresh.core.types import DensityCurve, QuadraticModel
from malat1thresh.plotting.styles import DEFAULT_PLOT_STYLE, PlotStyle
from malat1thresh.plotting.utils import sanitize_sample_label, save_figure
from malat1thresh.sink import RecordingSink


def _plot_density_with_points(
    ax: plt.Axes,
    density: DensityCurve,
    fit: tuple[np.ndarray, np.ndarray] | None,
    points_x: np.ndarray,
    *,
    title: str,
    style: PlotStyle,
) -> None:
    ax.plot(density.x, density.y, color=style.density_color, lw=1.0, label="density")
    if fit is not None:
        fx, fy = fit
        ax.plot(fx, fy, color=style.fit_color, lw=1.2, label="spline")
        marker_y = np.interp(points_x, fx, fy)
    else:
        marker_y = np.interp(points_x, density.x, density.y)
    ax.scatter(points_x, marker_y, color=style.marker_color, s=style.marker_size, zorder=5)
    ax.set_title(title)
    ax.set_xlabel(style.x_label)
    ax.set_ylabel("Density")
    ax.legend(loc="upper right", frameon=False, fontsize=style.legend_fontsize)


def plot_quadratic_fit(
    ax: plt.Axes,
    density: DensityCurve,
    model: QuadraticModel,
    *,
    style: PlotStyle = DEFAULT_PLOT_STYLE,
) -> None:
    """Density points, the fit window subset and the fitted parabola."""
    ax.scatter(density.x, density.y, s=style.point_size, facecolors="none", edgecolors="gray")
    ax.scatter(model.window_x, model.window_y, s=style.point_size, color=style.window_color)
    xs = np.linspace(float(density.x[0]), float(density.x[-1]), 400)
    ys = model(xs)
    # Keep the parabola from dominating the y-range.
    y_top = float(np.max(density.y)) * 1.1
    keep = ys >= -0.1 * y_top
    ax.plot(xs[keep], ys[keep], color=style.marker_color, lw=2.0)
    ax.set_ylim(bottom=-0.05 * y_top, top=y_top)
    ax.set_title("Local quadratic fit")
    ax.set_xlabel(style.x_label)
    ax.set_ylabel("Density value")


def plot_threshold_histogram(
    ax: plt.Axes,
    sample: np.ndarray,
    threshold: float | None,
    *,
    style: PlotStyle = DEFAULT_PLOT_STYLE,
) -> None:
    """Histogram of cell expression with the threshold as a vertical line."""
    values = np.asarray(sample, dtype=float).ravel()
    values = values[np.isfinite(values)]
    ax.hist(values, bins=style.hist_bins, color="lightgray", edgecolor="black", linewidth=0.3)
    if threshold is not None and np.isfinite(threshold):
        ax.axvline(threshold, color=style.threshold_color, lw=style.threshold_lw)
    ax.set_xlabel(style.x_label)
    ax.set_ylabel("Number of cells")


def plot_threshold_diagnostics(
    artifacts: Mapping[str, Any],
    *,
    title: str | None = None,
    style: PlotStyle = DEFAULT_PLOT_STYLE,
) -> tuple[plt.Figure, np.ndarray]:
    """Compose the diagnostic panels from `RecordingSink.artifacts`.

    A completed run yields a 2x2 grid: density with minima, density with
    maxima, quadratic fit, and the histogram with the threshold. A failed run
    yields only the histogram, titled with the failure kind.
    """
    sample = artifacts.get("sample")
    if sample is None:
        raise ValueError("No sample recorded; run the pipeline with this sink first.")

    error = artifacts.get("error")
    if error is not None or "quadratic" not in artifacts:
        fig, ax = plt.subplots(figsize=style.figsize_single)
        plot_threshold_histogram(ax, sample, artifacts.get("threshold"), style=style)
        kind = getattr(error, "kind", "incomplete run")
        ax.set_title(f"{title + ': ' if title else ''}no threshold ({kind})")
        fig.tight_layout()
        return fig, np.array([ax])

    density: DensityCurve = artifacts["density"]
    fit = artifacts.get("fit")
    extrema = artifacts["extrema"]
    fig, axes = plt.subplots(2, 2, figsize=style.figsize_grid)
    _plot_density_with_points(
        axes[0, 0], density, fit, extrema.minima_x, title="Density with local minima", style=style
    )
    _plot_density_with_points(
        axes[0, 1], density, fit, extrema.maxima_x, title="Density with local maxima", style=style
    )
    plot_quadratic_fit(axes[1, 0], density, artifacts["quadratic"], style=style)
    threshold = artifacts.get("threshold")
    plot_threshold_histogram(axes[1, 1], sample, threshold, style=style)
    axes[1, 1].set_title(f"Threshold = {threshold:.3f}" if threshold is not None else "Threshold")
    if title:
        fig.suptitle(title)
    fig.tight_layout()
    return fig, axes


class FigureSink(RecordingSink):
    """Recording sink that can render and save the diagnostic figure."""

    def __init__(self, style: PlotStyle = DEFAULT_PLOT_STYLE) -> None:
        super().__init__()
        self.style = style

    def render(self, title: str | None = None) -> tuple[plt.Figure, np.ndarray]:
        return plot_threshold_diagnostics(self.artifacts, title=title, style=self.style)

    def save(self, out_path: str | Path, title: str | None = None) -> Path:
        """Save the figure to ``out_path``.

        A path without a suffix is taken as a directory, and the file name is
        derived from ``title`` as ``<label>_threshold.png``.
        """
        path = Path(out_path)
        if not path.suffix:
            path = path / f"{sanitize_sample_label(title or '')}_threshold.png"
        fig, _ = self.render(title=title)
        save_figure(fig, path, style=self.style)
        return path
