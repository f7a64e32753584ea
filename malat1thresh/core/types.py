"""Typed configuration and result containers for threshold estimation."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Any

import numpy as np
from scipy.interpolate import BSpline


@dataclass(frozen=True)
class ThresholdConfig:
    """Parameters of one threshold computation.

    - `bandwidth`: Gaussian kernel standard deviation for the density.
    - `smoothing`: spline smoothness (`spar` scale, roughly 0 to 1.5).
    - `chosen_min`: a density maximum must lie above this to count as the
      high-expression peak.
    - `abs_min`: floor threshold and fallback trough location.
    - `rough_max`: fallback peak location when no maximum is detected.
    - `grid_size`: number of density evaluation points.
    - `cut`: grid extension beyond the sample range, in bandwidths.
    - `fallback`: value returned by the lenient entry point on failure.
    """

    bandwidth: float = 0.1
    smoothing: float = 1.0
    chosen_min: float = 1.0
    abs_min: float = 0.3
    rough_max: float = 2.0
    grid_size: int = 512
    cut: float = 0.0
    fallback: float = 2.0

    def __post_init__(self) -> None:
        for name in ("bandwidth", "smoothing", "chosen_min", "abs_min", "rough_max", "cut", "fallback"):
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or not math.isfinite(float(value)):
                raise ValueError(f"{name} must be a finite number, got {value!r}.")
        if self.bandwidth <= 0:
            raise ValueError("bandwidth must be positive.")
        if self.cut < 0:
            raise ValueError("cut must be non-negative.")
        if self.abs_min < 0:
            raise ValueError("abs_min must be non-negative.")
        if int(self.grid_size) != self.grid_size or int(self.grid_size) < 2:
            raise ValueError("grid_size must be an integer >= 2.")

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


ROBUST_DEFAULTS = ThresholdConfig()
LEGACY_DEFAULTS = ThresholdConfig(smoothing=0.5, chosen_min=2.0, cut=3.0)

PROFILES: dict[str, ThresholdConfig] = {
    "robust": ROBUST_DEFAULTS,
    "legacy": LEGACY_DEFAULTS,
}


@dataclass(frozen=True)
class DensityCurve:
    """Kernel density estimate evaluated on a fixed, strictly increasing grid."""

    x: np.ndarray
    y: np.ndarray
    bandwidth: float

    @property
    def grid_size(self) -> int:
        return int(self.x.size)


@dataclass(frozen=True)
class FittedCurve:
    """Smoothing spline over the density grid.

    The spline is parameterized on ``u = (x - origin) / scale`` so that the
    penalty weight does not depend on the units of the sample.
    """

    spline: BSpline
    origin: float
    scale: float
    lam: float
    spar: float

    def _to_unit(self, x: np.ndarray | float) -> np.ndarray:
        return (np.asarray(x, dtype=float) - self.origin) / self.scale

    def value(self, x: np.ndarray | float) -> np.ndarray:
        return np.asarray(self.spline(self._to_unit(x)), dtype=float)

    def derivative(self, x: np.ndarray | float) -> np.ndarray:
        return np.asarray(self.spline(self._to_unit(x), nu=1), dtype=float) / self.scale


@dataclass(frozen=True)
class Extrema:
    """Local maxima/minima of the fitted density, with their density values.

    `n_maxima_detected` and `n_minima_detected` count the sign changes found
    before fallbacks were applied.
    """

    maxima_x: np.ndarray
    maxima_y: np.ndarray
    minima_x: np.ndarray
    minima_y: np.ndarray
    n_maxima_detected: int
    n_minima_detected: int

    @property
    def maxima_fallback(self) -> bool:
        return self.n_maxima_detected == 0

    @property
    def minima_fallback(self) -> bool:
        return self.n_minima_detected == 0


@dataclass(frozen=True)
class PeakSelection:
    """High-expression peak and the trough to its left."""

    peak_x: float
    peak_y: float
    trough_x: float
    trough_fallback: bool

    @property
    def delta(self) -> float:
        return abs(self.peak_x - self.trough_x)

    @property
    def window(self) -> tuple[float, float]:
        return (self.peak_x - self.delta, self.peak_x + self.delta)


@dataclass(frozen=True)
class QuadraticModel:
    """Least-squares parabola ``y = a*x**2 + b*x + c`` over the fit window."""

    a: float
    b: float
    c: float
    window_x: np.ndarray
    window_y: np.ndarray

    @property
    def discriminant(self) -> float:
        return self.b * self.b - 4.0 * self.a * self.c

    def __call__(self, x: np.ndarray | float) -> np.ndarray:
        xx = np.asarray(x, dtype=float)
        return self.a * xx * xx + self.b * xx + self.c


@dataclass(frozen=True)
class ThresholdResult:
    """Output of `find_threshold` with every intermediate artifact."""

    threshold: float
    clamped: bool
    config: ThresholdConfig
    density: DensityCurve
    fitted: FittedCurve
    extrema: Extrema
    selection: PeakSelection
    quadratic: QuadraticModel
    n_cells: int

    def summary(self) -> dict[str, Any]:
        """JSON-ready scalar summary of the run."""
        return {
            "threshold": float(self.threshold),
            "clamped": bool(self.clamped),
            "n_cells": int(self.n_cells),
            "peak_x": float(self.selection.peak_x),
            "trough_x": float(self.selection.trough_x),
            "trough_fallback": bool(self.selection.trough_fallback),
            "maxima_x": [float(v) for v in self.extrema.maxima_x],
            "minima_x": [float(v) for v in self.extrema.minima_x],
            "maxima_fallback": bool(self.extrema.maxima_fallback),
            "minima_fallback": bool(self.extrema.minima_fallback),
            "quadratic": {
                "a": float(self.quadratic.a),
                "b": float(self.quadratic.b),
                "c": float(self.quadratic.c),
                "n_points": int(self.quadratic.window_x.size),
            },
            "spline_lambda": float(self.fitted.lam),
            "config": self.config.to_dict(),
        }
