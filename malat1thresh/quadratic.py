"""Local quadratic fit around the selected peak and its threshold root."""

from __future__ import annotations

import math
import warnings

import numpy as np

from malat1thresh.core.errors import FitError, NoRealRootError
from malat1thresh.core.types import DensityCurve, PeakSelection, QuadraticModel


def fit_window(density: DensityCurve, selection: PeakSelection) -> tuple[np.ndarray, np.ndarray]:
    """Density points with x in ``[peak - delta, peak + delta]``."""
    lo, hi = selection.window
    x = np.asarray(density.x, dtype=float)
    mask = (x >= lo) & (x <= hi)
    return x[mask], np.asarray(density.y, dtype=float)[mask]


def fit_quadratic(x: np.ndarray, y: np.ndarray) -> QuadraticModel:
    """Ordinary least squares fit of ``y = a*x**2 + b*x + c`` in the raw basis."""
    xx = np.asarray(x, dtype=float).ravel()
    yy = np.asarray(y, dtype=float).ravel()
    if xx.size != yy.size:
        raise FitError("x and y length mismatch.")
    if np.unique(xx).size < 3:
        raise FitError(
            f"Quadratic fit needs at least 3 distinct points, got {np.unique(xx).size}."
        )
    try:
        with warnings.catch_warnings():
            warnings.simplefilter("error", np.exceptions.RankWarning)
            a, b, c = np.polyfit(xx, yy, 2)
    except (np.linalg.LinAlgError, np.exceptions.RankWarning) as exc:
        raise FitError(f"Quadratic fit is rank deficient: {exc}") from exc
    return QuadraticModel(a=float(a), b=float(b), c=float(c), window_x=xx, window_y=yy)


def fit_local_quadratic(density: DensityCurve, selection: PeakSelection) -> QuadraticModel:
    """Fit the quadratic to the density restricted to the peak's fit window.

    Raises:
        FitError: fewer than three grid points fall in the window.
    """
    x, y = fit_window(density, selection)
    if x.size < 3:
        lo, hi = selection.window
        raise FitError(
            f"Fit window [{lo:.4g}, {hi:.4g}] holds {x.size} grid points; need at least 3."
        )
    return fit_quadratic(x, y)


def extract_threshold(model: QuadraticModel, *, abs_min: float) -> tuple[float, bool]:
    """Smaller real root ``(-b + sqrt(D)) / (2a)`` of the fitted quadratic.

    Negative or non-finite roots (including ``a == 0``) are replaced by
    ``abs_min``.

    Returns:
        ``(threshold, clamped)``.

    Raises:
        NoRealRootError: the discriminant is negative.
    """
    disc = model.discriminant
    if not math.isfinite(disc):
        return float(abs_min), True
    if disc < 0:
        raise NoRealRootError(
            f"Quadratic has no real root (a={model.a:.4g}, b={model.b:.4g}, "
            f"c={model.c:.4g}, discriminant={disc:.4g})."
        )
    if model.a == 0.0:
        return float(abs_min), True

    root = (-model.b + math.sqrt(disc)) / (2.0 * model.a)
    if not math.isfinite(root) or root < 0:
        return float(abs_min), True
    return float(root), False
