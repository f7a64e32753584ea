"""Penalized cubic smoothing spline fitted to a density curve."""

from __future__ import annotations

import numpy as np
from scipy.interpolate import make_smoothing_spline

from malat1thresh.core.errors import FitError
from malat1thresh.core.types import DensityCurve, FittedCurve

MIN_SPLINE_POINTS = 5


def spar_to_lambda(n_points: int, spar: float) -> float:
    """Convert R-style ``spar`` into the penalty weight for a unit-scaled grid.

    R's ``smooth.spline`` uses ``lambda = r * 256**(3*spar - 1)`` where
    ``r = tr(X'WX) / tr(Omega)``. For cubic B-splines with knots on a uniform
    grid of spacing ``h`` that ratio is ``3 * h**3 / 16``.
    """
    n = int(n_points)
    if n < 2:
        raise ValueError("n_points must be >= 2.")
    h = 1.0 / float(n - 1)
    ratio = 3.0 * h**3 / 16.0
    return float(ratio * 256.0 ** (3.0 * float(spar) - 1.0))


def fit_smoothing_spline(density: DensityCurve, spar: float) -> FittedCurve:
    """Fit a smoothing spline to ``(density.x, density.y)``.

    Minimizes ``sum((y - f(x))**2) + lam * integral(f''(x)**2)`` with x
    rescaled to [0, 1]; larger ``spar`` gives a stiffer curve.

    Raises:
        FitError: fewer than five distinct grid points, or the solver
            rejected the design.
    """
    x = np.asarray(density.x, dtype=float).ravel()
    y = np.asarray(density.y, dtype=float).ravel()
    if x.size != y.size:
        raise FitError("density x and y length mismatch.")
    if np.unique(x).size < MIN_SPLINE_POINTS:
        raise FitError(
            f"Smoothing spline needs at least {MIN_SPLINE_POINTS} distinct grid points, "
            f"got {np.unique(x).size}."
        )
    if not np.isfinite(spar):
        raise ValueError("spar must be finite.")

    origin = float(x[0])
    scale = float(x[-1] - x[0])
    u = (x - origin) / scale
    lam = spar_to_lambda(x.size, spar)
    try:
        spline = make_smoothing_spline(u, y, lam=lam)
    except (ValueError, np.linalg.LinAlgError) as exc:
        raise FitError(f"Smoothing spline fit failed: {exc}") from exc

    return FittedCurve(spline=spline, origin=origin, scale=scale, lam=lam, spar=float(spar))
