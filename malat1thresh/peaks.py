"""Derivative-based extrema detection and peak/trough selection.

Extrema are read off sign changes of the fitted curve's first derivative on
the density grid. Each extremum carries its density value from the moment it
is identified, so selection never looks values up by float equality.
"""

from __future__ import annotations

import numpy as np

from malat1thresh.core.errors import NoPeakFoundError
from malat1thresh.core.types import DensityCurve, Extrema, FittedCurve, PeakSelection
from malat1thresh.core.utils import nearest_index


def derivative_sign_changes(values: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Return indices of local maxima and minima from derivative values.

    A maximum at index ``i`` means ``sign(d[i+1]) - sign(d[i]) == -2`` (``+`` to
    ``-``); a minimum means the difference is ``+2``. Exact zeros produce steps
    of 1 and are not counted.
    """
    d = np.asarray(values, dtype=float).ravel()
    if d.size < 2:
        return np.zeros(0, dtype=int), np.zeros(0, dtype=int)
    steps = np.diff(np.sign(d))
    maxima = np.flatnonzero(steps == -2).astype(int)
    minima = np.flatnonzero(steps == 2).astype(int)
    return maxima, minima


def locate_extrema(
    curve: FittedCurve,
    density: DensityCurve,
    *,
    rough_max: float,
    abs_min: float,
) -> Extrema:
    """Find local maxima/minima of ``curve`` on the density grid.

    Fallbacks keep both sets non-empty: without maxima, the grid point nearest
    ``rough_max`` is used; without minima, ``abs_min`` itself.
    """
    x = np.asarray(density.x, dtype=float)
    y = np.asarray(density.y, dtype=float)
    max_idx, min_idx = derivative_sign_changes(curve.derivative(x))

    if max_idx.size == 0:
        fallback_idx = nearest_index(x, rough_max)
        maxima_x = x[[fallback_idx]]
        maxima_y = y[[fallback_idx]]
    else:
        maxima_x = x[max_idx]
        maxima_y = y[max_idx]

    if min_idx.size == 0:
        minima_x = np.array([float(abs_min)])
        minima_y = np.array([float(np.interp(abs_min, x, y))])
    else:
        minima_x = x[min_idx]
        minima_y = y[min_idx]

    return Extrema(
        maxima_x=np.asarray(maxima_x, dtype=float),
        maxima_y=np.asarray(maxima_y, dtype=float),
        minima_x=np.asarray(minima_x, dtype=float),
        minima_y=np.asarray(minima_y, dtype=float),
        n_maxima_detected=int(max_idx.size),
        n_minima_detected=int(min_idx.size),
    )


def select_peak(extrema: Extrema, *, chosen_min: float, abs_min: float) -> PeakSelection:
    """Pick the tallest maximum above ``chosen_min`` and the nearest minimum to its left.

    Ties in density height resolve to the leftmost candidate. When no minimum
    lies left of the peak the trough falls back to ``abs_min``.

    Raises:
        NoPeakFoundError: no maximum lies above ``chosen_min``.
    """
    keep = extrema.maxima_x > float(chosen_min)
    if not np.any(keep):
        raise NoPeakFoundError(
            f"No density maximum above chosen_min={chosen_min:g} "
            f"(maxima at {np.round(extrema.maxima_x, 3).tolist()})."
        )
    cand_x = extrema.maxima_x[keep]
    cand_y = extrema.maxima_y[keep]
    best = int(np.argmax(cand_y))
    peak_x = float(cand_x[best])
    peak_y = float(cand_y[best])

    left = extrema.minima_x[extrema.minima_x < peak_x]
    if left.size == 0:
        return PeakSelection(
            peak_x=peak_x,
            peak_y=peak_y,
            trough_x=float(abs_min),
            trough_fallback=True,
        )
    return PeakSelection(
        peak_x=peak_x,
        peak_y=peak_y,
        trough_x=float(np.max(left)),
        trough_fallback=False,
    )
