"""Small pure helpers for core computations."""

from __future__ import annotations

import numpy as np

from malat1thresh.core.errors import InvalidInputError


def finite_1d(name: str, values: np.ndarray) -> np.ndarray:
    try:
        arr = np.asarray(values, dtype=float)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(
            f"{name} must be numeric (a vector of normalized counts): {exc}"
        ) from exc
    if arr.ndim > 1:
        arr = np.squeeze(arr)
    if arr.ndim != 1:
        raise InvalidInputError(f"{name} must be one-dimensional, got shape {arr.shape}.")
    if arr.size == 0:
        raise InvalidInputError(f"{name} must be non-empty.")
    if not np.isfinite(arr).all():
        raise InvalidInputError(f"{name} must be finite.")
    return arr


def nearest_index(grid: np.ndarray, value: float) -> int:
    """Index of the grid point closest to ``value`` (first one on ties)."""
    return int(np.argmin(np.abs(np.asarray(grid, dtype=float) - float(value))))
