"""Apply thresholds to cells and summarize many samples at once."""

from __future__ import annotations

import logging
from typing import Mapping

import numpy as np
import pandas as pd

from malat1thresh.core.compute import find_threshold
from malat1thresh.core.errors import ThresholdError
from malat1thresh.core.types import ROBUST_DEFAULTS, ThresholdConfig
from malat1thresh.core.utils import finite_1d

_LOG = logging.getLogger(__name__)

TABLE_COLUMNS = [
    "sample",
    "n_cells",
    "threshold",
    "fallback_used",
    "clamped",
    "error",
    "n_kept",
    "frac_kept",
]


def apply_threshold(sample: np.ndarray, threshold: float) -> np.ndarray:
    """Boolean mask of cells to keep (expression at or above ``threshold``)."""
    x = finite_1d("sample", sample)
    return x >= float(threshold)


def threshold_table(
    samples: Mapping[str, np.ndarray],
    config: ThresholdConfig = ROBUST_DEFAULTS,
    *,
    logger: logging.Logger | None = None,
) -> pd.DataFrame:
    """Compute one threshold per sample and tabulate how many cells pass.

    Samples whose threshold cannot be estimated get ``config.fallback`` with
    ``fallback_used=True`` and the error kind in ``error``; successful rows
    have an empty ``error``.

    Returns:
        DataFrame with columns ``TABLE_COLUMNS``, one row per sample in input
        order.
    """
    log = logger or _LOG
    rows = []
    for name, values in samples.items():
        x = np.asarray(values, dtype=float).ravel()
        error = ""
        clamped = False
        try:
            result = find_threshold(x, config)
            threshold = result.threshold
            clamped = result.clamped
        except ThresholdError as exc:
            log.warning("Sample %s: threshold estimation failed (%s): %s", name, exc.kind, exc)
            threshold = float(config.fallback)
            error = exc.kind

        finite = x[np.isfinite(x)]
        n_kept = int(np.sum(finite >= threshold))
        rows.append(
            {
                "sample": str(name),
                "n_cells": int(x.size),
                "threshold": float(threshold),
                "fallback_used": bool(error),
                "clamped": bool(clamped),
                "error": error,
                "n_kept": n_kept,
                "frac_kept": (n_kept / x.size) if x.size else float("nan"),
            }
        )
    return pd.DataFrame(rows, columns=TABLE_COLUMNS)
