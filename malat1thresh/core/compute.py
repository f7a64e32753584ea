"""Threshold pipeline orchestration (no plotting, no filesystem I/O)."""

from __future__ import annotations

import dataclasses
import logging
from typing import Any, Callable

import numpy as np

from malat1thresh.core.errors import ThresholdError
from malat1thresh.core.types import ROBUST_DEFAULTS, ThresholdConfig, ThresholdResult
from malat1thresh.core.utils import finite_1d
from malat1thresh.density import estimate_density
from malat1thresh.peaks import locate_extrema, select_peak
from malat1thresh.quadratic import extract_threshold, fit_local_quadratic
from malat1thresh.sink import VisualizationSink
from malat1thresh.smoothing import fit_smoothing_spline

_LOG = logging.getLogger(__name__)

FAILURE_HINT = (
    "This may indicate that the sample has no high MALAT1 peak and is of poor "
    "quality; check the histogram of normalized MALAT1 expression."
)


def _emit(sink: VisualizationSink | None, hook: str, *args: Any) -> None:
    if sink is None:
        return
    method: Callable[..., None] = getattr(sink, hook)
    try:
        method(*args)
    except Exception as exc:  # noqa: BLE001
        _LOG.warning("Visualization sink %s.%s failed: %s", type(sink).__name__, hook, exc)


def find_threshold(
    sample: np.ndarray,
    config: ThresholdConfig = ROBUST_DEFAULTS,
    *,
    sink: VisualizationSink | None = None,
) -> ThresholdResult:
    """Run the full pipeline and return the threshold with its intermediates.

    Raises:
        InvalidInputError, FitError, NoPeakFoundError, NoRealRootError: the
            specific `ThresholdError` describing why no threshold exists.
    """
    _emit(sink, "on_start", sample)
    x = finite_1d("sample", sample)

    density = estimate_density(
        x,
        config.bandwidth,
        grid_size=config.grid_size,
        cut=config.cut,
    )
    _emit(sink, "on_density", density)

    fitted = fit_smoothing_spline(density, config.smoothing)
    _emit(sink, "on_fit", density.x, fitted.value(density.x))

    extrema = locate_extrema(
        fitted,
        density,
        rough_max=config.rough_max,
        abs_min=config.abs_min,
    )
    _emit(sink, "on_extrema", extrema)
    if extrema.maxima_fallback:
        _LOG.debug("No local maxima detected; using grid point nearest %g.", config.rough_max)
    if extrema.minima_fallback:
        _LOG.debug("No local minima detected; using abs_min=%g.", config.abs_min)

    selection = select_peak(extrema, chosen_min=config.chosen_min, abs_min=config.abs_min)
    _emit(sink, "on_selection", selection)

    quadratic = fit_local_quadratic(density, selection)
    _emit(sink, "on_fit_window", quadratic.window_x, quadratic.window_y)
    _emit(sink, "on_quadratic", quadratic)

    threshold, clamped = extract_threshold(quadratic, abs_min=config.abs_min)
    if clamped:
        _LOG.debug("Quadratic root invalid or negative; clamped to abs_min=%g.", config.abs_min)
    _emit(sink, "on_threshold", x, threshold)

    return ThresholdResult(
        threshold=threshold,
        clamped=clamped,
        config=config,
        density=density,
        fitted=fitted,
        extrema=extrema,
        selection=selection,
        quadratic=quadratic,
        n_cells=int(x.size),
    )


def resolve_config(config: ThresholdConfig = ROBUST_DEFAULTS, **overrides: Any) -> ThresholdConfig:
    """Return ``config`` with every non-None override applied."""
    changes = {k: v for k, v in overrides.items() if v is not None}
    if not changes:
        return config
    return dataclasses.replace(config, **changes)


def compute_threshold(
    sample: np.ndarray,
    bandwidth: float | None = None,
    smoothing: float | None = None,
    chosen_min: float | None = None,
    abs_min: float | None = None,
    rough_max: float | None = None,
    grid_size: int | None = None,
    *,
    config: ThresholdConfig = ROBUST_DEFAULTS,
    sink: VisualizationSink | None = None,
    strict: bool = False,
    logger: logging.Logger | None = None,
) -> float:
    """Minimum-expression threshold for one sample.

    Parameters left as ``None`` are taken from ``config``; with the robust
    profile these are bandwidth 0.1, smoothing 1.0, chosen_min 1.0,
    abs_min 0.3, rough_max 2.0 and a 512-point grid. The original R function
    used chosen_min 2.0 and smoothing 0.5 (see ``LEGACY_DEFAULTS``).

    Any `ThresholdError` is logged as a warning and ``config.fallback``
    (2.0 by default) is returned instead, so a QC pipeline keeps running.
    Pass ``strict=True`` to re-raise it.

    Raises:
        ValueError: invalid parameter values.
        ThresholdError: only when ``strict`` is True.
    """
    log = logger or _LOG
    cfg = resolve_config(
        config,
        bandwidth=bandwidth,
        smoothing=smoothing,
        chosen_min=chosen_min,
        abs_min=abs_min,
        rough_max=rough_max,
        grid_size=grid_size,
    )
    try:
        return find_threshold(sample, cfg, sink=sink).threshold
    except ThresholdError as exc:
        if strict:
            raise
        log.warning(
            "Threshold estimation failed (%s): %s. %s Returning fallback %g.",
            exc.kind,
            exc,
            FAILURE_HINT,
            cfg.fallback,
        )
        _emit(sink, "on_failure", np.asarray(sample), exc)
        return float(cfg.fallback)
