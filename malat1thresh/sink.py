"""Write-only hooks for rendering intermediate pipeline artifacts.

The pipeline reports each artifact as soon as it exists. Sinks never feed
anything back into the computation.
"""

from __future__ import annotations

from typing import Any

import numpy as np

from malat1thresh.core.errors import ThresholdError
from malat1thresh.core.types import DensityCurve, Extrema, PeakSelection, QuadraticModel


class VisualizationSink:
    """No-op base class; override the hooks you need."""

    def on_start(self, sample: Any) -> None:
        pass

    def on_density(self, density: DensityCurve) -> None:
        pass

    def on_fit(self, x: np.ndarray, fitted_y: np.ndarray) -> None:
        pass

    def on_extrema(self, extrema: Extrema) -> None:
        pass

    def on_selection(self, selection: PeakSelection) -> None:
        pass

    def on_fit_window(self, x: np.ndarray, y: np.ndarray) -> None:
        pass

    def on_quadratic(self, model: QuadraticModel) -> None:
        pass

    def on_threshold(self, sample: np.ndarray, threshold: float) -> None:
        pass

    def on_failure(self, sample: np.ndarray, error: ThresholdError) -> None:
        pass


class RecordingSink(VisualizationSink):
    """Keep every reported artifact in ``artifacts`` keyed by hook name."""

    def __init__(self) -> None:
        self.artifacts: dict[str, Any] = {}

    def on_start(self, sample: Any) -> None:
        # A new run never inherits artifacts from the previous one.
        self.clear()

    def on_density(self, density: DensityCurve) -> None:
        self.artifacts["density"] = density

    def on_fit(self, x: np.ndarray, fitted_y: np.ndarray) -> None:
        self.artifacts["fit"] = (np.asarray(x, dtype=float), np.asarray(fitted_y, dtype=float))

    def on_extrema(self, extrema: Extrema) -> None:
        self.artifacts["extrema"] = extrema

    def on_selection(self, selection: PeakSelection) -> None:
        self.artifacts["selection"] = selection

    def on_fit_window(self, x: np.ndarray, y: np.ndarray) -> None:
        self.artifacts["fit_window"] = (np.asarray(x, dtype=float), np.asarray(y, dtype=float))

    def on_quadratic(self, model: QuadraticModel) -> None:
        self.artifacts["quadratic"] = model

    def on_threshold(self, sample: np.ndarray, threshold: float) -> None:
        self.artifacts["sample"] = np.asarray(sample, dtype=float)
        self.artifacts["threshold"] = float(threshold)

    def on_failure(self, sample: np.ndarray, error: ThresholdError) -> None:
        self.artifacts["error"] = error
        self.artifacts["sample"] = np.asarray(sample, dtype=float)

    def clear(self) -> None:
        self.artifacts.clear()
