"""malat1thresh public API."""

from malat1thresh._version import __version__
from malat1thresh.core.compute import compute_threshold, find_threshold
from malat1thresh.core.errors import (
    FitError,
    InvalidInputError,
    NoPeakFoundError,
    NoRealRootError,
    ThresholdError,
)
from malat1thresh.core.types import (
    LEGACY_DEFAULTS,
    ROBUST_DEFAULTS,
    ThresholdConfig,
    ThresholdResult,
)
from malat1thresh.filtering import apply_threshold, threshold_table
from malat1thresh.sink import RecordingSink, VisualizationSink


def FigureSink(*args, **kwargs):
    """Lazy wrapper to avoid importing matplotlib at import time."""
    from malat1thresh.plotting.diagnostics import FigureSink as _FigureSink

    return _FigureSink(*args, **kwargs)


__all__ = [
    "__version__",
    "compute_threshold",
    "find_threshold",
    "apply_threshold",
    "threshold_table",
    "ThresholdConfig",
    "ThresholdResult",
    "ROBUST_DEFAULTS",
    "LEGACY_DEFAULTS",
    "ThresholdError",
    "InvalidInputError",
    "FitError",
    "NoPeakFoundError",
    "NoRealRootError",
    "VisualizationSink",
    "RecordingSink",
    "FigureSink",
]
