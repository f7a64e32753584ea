"""Core compute subpackage."""

from malat1thresh.core.compute import compute_threshold, find_threshold, resolve_config
from malat1thresh.core.errors import (
    FitError,
    InvalidInputError,
    NoPeakFoundError,
    NoRealRootError,
    ThresholdError,
)
from malat1thresh.core.types import (
    LEGACY_DEFAULTS,
    PROFILES,
    ROBUST_DEFAULTS,
    DensityCurve,
    Extrema,
    FittedCurve,
    PeakSelection,
    QuadraticModel,
    ThresholdConfig,
    ThresholdResult,
)

__all__ = [
    "ThresholdConfig",
    "ThresholdResult",
    "DensityCurve",
    "FittedCurve",
    "Extrema",
    "PeakSelection",
    "QuadraticModel",
    "ROBUST_DEFAULTS",
    "LEGACY_DEFAULTS",
    "PROFILES",
    "ThresholdError",
    "InvalidInputError",
    "FitError",
    "NoPeakFoundError",
    "NoRealRootError",
    "compute_threshold",
    "find_threshold",
    "resolve_config",
]
