"""Error kinds raised by the threshold pipeline."""

from __future__ import annotations


class ThresholdError(Exception):
    """Base class for expected failures of the threshold pipeline."""

    kind = "threshold_error"


class InvalidInputError(ThresholdError):
    """Sample is empty, non-finite, or has fewer than two distinct values."""

    kind = "invalid_input"


class FitError(ThresholdError):
    """Spline or quadratic fit is numerically underdetermined."""

    kind = "fit_error"


class NoPeakFoundError(ThresholdError):
    """No density maximum lies above ``chosen_min``."""

    kind = "no_peak_found"


class NoRealRootError(ThresholdError):
    """Local quadratic has a negative discriminant."""

    kind = "no_real_root"
