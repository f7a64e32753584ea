import numpy as np
import pytest

from malat1thresh.core.errors import FitError
from malat1thresh.core.types import DensityCurve
from malat1thresh.smoothing import fit_smoothing_spline, spar_to_lambda


def _curve(x: np.ndarray, y: np.ndarray) -> DensityCurve:
    return DensityCurve(x=x, y=y, bandwidth=0.1)


def test_linear_data_is_reproduced() -> None:
    x = np.linspace(0.0, 2.0, 64)
    fit = fit_smoothing_spline(_curve(x, 0.5 + x), spar=1.0)
    assert np.allclose(fit.value(x), 0.5 + x, atol=1e-6)
    assert np.allclose(fit.derivative(x), 1.0, atol=1e-6)


def test_derivative_matches_finite_difference() -> None:
    x = np.linspace(0.0, 1.0, 200)
    y = np.sin(2.0 * np.pi * x)
    fit = fit_smoothing_spline(_curve(x, y), spar=0.5)
    fd = np.gradient(fit.value(x), x)
    assert np.allclose(fit.derivative(x)[5:-5], fd[5:-5], atol=0.05)


def test_larger_spar_is_smoother() -> None:
    rng = np.random.default_rng(0)
    x = np.linspace(0.0, 1.0, 200)
    y = np.sin(2.0 * np.pi * x) + 0.1 * rng.normal(size=x.size)
    rough = fit_smoothing_spline(_curve(x, y), spar=0.2).value(x)
    smooth = fit_smoothing_spline(_curve(x, y), spar=1.2).value(x)
    assert np.sum(np.diff(smooth, 2) ** 2) < np.sum(np.diff(rough, 2) ** 2)


def test_spar_to_lambda_increases_with_spar() -> None:
    lams = [spar_to_lambda(512, s) for s in (0.0, 0.5, 1.0, 1.5)]
    assert all(a < b for a, b in zip(lams, lams[1:]))
    assert spar_to_lambda(512, 1.0 / 3.0) == pytest.approx(3.0 / (16.0 * 511.0**3))


def test_too_few_points_raise_fit_error() -> None:
    x = np.linspace(0.0, 1.0, 4)
    with pytest.raises(FitError, match="at least 5"):
        fit_smoothing_spline(_curve(x, x), spar=1.0)
