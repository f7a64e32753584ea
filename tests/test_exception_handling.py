from __future__ import annotations

import logging

import numpy as np
import pytest

from malat1thresh import RecordingSink, VisualizationSink
from malat1thresh.core import compute
from malat1thresh.core.errors import FitError, InvalidInputError


def _bimodal_sample() -> np.ndarray:
    rng = np.random.default_rng(0)
    return np.concatenate(
        [np.abs(rng.normal(0.2, 0.3, size=1500)), np.abs(rng.normal(3.0, 0.5, size=3500))]
    )


def test_expected_error_warns_and_returns_fallback(caplog):
    caplog.set_level(logging.WARNING)
    sink = RecordingSink()
    x = 0.8 * np.random.default_rng(0).beta(2.0, 5.0, size=1000)
    val = compute.compute_threshold(x, sink=sink)
    assert val == 2.0
    assert "no_peak_found" in caplog.text
    assert "no high MALAT1 peak" in caplog.text
    assert sink.artifacts["error"].kind == "no_peak_found"
    assert "threshold" not in sink.artifacts


def test_warning_goes_to_provided_logger(caplog):
    caplog.set_level(logging.WARNING, logger="qc.sample1")
    compute.compute_threshold(np.full(20, 0.5), logger=logging.getLogger("qc.sample1"))
    assert any(rec.name == "qc.sample1" for rec in caplog.records)
    assert "invalid_input" in caplog.text


def test_fit_errors_inside_pipeline_are_recovered(monkeypatch, caplog):
    caplog.set_level(logging.WARNING)

    def _raise(*_args, **_kwargs):
        raise FitError("singular design")

    monkeypatch.setattr(compute, "fit_local_quadratic", _raise)
    assert compute.compute_threshold(_bimodal_sample()) == 2.0
    assert "singular design" in caplog.text


def test_unexpected_error_propagates(monkeypatch):
    def _raise_runtime(*_args, **_kwargs):
        raise RuntimeError("unexpected")

    monkeypatch.setattr(compute, "estimate_density", _raise_runtime)
    with pytest.raises(RuntimeError, match="unexpected"):
        compute.compute_threshold(_bimodal_sample())


def test_failing_sink_does_not_change_result(caplog):
    caplog.set_level(logging.WARNING)

    class _BrokenSink(VisualizationSink):
        def on_density(self, density):
            raise RuntimeError("renderer offline")

    x = _bimodal_sample()
    expected = compute.compute_threshold(x)
    assert compute.compute_threshold(x, sink=_BrokenSink()) == expected
    assert "renderer offline" in caplog.text


def test_non_numeric_sample_returns_fallback(caplog):
    caplog.set_level(logging.WARNING)
    assert compute.compute_threshold(["a", "b", "c"]) == 2.0
    assert "invalid_input" in caplog.text

    with pytest.raises(InvalidInputError, match="normalized counts") as info:
        compute.compute_threshold(["a", "b", "c"], strict=True)
    assert isinstance(info.value.__cause__, ValueError)
