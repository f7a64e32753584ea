import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np
import pytest

from malat1thresh import compute_threshold, find_threshold
from malat1thresh.plotting import FigureSink, plot_threshold_diagnostics, sanitize_sample_label


def _bimodal_sample() -> np.ndarray:
    rng = np.random.default_rng(0)
    return np.concatenate(
        [np.abs(rng.normal(0.2, 0.3, size=1500)), np.abs(rng.normal(3.0, 0.5, size=3500))]
    )


def test_figure_sink_renders_four_panels(tmp_path) -> None:
    sink = FigureSink()
    result = find_threshold(_bimodal_sample(), sink=sink)
    fig, axes = sink.render(title="sample A")
    assert axes.shape == (2, 2)
    assert f"{result.threshold:.3f}" in axes[1, 1].get_title()
    plt.close(fig)

    out = sink.save(tmp_path / "figs" / "sample_A.png")
    assert out.exists()
    assert out.stat().st_size > 0


def test_failed_run_renders_histogram_only() -> None:
    sink = FigureSink()
    x = 0.8 * np.random.default_rng(0).beta(2.0, 5.0, size=1000)
    assert compute_threshold(x, sink=sink) == 2.0
    fig, axes = sink.render()
    assert axes.size == 1
    assert "no_peak_found" in axes[0].get_title()
    plt.close(fig)


def test_reused_sink_renders_the_latest_run() -> None:
    sink = FigureSink()
    compute_threshold(np.full(10, 1.0), sink=sink)
    t = compute_threshold(_bimodal_sample(), sink=sink)
    fig, axes = sink.render()
    assert axes.shape == (2, 2)
    assert f"{t:.3f}" in axes[1, 1].get_title()
    plt.close(fig)


def test_save_to_directory_uses_sanitized_title(tmp_path) -> None:
    sink = FigureSink()
    find_threshold(_bimodal_sample(), sink=sink)
    out = sink.save(tmp_path / "figs", title="donor 1/lane-2")
    assert out == tmp_path / "figs" / "donor_1_lane_2_threshold.png"
    assert out.exists()


def test_diagnostics_require_a_recorded_sample() -> None:
    with pytest.raises(ValueError, match="No sample recorded"):
        plot_threshold_diagnostics({})


def test_sanitize_sample_label() -> None:
    assert sanitize_sample_label("donor 1/lane-2") == "donor_1_lane_2"
    assert sanitize_sample_label("***") == "sample"
