import numpy as np

from malat1thresh import apply_threshold, threshold_table
from malat1thresh.filtering import TABLE_COLUMNS


def test_apply_threshold_keeps_cells_at_or_above() -> None:
    mask = apply_threshold(np.array([0.1, 0.5, 1.0, 2.5]), 0.5)
    assert mask.tolist() == [False, True, True, True]


def test_threshold_table_reports_each_sample() -> None:
    rng = np.random.default_rng(0)
    good = np.concatenate(
        [np.abs(rng.normal(0.2, 0.3, size=1500)), np.abs(rng.normal(3.0, 0.5, size=3500))]
    )
    poor = 0.8 * rng.beta(2.0, 5.0, size=1000)

    df = threshold_table({"good": good, "poor": poor})
    assert list(df.columns) == TABLE_COLUMNS
    assert df["sample"].tolist() == ["good", "poor"]

    good_row = df.iloc[0]
    assert not good_row["fallback_used"]
    assert good_row["error"] == ""
    assert 0.2 < good_row["threshold"] < 3.0
    assert good_row["n_kept"] == int(np.sum(good >= good_row["threshold"]))
    assert 0.0 < good_row["frac_kept"] < 1.0

    poor_row = df.iloc[1]
    assert poor_row["fallback_used"]
    assert poor_row["error"] == "no_peak_found"
    assert poor_row["threshold"] == 2.0
    assert poor_row["n_kept"] == 0
