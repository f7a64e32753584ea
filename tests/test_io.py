from __future__ import annotations

import json
import logging
from pathlib import Path

import numpy as np

from malat1thresh import find_threshold
from malat1thresh._version import __version__
from malat1thresh.io import setup_logger, write_threshold_report


def test_write_threshold_report(tmp_path: Path):
    rng = np.random.default_rng(0)
    x = np.concatenate(
        [np.abs(rng.normal(0.2, 0.3, size=1500)), np.abs(rng.normal(3.0, 0.5, size=3500))]
    )
    result = find_threshold(x)
    out = write_threshold_report(tmp_path / "reports" / "s1.json", result, sample_name="s1")
    payload = json.loads(out.read_text(encoding="utf-8"))
    assert payload["threshold"] == result.threshold
    assert payload["sample"] == "s1"
    assert payload["malat1thresh_version"] == __version__
    assert payload["n_cells"] == x.size


def test_setup_logger_writes_file(tmp_path: Path):
    log_path = tmp_path / "logs" / "run.log"
    logger = setup_logger(log_path, "malat1thresh_test")
    logger.info("threshold=%.3f", 1.25)
    for handler in logger.handlers:
        handler.close()
    text = log_path.read_text(encoding="utf-8")
    assert "| INFO | threshold=1.250" in text
    logger.handlers.clear()
    assert logging.getLogger("malat1thresh_test").level == logging.INFO
