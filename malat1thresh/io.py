"""Logging and report-writing helpers."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from malat1thresh._version import __version__
from malat1thresh.core.types import ThresholdResult


def ensure_dir(path: str | Path) -> None:
    p = Path(path)
    p.mkdir(parents=True, exist_ok=True)


def write_json(path: str | Path, payload: dict[str, Any]) -> None:
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    with out.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, sort_keys=True)


def setup_logger(log_path: Path, logger_name: str) -> logging.Logger:
    ensure_dir(log_path.parent)
    logger = logging.getLogger(logger_name)
    logger.setLevel(logging.INFO)
    logger.handlers.clear()
    formatter = logging.Formatter("%(asctime)s | %(levelname)s | %(message)s")
    fh = logging.FileHandler(log_path, mode="w", encoding="utf-8")
    fh.setFormatter(formatter)
    logger.addHandler(fh)
    sh = logging.StreamHandler()
    sh.setFormatter(formatter)
    logger.addHandler(sh)
    return logger


def write_threshold_report(
    path: str | Path,
    result: ThresholdResult,
    *,
    sample_name: str | None = None,
) -> Path:
    """Write ``result.summary()`` as JSON and return the output path."""
    payload = result.summary()
    payload["malat1thresh_version"] = __version__
    if sample_name is not None:
        payload["sample"] = str(sample_name)
    out = Path(path)
    write_json(out, payload)
    return out
