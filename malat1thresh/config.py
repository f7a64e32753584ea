"""Configuration loading utilities for threshold runs."""

from __future__ import annotations

import dataclasses
import json
from pathlib import Path
from typing import Any

from malat1thresh.core.types import PROFILES, ROBUST_DEFAULTS, ThresholdConfig


def load_json_config(path: str | Path) -> dict[str, Any]:
    """Load a config file and check that it holds a JSON object."""
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")
    if config_path.suffix.lower() != ".json":
        raise ValueError(
            f"Unsupported config format for '{config_path}'. Use a .json config file."
        )

    try:
        with open(config_path, "r", encoding="utf-8") as fh:
            data = json.load(fh)
    except json.JSONDecodeError as exc:
        raise ValueError(
            f"Invalid JSON in config '{config_path}' at line {exc.lineno}, "
            f"column {exc.colno}: {exc.msg}"
        ) from exc

    if not isinstance(data, dict):
        raise ValueError(
            f"Invalid config root in '{config_path}': expected JSON object, got {type(data).__name__}."
        )
    return data


def threshold_config_from_dict(data: dict[str, Any]) -> ThresholdConfig:
    """Build a `ThresholdConfig` from a named ``profile`` plus overrides.

    ``{"profile": "legacy", "bandwidth": 0.05}`` starts from the legacy
    profile and changes only the bandwidth. Without ``profile`` the robust
    defaults are used.
    """
    params = dict(data)
    profile = str(params.pop("profile", "robust")).strip().lower()
    if profile not in PROFILES:
        raise ValueError(
            f"Unknown profile '{profile}'. Expected one of: {', '.join(sorted(PROFILES))}."
        )
    known = {f.name for f in dataclasses.fields(ThresholdConfig)}
    unknown = sorted(set(params) - known)
    if unknown:
        raise ValueError(f"Unknown threshold config keys: {', '.join(unknown)}")
    base = PROFILES.get(profile, ROBUST_DEFAULTS)
    return dataclasses.replace(base, **params)


def load_threshold_config(path: str | Path) -> ThresholdConfig:
    """Read a JSON file into a validated `ThresholdConfig`."""
    return threshold_config_from_dict(load_json_config(path))
