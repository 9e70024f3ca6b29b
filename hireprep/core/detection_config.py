from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

_DETECTION_CONFIG_CACHE: dict[str, Any] | None = None
_DETECTION_CONFIG_PATH = Path(__file__).resolve().parents[2] / "config" / "detection.yaml"


def get_detection_config() -> dict[str, Any]:
    """Load detector tuning from repo-level config/detection.yaml and cache it."""
    global _DETECTION_CONFIG_CACHE

    if _DETECTION_CONFIG_CACHE is not None:
        return _DETECTION_CONFIG_CACHE

    if not _DETECTION_CONFIG_PATH.exists():
        raise RuntimeError(
            f"Detection config not found at '{_DETECTION_CONFIG_PATH}'. "
            "Expected file: config/detection.yaml"
        )

    try:
        raw = _DETECTION_CONFIG_PATH.read_text(encoding="utf-8")
    except OSError as exc:
        raise RuntimeError(
            f"Failed to read detection config '{_DETECTION_CONFIG_PATH}': {exc}"
        ) from exc

    try:
        parsed = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise RuntimeError(
            f"Invalid YAML in detection config '{_DETECTION_CONFIG_PATH}': {exc}"
        ) from exc

    if not isinstance(parsed, dict):
        raise RuntimeError(
            f"Invalid detection config '{_DETECTION_CONFIG_PATH}': expected a top-level mapping."
        )

    _DETECTION_CONFIG_CACHE = parsed
    return _DETECTION_CONFIG_CACHE


def get_detection_value(path: str, default: Any = None) -> Any:
    """Get nested config value using dot path notation, e.g. 'job_description.top_n'."""
    if not path:
        return default

    current: Any = get_detection_config()
    for key in path.split("."):
        if not isinstance(current, dict):
            return default
        if key not in current:
            return default
        current = current[key]
    return current
