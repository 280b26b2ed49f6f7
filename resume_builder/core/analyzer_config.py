from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

_ANALYZER_CONFIG_CACHE: dict[str, Any] | None = None
_ANALYZER_CONFIG_PATH = Path(__file__).resolve().parents[1] / "analysis" / "analyzer.yaml"


def get_analyzer_config() -> dict[str, Any]:
    """Load keyword dictionaries and scoring weights from analysis/analyzer.yaml and cache them."""
    global _ANALYZER_CONFIG_CACHE

    if _ANALYZER_CONFIG_CACHE is not None:
        return _ANALYZER_CONFIG_CACHE

    if not _ANALYZER_CONFIG_PATH.exists():
        raise RuntimeError(
            f"Analyzer config not found at '{_ANALYZER_CONFIG_PATH}'. "
            "Expected file: resume_builder/analysis/analyzer.yaml"
        )

    try:
        raw = _ANALYZER_CONFIG_PATH.read_text(encoding="utf-8")
    except OSError as exc:
        raise RuntimeError(
            f"Failed to read analyzer config '{_ANALYZER_CONFIG_PATH}': {exc}"
        ) from exc

    try:
        parsed = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise RuntimeError(
            f"Invalid YAML in analyzer config '{_ANALYZER_CONFIG_PATH}': {exc}"
        ) from exc

    if not isinstance(parsed, dict):
        raise RuntimeError(
            f"Invalid analyzer config '{_ANALYZER_CONFIG_PATH}': expected a top-level mapping."
        )

    _ANALYZER_CONFIG_CACHE = parsed
    return _ANALYZER_CONFIG_CACHE


def get_analyzer_value(path: str, default: Any = None) -> Any:
    """Get nested config value using dot path notation, e.g. 'ats.weights.keywords'."""
    if not path:
        return default

    current: Any = get_analyzer_config()
    for key in path.split("."):
        if not isinstance(current, dict):
            return default
        if key not in current:
            return default
        current = current[key]
    return current
