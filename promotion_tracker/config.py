"""Runtime settings loaded from an optional YAML file."""
from __future__ import annotations

import os
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional

import yaml


@dataclass
class Settings:
    """Tunable values shared by the CLI, the web API and the synchronizer."""

    debounce_seconds: float = 0.5
    default_min_exam_grade: float = 70
    contract_duration_days: int = 89
    training_plan_default_days: int = 60
    rules_path: Optional[str] = None
    metrics_path: Optional[str] = None
    exams_path: Optional[str] = None
    training_plan_path: Optional[str] = None

    def __post_init__(self) -> None:
        if self.debounce_seconds < 0:
            raise ValueError("debounce_seconds must be non-negative")
        if not 0 <= self.default_min_exam_grade <= 100:
            raise ValueError("default_min_exam_grade must be between 0 and 100")
        if self.contract_duration_days < 0:
            raise ValueError("contract_duration_days must be non-negative")
        if self.training_plan_default_days < 0:
            raise ValueError("training_plan_default_days must be non-negative")


_NUMERIC = {
    "debounce_seconds": (int, float),
    "default_min_exam_grade": (int, float),
    "contract_duration_days": (int,),
    "training_plan_default_days": (int,),
}


def _validate(data: Dict[str, Any]) -> Dict[str, Any]:
    known = {f.name for f in fields(Settings)}
    unknown = set(data) - known
    if unknown:
        raise ValueError(f"Unknown settings: {', '.join(sorted(unknown))}")

    for key, value in data.items():
        if value is None:
            continue
        expected = _NUMERIC.get(key, (str,))
        if isinstance(value, bool) or not isinstance(value, expected):
            raise ValueError(f"Setting '{key}' has invalid type {type(value).__name__}")
    return data


def load_settings(path: str | None) -> Settings:
    """Load :class:`Settings` from ``path``.

    A missing or empty file yields the defaults. Unknown keys and values of
    the wrong type raise :class:`ValueError`.
    """
    if not path or not os.path.exists(path):
        return Settings()
    with open(path, "r", encoding="utf8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ValueError("Settings file must contain a mapping")
    return Settings(**_validate(data))
