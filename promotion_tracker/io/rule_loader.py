"""Load and validate promotion rules from YAML (or JSON) files."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

import yaml

from ..models.rule import PromotionRule
from ..rules.catalog import RuleCatalog

# Spreadsheet export column names used by the legacy catalog.
LEGACY_KEYS = {
    "current position": "current_position",
    "last change": "min_tenure_months",
    "exam grade": "min_exam_grade",
    "course coverage": "min_course_coverage",
    "performance rating": "min_performance_rating",
}

LEGACY_DEFAULTS = {
    "min_tenure_months": 6,
    "min_exam_grade": 80,
    "min_course_coverage": 60,
    "min_performance_rating": 80,
}


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return int(value)
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


def _validate_rule(index: int, data: Dict[str, Any]) -> PromotionRule:
    legacy = any(key in data for key in LEGACY_KEYS)
    normalized = {LEGACY_KEYS.get(k, k): v for k, v in data.items()}

    required = {"current_position", "promotion"}
    missing = required - normalized.keys()
    if missing:
        raise ValueError(
            f"Rule {index}: missing required fields: {', '.join(sorted(missing))}"
        )
    for key in required:
        if not isinstance(normalized[key], str) or not normalized[key].strip():
            raise ValueError(f"Rule {index}: {key} must be a non-empty string")

    thresholds: Dict[str, int] = {}
    for key, default in LEGACY_DEFAULTS.items():
        raw = normalized.get(key)
        if raw is None:
            thresholds[key] = default
            continue
        value = _as_int(raw)
        if legacy:
            # legacy exports use blanks and zeros for "use the default"
            value = value or default
        elif value is None:
            raise ValueError(f"Rule {index}: {key} must be an integer")
        thresholds[key] = value

    try:
        return PromotionRule(
            current_position=normalized["current_position"],
            promotion=normalized["promotion"],
            **thresholds,
        )
    except ValueError as exc:
        raise ValueError(f"Rule {index}: {exc}") from exc


def load_rules(path: str) -> List[PromotionRule]:
    """Parse a YAML or JSON file into :class:`PromotionRule` objects."""
    with open(path, "r", encoding="utf8") as handle:
        data = yaml.safe_load(handle)

    if not isinstance(data, list):
        raise ValueError("Rule file must contain a list of rule definitions")

    rules: List[PromotionRule] = []
    for idx, item in enumerate(data, start=1):
        if not isinstance(item, dict):
            raise ValueError(
                f"Rule {idx}: expected mapping but found {type(item).__name__}"
            )
        rules.append(_validate_rule(idx, item))

    return rules


def load_catalog(path: str) -> RuleCatalog:
    """Load rules from ``path`` into a :class:`RuleCatalog`."""
    return RuleCatalog.from_rules(load_rules(path))


def save_rules(catalog: RuleCatalog, path: str) -> None:
    with open(path, "w", encoding="utf8") as handle:
        yaml.safe_dump([rule.to_dict() for rule in catalog], handle, sort_keys=False)


def rule_from_dict(data: Dict[str, Any]) -> PromotionRule:
    """Validate a single rule mapping, e.g. from an API request."""
    return _validate_rule(1, data)
