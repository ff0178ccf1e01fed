"""Load training-plan deadline rules from YAML."""
from __future__ import annotations

from typing import List

import yaml

from ..engine.contracts import TrainingPlanRule

# Column names in the HR spreadsheet export.
_ALIASES = {"DEPARTAMENTO": "department", "ÁREA": "area", "AREA": "area", "TIEMPO": "deadline"}


def load_training_plan_rules(path: str) -> List[TrainingPlanRule]:
    """Parse a list of ``department``/``area``/``deadline`` mappings."""
    with open(path, "r", encoding="utf8") as handle:
        data = yaml.safe_load(handle) or []

    if not isinstance(data, list):
        raise ValueError("Training plan file must contain a list of rules")

    rules: List[TrainingPlanRule] = []
    for idx, item in enumerate(data, start=1):
        if not isinstance(item, dict):
            raise ValueError(
                f"Rule {idx}: expected mapping but found {type(item).__name__}"
            )
        normalized = {_ALIASES.get(k, k): v for k, v in item.items()}
        missing = {"department", "area", "deadline"} - normalized.keys()
        if missing:
            raise ValueError(
                f"Rule {idx}: missing required fields: {', '.join(sorted(missing))}"
            )
        rules.append(
            TrainingPlanRule(
                department=str(normalized["department"]),
                area=str(normalized["area"]),
                deadline=str(normalized["deadline"]),
            )
        )
    return rules
