"""Contract and training-plan deadline report for probationary hires."""
from __future__ import annotations

from datetime import date
from typing import Any, Dict, Iterable, List, Optional

import yaml

from ..engine.contracts import (
    CONTRACT_DURATION_DAYS,
    TRAINING_PLAN_DEFAULT_DAYS,
    TrainingPlanRule,
    contract_end_date,
    contract_status,
    days_until,
    training_plan_due_date,
    training_plan_stats,
    training_plan_status,
)


def build_deadline_rows(
    hires: Iterable[Dict[str, Any]],
    plan_rules: Iterable[TrainingPlanRule] = (),
    today: Optional[date] = None,
    contract_days: int = CONTRACT_DURATION_DAYS,
    plan_default_days: int = TRAINING_PLAN_DEFAULT_DAYS,
) -> List[Dict[str, Any]]:
    today = today or date.today()
    plan_rules = list(plan_rules)
    rows: List[Dict[str, Any]] = []
    for hire in hires:
        end = contract_end_date(hire.get("hire_date"), contract_days)
        remaining = days_until(end, today)
        due, due_days = training_plan_due_date(
            hire.get("hire_date"),
            hire.get("department", ""),
            hire.get("area", ""),
            plan_rules,
            plan_default_days,
        )
        rows.append(
            {
                "employee_id": hire["employee_id"],
                "department": hire.get("department", ""),
                "area": hire.get("area", ""),
                "contract_end": end.isoformat() if end else None,
                "contract_days_remaining": remaining,
                "contract_status": contract_status(remaining).status,
                "training_plan_due": due.isoformat() if due else None,
                "training_plan_days": due_days,
                "training_plan_status": training_plan_status(hire.get("delivered", False), due, today).status,
                "delivered": bool(hire.get("delivered", False)),
            }
        )
    return rows


def export_deadlines_yaml(
    rows: List[Dict[str, Any]], report_file: str, today: Optional[date] = None
) -> None:
    """Write rows and per-department training-plan counts to YAML."""
    stats = training_plan_stats(
        ({**row, "due_date": row["training_plan_due"]} for row in rows), today
    )
    with open(report_file, "w", encoding="utf8") as handle:
        yaml.safe_dump({"hires": rows, "training_plans": stats}, handle, sort_keys=True, allow_unicode=True)
