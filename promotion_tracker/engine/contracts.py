"""Probationary contract and training-plan deadlines.

New hires sign a probationary contract that ends a fixed number of days
after the hire date, and must hand in a training plan within a deadline
that depends on their department and area.
"""
from __future__ import annotations

import unicodedata
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Dict, Iterable, Optional, Tuple

from ..models.dates import to_date

CONTRACT_DURATION_DAYS = 89
TRAINING_PLAN_DEFAULT_DAYS = 60


@dataclass(frozen=True)
class DeadlineStatus:
    status: str
    label: str


@dataclass(frozen=True)
class TrainingPlanRule:
    department: str
    area: str
    deadline: str

    def matches(self, department: str, area: str) -> bool:
        return (
            self.department.strip().upper() == department.strip().upper()
            and self.area.strip().upper() == area.strip().upper()
        )


def contract_end_date(
    start: Any, duration_days: int = CONTRACT_DURATION_DAYS
) -> Optional[date]:
    """Return the contract end date, or ``None`` when ``start`` is unusable."""
    start_date = to_date(start)
    if start_date is None:
        return None
    return start_date + timedelta(days=duration_days)


def days_until(end: Any, today: Optional[date] = None) -> Optional[int]:
    """Days from ``today`` to ``end``; negative once ``end`` has passed."""
    end_date = to_date(end)
    if end_date is None:
        return None
    return (end_date - (today or date.today())).days


def contract_status(days_remaining: Optional[int]) -> DeadlineStatus:
    if days_remaining is None:
        return DeadlineStatus("unknown", "No date")
    if days_remaining < 0:
        return DeadlineStatus("expired", "Expired")
    if days_remaining <= 7:
        return DeadlineStatus("critical", "Ending soon")
    if days_remaining <= 15:
        return DeadlineStatus("warning", "Ending within two weeks")
    return DeadlineStatus("active", "Active")


def _fold(text: str) -> str:
    # "DÍAS" and "DIAS" both appear in the catalog
    decomposed = unicodedata.normalize("NFKD", text.upper())
    return "".join(c for c in decomposed if not unicodedata.combining(c))


def deadline_days(text: str, default: int = TRAINING_PLAN_DEFAULT_DAYS) -> int:
    """Translate a catalog deadline such as ``"3 MESES"`` into days."""
    folded = _fold(text or "")
    if "7 DIAS" in folded:
        return 7
    if "3 MESES" in folded:
        return 90
    if "2 MESES" in folded:
        return 60
    return default


def training_plan_due_date(
    start: Any,
    department: str,
    area: str,
    rules: Iterable[TrainingPlanRule],
    default_days: int = TRAINING_PLAN_DEFAULT_DAYS,
) -> Tuple[Optional[date], int]:
    """Return ``(due_date, due_days)`` for a new hire's training plan."""
    start_date = to_date(start)
    if start_date is None or not department or not area:
        return None, default_days

    due_days = default_days
    for rule in rules:
        if rule.matches(department, area):
            due_days = deadline_days(rule.deadline, default_days)
            break
    return start_date + timedelta(days=due_days), due_days


def training_plan_status(
    delivered: bool, due_date: Any, today: Optional[date] = None
) -> DeadlineStatus:
    if delivered:
        return DeadlineStatus("delivered", "Delivered")
    remaining = days_until(due_date, today)
    if remaining is None:
        return DeadlineStatus("pending", "Pending")
    if remaining < 0:
        return DeadlineStatus("overdue", "Overdue")
    if remaining <= 3:
        return DeadlineStatus("warning", "Due soon")
    return DeadlineStatus("pending", "Pending")


def training_plan_stats(
    employees: Iterable[Dict[str, Any]], today: Optional[date] = None
) -> Dict[str, Dict[str, Any]]:
    """Count delivered and overdue training plans per department and area.

    Each employee mapping needs ``department``, ``area``, ``due_date`` and
    ``delivered``; employees without a department or area are skipped.
    """
    stats: Dict[str, Dict[str, Any]] = {}
    for emp in employees:
        department = emp.get("department")
        area = emp.get("area")
        if not department or not area:
            continue
        delivered = bool(emp.get("delivered", False))
        overdue = training_plan_status(delivered, emp.get("due_date"), today).status == "overdue"

        dept = stats.setdefault(
            department, {"total": 0, "delivered": 0, "overdue": 0, "areas": {}}
        )
        bucket = dept["areas"].setdefault(area, {"total": 0, "delivered": 0, "overdue": 0})
        for counts in (dept, bucket):
            counts["total"] += 1
            counts["delivered"] += int(delivered)
            counts["overdue"] += int(overdue)
    return stats
