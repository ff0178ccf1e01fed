"""Eligibility reports for export.

This module turns evaluated employees into rows suitable for YAML or CSV
output. Each row carries the gating state, a short reason and, when exam
history is supplied, the retake cooldown. A summary counts employees per
status (eligible, cleared for the exam, not eligible).
"""
from __future__ import annotations

import csv
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Mapping, Optional

import yaml

from ..engine.cooldown import next_eligible_date
from ..engine.evaluator import CAN_TAKE_EXAM, ELIGIBLE, NOT_ELIGIBLE, EligibilityEvaluator, classify
from ..engine.tenure import months_since
from ..models.metrics import EmployeeMetrics
from ..rules.catalog import RuleCatalog

REPORT_COLUMNS = [
    "employee_id",
    "position",
    "promotion",
    "months_in_position",
    "step",
    "eligible",
    "can_take_exam",
    "failed_at",
    "status",
    "reason",
    "can_retake",
    "next_exam_date",
]


@dataclass
class EligibilityReport:
    rows: List[Dict[str, Any]] = field(default_factory=list)
    summary: Dict[str, int] = field(default_factory=dict)


def build_report(
    catalog: RuleCatalog,
    metrics: Mapping[str, EmployeeMetrics],
    ledger=None,
    today: Optional[date] = None,
    include_unmatched: bool = False,
) -> EligibilityReport:
    """Evaluate every employee and collect report rows.

    Parameters
    ----------
    catalog:
        Promotion rules to evaluate against.
    metrics:
        Mapping of employee id to recorded metrics.
    ledger:
        Optional :class:`~promotion_tracker.storage.ledger.ExamHistoryLedger`;
        when given, rows include the retake cooldown.
    include_unmatched:
        Keep employees whose position has no promotion rule.
    """
    today = today or date.today()
    evaluator = EligibilityEvaluator()
    summary = {ELIGIBLE: 0, CAN_TAKE_EXAM: 0, NOT_ELIGIBLE: 0}
    rows: List[Dict[str, Any]] = []

    for employee_id in sorted(metrics):
        data = metrics[employee_id]
        rule = catalog.lookup(data.position)
        if rule is None and not include_unmatched:
            continue
        result = evaluator.evaluate(rule, data, today)
        status = classify(result)
        summary[status] += 1

        row: Dict[str, Any] = {
            "employee_id": employee_id,
            "position": data.position,
            "promotion": rule.promotion if rule else "",
            "months_in_position": months_since(data.position_start_date, today),
            **result.to_dict(),
            "status": status,
            "reason": evaluator.explain(rule, data, result, today),
            "can_retake": None,
            "next_exam_date": None,
        }
        if ledger is not None:
            cooldown = next_eligible_date(ledger.attempts_for(employee_id), today)
            row["can_retake"] = cooldown.can_retake
            row["next_exam_date"] = cooldown.next_date.isoformat() if cooldown.next_date else None
        rows.append(row)

    return EligibilityReport(rows=rows, summary=summary)


def filter_rows(report: EligibilityReport, status: str = "all") -> List[Dict[str, Any]]:
    """Return rows whose status matches ``status`` (``"all"`` keeps everything)."""
    if status == "all":
        return list(report.rows)
    return [row for row in report.rows if row["status"] == status]


def export_yaml(report: EligibilityReport, report_file: str) -> None:
    """Write rows and the status summary to a YAML file."""
    data = {"employees": report.rows, "summary": report.summary}
    with open(report_file, "w", encoding="utf8") as handle:
        yaml.safe_dump(data, handle, sort_keys=True, allow_unicode=True)


def export_csv(report: EligibilityReport, report_file: str) -> None:
    """Write report rows to CSV.

    After a blank row a second header is written with the status summary.
    """
    with open(report_file, "w", newline="", encoding="utf8") as handle:
        writer = csv.DictWriter(handle, fieldnames=REPORT_COLUMNS)
        writer.writeheader()
        for row in report.rows:
            writer.writerow({key: "" if row.get(key) is None else row[key] for key in REPORT_COLUMNS})
        plain = csv.writer(handle)
        plain.writerow([])
        plain.writerow(["status", "count"])
        for status in sorted(report.summary):
            plain.writerow([status, report.summary[status]])
