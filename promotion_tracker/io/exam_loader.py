"""Load historical exam attempts from CSV files."""
from __future__ import annotations

import csv
from dataclasses import replace
from typing import List, Optional

from ..models.exam import ExamAttempt
from ..rules.catalog import RuleCatalog

_TRUE = {"true", "yes", "1", "passed"}
_FALSE = {"false", "no", "0", "failed"}


def load_exams(
    path: str,
    catalog: Optional[RuleCatalog] = None,
    default_min_grade: float = 70,
) -> List[ExamAttempt]:
    """Load exam attempts from a CSV file, in file order.

    Required columns are ``employee_id``, ``exam_date`` and ``grade``.
    ``min_grade_required`` defaults to the catalog threshold for the row's
    ``position`` (or ``default_min_grade``). A ``passed`` column, when
    filled in, is kept as recorded instead of being recomputed.

    Raises
    ------
    ValueError
        If required columns are missing or a row has no usable date.
    """
    catalog = catalog or RuleCatalog()
    with open(path, newline="", encoding="utf8") as handle:
        reader = csv.DictReader(handle)
        fieldnames = reader.fieldnames or []
        required = {"employee_id", "exam_date", "grade"}
        missing = required - set(fieldnames)
        if missing:
            raise ValueError(f"Missing required columns: {', '.join(sorted(missing))}")

        attempts: List[ExamAttempt] = []
        for lineno, row in enumerate(reader, start=2):
            employee_id = (row.get("employee_id") or "").strip()
            if not employee_id:
                raise ValueError(f"Row {lineno}: 'employee_id' is required")
            position = (row.get("position") or "").strip()

            threshold = (row.get("min_grade_required") or "").strip()
            if not threshold:
                threshold = catalog.min_exam_grade_for(position, default_min_grade)

            attempt_id = (row.get("attempt_id") or "").strip() or f"import-{lineno:05d}"
            try:
                attempt = ExamAttempt.create(
                    attempt_id=attempt_id,
                    employee_id=employee_id,
                    exam_date=(row.get("exam_date") or "").strip(),
                    grade=row.get("grade"),
                    min_grade_required=threshold,
                    position=position,
                )
            except ValueError as exc:
                raise ValueError(f"Row {lineno}: {exc}") from exc

            passed = (row.get("passed") or "").strip().lower()
            if passed in _TRUE or passed in _FALSE:
                attempt = replace(attempt, passed=passed in _TRUE)
            elif passed:
                raise ValueError(f"Row {lineno}: passed must be true or false")
            attempts.append(attempt)

    return attempts
