"""Utilities for loading :class:`~promotion_tracker.models.metrics.EmployeeMetrics` from CSV files."""
from __future__ import annotations

import csv
from typing import Dict

from ..models.metrics import EmployeeMetrics


def load_metrics(path: str) -> Dict[str, EmployeeMetrics]:
    """Load employee evaluation inputs from a CSV file.

    The CSV must contain ``employee_id`` and ``position`` columns. Optional
    columns are ``performance_rating``, ``position_start_date``,
    ``course_coverage`` and ``exam_grade``. Blank or malformed values are
    treated as not yet entered, matching how partially filled records are
    evaluated.

    Parameters
    ----------
    path:
        Path to the CSV file.

    Returns
    -------
    dict[str, EmployeeMetrics]
        Mapping of employee id to :class:`EmployeeMetrics`.

    Raises
    ------
    ValueError
        If required columns are missing, an id is blank or repeated.
    """

    with open(path, newline="", encoding="utf8") as handle:
        reader = csv.DictReader(handle)
        fieldnames = reader.fieldnames or []
        required = {"employee_id", "position"}
        missing = required - set(fieldnames)
        if missing:
            raise ValueError(f"Missing required columns: {', '.join(sorted(missing))}")

        metrics: Dict[str, EmployeeMetrics] = {}
        for lineno, row in enumerate(reader, start=2):
            employee_id = (row.get("employee_id") or "").strip()
            if not employee_id:
                raise ValueError(f"Row {lineno}: 'employee_id' is required")
            if employee_id in metrics:
                raise ValueError(f"Row {lineno}: duplicate employee_id '{employee_id}'")

            metrics[employee_id] = EmployeeMetrics(
                position=row.get("position") or "",
                performance_rating=row.get("performance_rating"),
                position_start_date=(row.get("position_start_date") or "").strip() or None,
                course_coverage=row.get("course_coverage"),
                exam_grade=row.get("exam_grade"),
            )

    return metrics
