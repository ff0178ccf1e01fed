"""Load probationary hires from CSV."""
from __future__ import annotations

import csv
from typing import Any, Dict, List

_TRUE = {"1", "true", "yes", "y", "si", "sí"}


def load_hires(path: str) -> List[Dict[str, Any]]:
    """Return one mapping per hire.

    Required columns are ``employee_id`` and ``hire_date``. ``department``,
    ``area`` and ``training_plan_delivered`` are optional; the hire date is
    kept as text and validated where deadlines are computed.
    """
    with open(path, newline="", encoding="utf8") as handle:
        reader = csv.DictReader(handle)
        missing = {"employee_id", "hire_date"} - set(reader.fieldnames or [])
        if missing:
            raise ValueError(f"Missing required columns: {', '.join(sorted(missing))}")

        hires: List[Dict[str, Any]] = []
        seen = set()
        for lineno, row in enumerate(reader, start=2):
            employee_id = (row.get("employee_id") or "").strip()
            if not employee_id:
                raise ValueError(f"Row {lineno}: 'employee_id' is required")
            if employee_id in seen:
                raise ValueError(f"Row {lineno}: duplicate employee_id '{employee_id}'")
            seen.add(employee_id)
            hires.append(
                {
                    "employee_id": employee_id,
                    "hire_date": (row.get("hire_date") or "").strip(),
                    "department": (row.get("department") or "").strip(),
                    "area": (row.get("area") or "").strip(),
                    "delivered": (row.get("training_plan_delivered") or "").strip().lower() in _TRUE,
                }
            )
    return hires
