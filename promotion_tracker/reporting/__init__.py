"""Reporting utilities for promotion_tracker."""

from .deadlines import build_deadline_rows, export_deadlines_yaml
from .eligibility import (
    EligibilityReport,
    build_report,
    export_csv,
    export_yaml,
    filter_rows,
)

__all__ = [
    "EligibilityReport",
    "build_report",
    "export_csv",
    "export_yaml",
    "filter_rows",
    "build_deadline_rows",
    "export_deadlines_yaml",
]
