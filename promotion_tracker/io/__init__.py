"""Input/output helpers for :mod:`promotion_tracker`."""

from .exam_loader import load_exams
from .hires_loader import load_hires
from .metrics_loader import load_metrics
from .rule_loader import load_catalog, load_rules, rule_from_dict, save_rules
from .training_plan_loader import load_training_plan_rules

__all__ = [
    "load_exams",
    "load_hires",
    "load_metrics",
    "load_catalog",
    "load_rules",
    "rule_from_dict",
    "save_rules",
    "load_training_plan_rules",
]
