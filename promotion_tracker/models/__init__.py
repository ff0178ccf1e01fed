"""Data models for promotion_tracker."""

from .dates import DateInput, DateValue, EpochSeconds, IsoDateString, add_months, to_date
from .exam import ExamAttempt
from .eligibility import NO_RULE, Eligibility, FailedAt
from .metrics import EmployeeMetrics, MetricsRecord
from .rule import PromotionRule, normalize_position

__all__ = [
    "DateInput",
    "DateValue",
    "EpochSeconds",
    "IsoDateString",
    "add_months",
    "to_date",
    "ExamAttempt",
    "Eligibility",
    "FailedAt",
    "NO_RULE",
    "EmployeeMetrics",
    "MetricsRecord",
    "PromotionRule",
    "normalize_position",
]
