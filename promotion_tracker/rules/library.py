from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from promotion_tracker.engine.tenure import months_since
from promotion_tracker.models.eligibility import FailedAt
from promotion_tracker.models.metrics import EmployeeMetrics
from promotion_tracker.models.rule import PromotionRule

from .base import Gate


@dataclass
class PerformanceGate(Gate):
    """Require the minimum performance rating."""

    slug = "performance"

    def check(self, rule: PromotionRule, metrics: EmployeeMetrics, today: date) -> bool:
        return metrics.performance_rating >= rule.min_performance_rating

    def actual(self, metrics: EmployeeMetrics, today: date) -> float:
        return metrics.performance_rating


@dataclass
class TenureGate(Gate):
    """Require enough whole months in the current position."""

    slug = "time"

    def check(self, rule: PromotionRule, metrics: EmployeeMetrics, today: date) -> bool:
        return self.actual(metrics, today) >= rule.min_tenure_months

    def actual(self, metrics: EmployeeMetrics, today: date) -> float:
        return months_since(metrics.position_start_date, today)


@dataclass
class CourseGate(Gate):
    """Require the minimum training course coverage."""

    slug = "courses"

    def check(self, rule: PromotionRule, metrics: EmployeeMetrics, today: date) -> bool:
        return metrics.course_coverage >= rule.min_course_coverage

    def actual(self, metrics: EmployeeMetrics, today: date) -> float:
        return metrics.course_coverage


def default_gates() -> list:
    """Return the pre-exam gates in evaluation order."""
    return [
        PerformanceGate(
            name="performance",
            step=1,
            failed_at=FailedAt.PERFORMANCE,
            explain_fail="Performance {actual:g}% below required {rule.min_performance_rating:g}%",
        ),
        TenureGate(
            name="time",
            step=2,
            failed_at=FailedAt.TIME,
            explain_fail="{actual:g} months in position, {rule.min_tenure_months} required",
        ),
        CourseGate(
            name="courses",
            step=3,
            failed_at=FailedAt.COURSES,
            explain_fail="Course coverage {actual:g}% below required {rule.min_course_coverage:g}%",
        ),
    ]
