from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from typing import Tuple

from promotion_tracker.models.eligibility import FailedAt
from promotion_tracker.models.metrics import EmployeeMetrics
from promotion_tracker.models.rule import PromotionRule


@dataclass
class Gate(ABC):
    """One sequential check an employee must pass before the exam."""

    name: str
    step: int
    failed_at: FailedAt
    explain_fail: str | None = None

    def evaluate(
        self, rule: PromotionRule, metrics: EmployeeMetrics, today: date
    ) -> Tuple[bool, str]:
        """Return whether the gate passes and, if not, why."""
        passed = self.check(rule, metrics, today)
        rationale = ""
        if not passed:
            template = self.explain_fail or f"Blocked at {self.name}"
            rationale = template.format(
                rule=rule, metrics=metrics, actual=self.actual(metrics, today)
            )
        return passed, rationale

    @abstractmethod
    def check(self, rule: PromotionRule, metrics: EmployeeMetrics, today: date) -> bool:
        """Return ``True`` if ``metrics`` satisfy the rule's threshold."""

    @abstractmethod
    def actual(self, metrics: EmployeeMetrics, today: date) -> float:
        """Return the measured value compared against the threshold."""
