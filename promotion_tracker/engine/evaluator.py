from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional, Sequence

from ..models.eligibility import NO_RULE, Eligibility, FailedAt
from ..models.metrics import EmployeeMetrics
from ..models.rule import PromotionRule
from ..rules import Gate, RuleCatalog, default_gates, gate_for

logger = logging.getLogger(__name__)

ELIGIBLE = "eligible"
CAN_TAKE_EXAM = "can_take_exam"
NOT_ELIGIBLE = "not_eligible"


class EligibilityEvaluator:
    """Compute the promotion gating state for one employee.

    Gates run strictly in order and evaluation stops at the first failure:
    1. performance rating
    2. months in position
    3. course coverage
    4. exam not yet taken (grade ``0``): cleared to sit the exam
    5. exam grade against the rule's minimum

    Evaluation is pure; ``today`` only feeds the tenure calculation.
    """

    def __init__(self, gates: Optional[Sequence[Gate]] = None) -> None:
        self.gates: List[Gate] = list(gates) if gates is not None else default_gates()

    def evaluate(
        self,
        rule: Optional[PromotionRule],
        metrics: EmployeeMetrics,
        today: Optional[date] = None,
    ) -> Eligibility:
        if rule is None:
            return NO_RULE
        today = today or date.today()

        for gate in self.gates:
            if not gate.check(rule, metrics, today):
                return Eligibility(
                    step=gate.step,
                    eligible=False,
                    can_take_exam=False,
                    failed_at=gate.failed_at,
                )

        # 0 is the "no exam yet" sentinel
        if metrics.exam_grade == 0:
            return Eligibility(step=4, eligible=False, can_take_exam=True)

        if metrics.exam_grade >= rule.min_exam_grade:
            return Eligibility(step=5, eligible=True, can_take_exam=False)
        return Eligibility(
            step=5, eligible=False, can_take_exam=True, failed_at=FailedAt.EXAM
        )

    def evaluate_employee(
        self,
        catalog: RuleCatalog,
        metrics: EmployeeMetrics,
        today: Optional[date] = None,
    ) -> Eligibility:
        """Look up the rule for ``metrics.position`` and evaluate it."""
        rule = catalog.lookup(metrics.position)
        result = self.evaluate(rule, metrics, today)
        logger.debug("Evaluated %r: %s", metrics.position, result)
        return result

    def explain(
        self,
        rule: Optional[PromotionRule],
        metrics: EmployeeMetrics,
        result: Eligibility,
        today: Optional[date] = None,
    ) -> str:
        """Return a short human-readable reason for ``result``."""
        if rule is None:
            return "No promotion rule for this position"
        if result.failed_at is FailedAt.EXAM:
            return f"Exam grade {metrics.exam_grade:g}% below required {rule.min_exam_grade:g}%"
        if result.failed_at is not FailedAt.NONE:
            _, rationale = gate_for(result.failed_at.value).evaluate(
                rule, metrics, today or date.today()
            )
            return rationale
        if result.eligible:
            return f"Eligible for promotion to {rule.promotion}"
        return "Cleared to take the qualification exam"


def evaluate(
    rule: Optional[PromotionRule],
    metrics: EmployeeMetrics,
    today: Optional[date] = None,
) -> Eligibility:
    """Evaluate with the default gates."""
    return EligibilityEvaluator().evaluate(rule, metrics, today)


def classify(result: Eligibility) -> str:
    """Bucket a result as eligible, cleared for the exam, or not eligible."""
    if result.eligible:
        return ELIGIBLE
    if result.can_take_exam:
        return CAN_TAKE_EXAM
    return NOT_ELIGIBLE
