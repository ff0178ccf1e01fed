from __future__ import annotations

import logging
from typing import Any, List

from ..models.exam import ExamAttempt
from ..rules.catalog import RuleCatalog

logger = logging.getLogger(__name__)


class ExamHistoryLedger:
    """Record and read back qualification exam attempts.

    Attempts are appended and never changed here; ``passed`` is computed
    once when the attempt is recorded.
    """

    def __init__(self, store, default_min_grade: float = 70) -> None:
        self.store = store
        self.default_min_grade = default_min_grade

    def record_attempt(
        self,
        employee_id: str,
        exam_date: Any,
        grade: Any,
        min_grade_required: Any,
        position: str = "",
    ) -> ExamAttempt:
        attempt = ExamAttempt.create(
            attempt_id=self.store.next_id(),
            employee_id=employee_id,
            exam_date=exam_date,
            grade=grade,
            min_grade_required=min_grade_required,
            position=position,
        )
        self.store.append(attempt)
        logger.info(
            "Recorded exam %s for %s: %g/%g (%s)",
            attempt.attempt_id,
            attempt.employee_id,
            attempt.grade,
            attempt.min_grade_required,
            "passed" if attempt.passed else "failed",
        )
        return attempt

    def record_result(
        self,
        employee_id: str,
        position: str,
        exam_date: Any,
        grade: Any,
        catalog: RuleCatalog,
    ) -> ExamAttempt:
        """Record an attempt using the catalog's current exam threshold."""
        threshold = catalog.min_exam_grade_for(position, self.default_min_grade)
        return self.record_attempt(employee_id, exam_date, grade, threshold, position)

    def attempts_for(self, employee_id: str) -> List[ExamAttempt]:
        """Return attempts, most recent exam date first.

        Attempts on the same date keep the order they were recorded in.
        """
        return sorted(
            self.store.list_by_employee(employee_id),
            key=lambda a: a.exam_date,
            reverse=True,
        )

    def remove(self, attempt_id: str) -> bool:
        return self.store.remove(attempt_id)
