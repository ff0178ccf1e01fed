"""Keep stored eligibility fields in step with their inputs."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Iterable, Optional

from ..engine.evaluator import EligibilityEvaluator
from ..engine.tenure import months_since
from ..errors import StorageError
from ..models.exam import ExamAttempt
from ..models.metrics import EmployeeMetrics, MetricsRecord
from ..rules.catalog import RuleCatalog
from .debounce import DebounceScheduler

logger = logging.getLogger(__name__)


@dataclass
class SyncResult:
    ok: bool
    record: Optional[MetricsRecord] = None
    error: Optional[str] = None


@dataclass
class RecomputeSummary:
    checked: int = 0
    changed: int = 0
    failed: int = 0


class RecordSynchronizer:
    """Persist metrics together with the evaluator's derived fields.

    The derived fields (step, eligible, can_take_exam, failed_at) are a
    cache of a pure evaluation and can be rebuilt at any time with
    :meth:`refresh_records`. Exam attempts keep the pass/fail they were
    recorded with until :meth:`recompute_all` is run explicitly.
    """

    def __init__(
        self,
        catalog: RuleCatalog,
        metrics_store,
        exam_store=None,
        evaluator: Optional[EligibilityEvaluator] = None,
        scheduler: Optional[DebounceScheduler] = None,
        default_min_grade: float = 70,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.catalog = catalog
        self.metrics_store = metrics_store
        self.exam_store = exam_store
        self.evaluator = evaluator or EligibilityEvaluator()
        self.scheduler = scheduler or DebounceScheduler()
        self.default_min_grade = default_min_grade
        self.clock = clock

    def _today(self) -> date:
        return self.clock().date()

    def build_record(self, employee_id: str, metrics: EmployeeMetrics) -> MetricsRecord:
        """Evaluate ``metrics`` and return the record that would be stored."""
        today = self._today()
        rule = self.catalog.lookup(metrics.position)
        result = self.evaluator.evaluate(rule, metrics, today)
        return MetricsRecord(
            employee_id=str(employee_id),
            metrics=metrics,
            promotion=rule.promotion if rule else "",
            months_in_position=months_since(metrics.position_start_date, today),
            step=result.step,
            eligible=result.eligible,
            can_take_exam=result.can_take_exam,
            failed_at=result.failed_at.value,
            updated_at=self.clock(),
        )

    def persist(self, employee_id: str, metrics: EmployeeMetrics) -> SyncResult:
        """Evaluate and store ``metrics``; storage failures are reported, not raised."""
        record = self.build_record(employee_id, metrics)
        try:
            self.metrics_store.put(record.employee_id, record)
        except StorageError as exc:
            logger.warning("Could not save metrics for %s: %s", employee_id, exc)
            return SyncResult(ok=False, record=record, error=str(exc))
        logger.info(
            "Saved %s: step %d, eligible=%s", record.employee_id, record.step, record.eligible
        )
        return SyncResult(ok=True, record=record)

    def persist_later(
        self,
        employee_id: str,
        metrics: EmployeeMetrics,
        on_done: Optional[Callable[[SyncResult], None]] = None,
    ) -> None:
        """Debounced :meth:`persist`; a newer call for the same employee wins."""
        self.scheduler.schedule(str(employee_id), self._persist_and_report, employee_id, metrics, on_done)

    def _persist_and_report(self, employee_id, metrics, on_done) -> None:
        result = self.persist(employee_id, metrics)
        if on_done is not None:
            on_done(result)

    def refresh_records(self) -> RecomputeSummary:
        """Rewrite stored records whose cached fields are stale."""
        summary = RecomputeSummary()
        today = self._today()
        for record in self.metrics_store.all():
            summary.checked += 1
            rule = self.catalog.lookup(record.metrics.position)
            fresh = self.evaluator.evaluate(rule, record.metrics, today)
            if record.matches(fresh):
                continue
            result = self.persist(record.employee_id, record.metrics)
            if result.ok:
                summary.changed += 1
            else:
                summary.failed += 1
        logger.info(
            "Refreshed metrics: %d checked, %d changed, %d failed",
            summary.checked, summary.changed, summary.failed,
        )
        return summary

    def recompute_all(self, attempts: Optional[Iterable[ExamAttempt]] = None) -> RecomputeSummary:
        """Re-derive ``min_grade_required`` and ``passed`` from current rules.

        Only attempts whose values differ are written. A failed write is
        counted and the batch carries on.
        """
        if self.exam_store is None:
            raise ValueError("recompute_all requires an exam store")
        if attempts is None:
            attempts = self.exam_store.all()

        summary = RecomputeSummary()
        for attempt in attempts:
            summary.checked += 1
            threshold = self.catalog.min_exam_grade_for(attempt.position, self.default_min_grade)
            passed = attempt.grade >= threshold
            if attempt.passed == passed and attempt.min_grade_required == threshold:
                continue
            try:
                self.exam_store.update(
                    attempt.attempt_id, passed=passed, min_grade_required=threshold
                )
            except StorageError as exc:
                logger.warning("Could not update exam %s: %s", attempt.attempt_id, exc)
                summary.failed += 1
                continue
            summary.changed += 1
        logger.info(
            "Recomputed exams: %d checked, %d changed, %d failed",
            summary.checked, summary.changed, summary.failed,
        )
        return summary
