import sys
from datetime import date, datetime
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from promotion_tracker.engine.evaluator import evaluate
from promotion_tracker.models.exam import ExamAttempt
from promotion_tracker.models.metrics import EmployeeMetrics, MetricsRecord
from promotion_tracker.models.rule import PromotionRule


def test_promotion_rule_normalizes_positions():
    rule = PromotionRule(current_position="  operator c ", promotion="operator b")
    assert rule.current_position == "OPERATOR C"
    assert rule.promotion == "OPERATOR B"
    assert rule.key == "OPERATOR C"


def test_promotion_rule_validation():
    with pytest.raises(ValueError):
        PromotionRule(current_position="  ", promotion="X")
    with pytest.raises(ValueError):
        PromotionRule(current_position="A", promotion="B", min_tenure_months=-1)
    with pytest.raises(ValueError):
        PromotionRule(current_position="A", promotion="B", min_exam_grade=101)


def test_metrics_clamp_instead_of_raising():
    metrics = EmployeeMetrics(
        position=" Operator C ",
        performance_rating="abc",
        course_coverage=140,
        exam_grade=None,
    )
    assert metrics.position == "Operator C"
    assert metrics.position_key == "OPERATOR C"
    assert metrics.performance_rating == 0
    assert metrics.course_coverage == 100
    assert metrics.exam_grade == 0
    assert not metrics.has_exam_grade

    assert EmployeeMetrics(performance_rating=-5).performance_rating == 0
    assert EmployeeMetrics(performance_rating="85.5").performance_rating == 85.5


def test_metrics_record_cache_matches_fresh_evaluation():
    rule = PromotionRule("Operator C", "Operator B")
    metrics = EmployeeMetrics(
        position="Operator C",
        performance_rating=85,
        position_start_date=date(2024, 1, 1),
        course_coverage=70,
    )
    result = evaluate(rule, metrics, today=date(2024, 8, 1))
    record = MetricsRecord(
        employee_id="E1",
        metrics=metrics,
        step=result.step,
        eligible=result.eligible,
        can_take_exam=result.can_take_exam,
        failed_at=result.failed_at.value,
        updated_at=datetime(2024, 8, 1, 9, 30),
    )
    assert record.matches(result)

    restored = MetricsRecord.from_dict(record.to_dict())
    assert restored.metrics.position_start_date == "2024-01-01"
    assert restored.updated_at == datetime(2024, 8, 1, 9, 30)
    assert restored.matches(evaluate(rule, restored.metrics, today=date(2024, 8, 1)))


def test_exam_attempt_create_derives_passed():
    attempt = ExamAttempt.create("x1", "E1", "2024-01-15", 80, 80, position="Operator C")
    assert attempt.exam_date == date(2024, 1, 15)
    assert attempt.passed

    failed = ExamAttempt.create("x2", "E1", date(2024, 1, 15), 79.5, 80)
    assert not failed.passed


def test_exam_attempt_rejects_unusable_date():
    with pytest.raises(ValueError):
        ExamAttempt.create("x1", "E1", "2024-13-01", 90, 80)
    with pytest.raises(ValueError):
        ExamAttempt.create("x1", "E1", None, 90, 80)


def test_exam_attempt_from_dict_keeps_stored_result():
    attempt = ExamAttempt.from_dict(
        {
            "attempt_id": "x1",
            "employee_id": "E1",
            "exam_date": "2024-01-15",
            "grade": 75,
            "min_grade_required": 70,
            "passed": False,
        }
    )
    assert attempt.passed is False
