import sys
from datetime import date
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from promotion_tracker.engine.evaluator import (
    CAN_TAKE_EXAM,
    ELIGIBLE,
    NOT_ELIGIBLE,
    EligibilityEvaluator,
    classify,
    evaluate,
)
from promotion_tracker.models.eligibility import Eligibility, FailedAt
from promotion_tracker.models.metrics import EmployeeMetrics
from promotion_tracker.models.rule import PromotionRule
from promotion_tracker.rules import RuleCatalog

TODAY = date(2024, 8, 1)
SIX_MONTHS_AGO = "2024-02-01"

RULE = PromotionRule(
    current_position="OPERATOR C",
    promotion="OPERATOR B",
    min_tenure_months=6,
    min_exam_grade=80,
    min_course_coverage=60,
    min_performance_rating=80,
)


def _metrics(**overrides):
    data = dict(
        position="Operator C",
        performance_rating=85,
        position_start_date=SIX_MONTHS_AGO,
        course_coverage=70,
        exam_grade=0,
    )
    data.update(overrides)
    return EmployeeMetrics(**data)


def test_cleared_for_exam_when_ungraded():
    result = evaluate(RULE, _metrics(), TODAY)
    assert result == Eligibility(step=4, eligible=False, can_take_exam=True, failed_at=FailedAt.NONE)


def test_blocked_by_performance():
    result = evaluate(RULE, _metrics(performance_rating=60), TODAY)
    assert result == Eligibility(step=1, eligible=False, can_take_exam=False, failed_at=FailedAt.PERFORMANCE)


def test_eligible_after_passing_exam():
    result = evaluate(RULE, _metrics(exam_grade=90), TODAY)
    assert result == Eligibility(step=5, eligible=True, can_take_exam=False, failed_at=FailedAt.NONE)


def test_failed_exam_may_retake():
    result = evaluate(RULE, _metrics(exam_grade=79), TODAY)
    assert result == Eligibility(step=5, eligible=False, can_take_exam=True, failed_at=FailedAt.EXAM)


def test_blocked_by_tenure_and_courses():
    assert evaluate(RULE, _metrics(position_start_date="2024-03-01"), TODAY).failed_at is FailedAt.TIME
    assert evaluate(RULE, _metrics(position_start_date="not a date"), TODAY).step == 2
    assert evaluate(RULE, _metrics(course_coverage=59.9), TODAY).failed_at is FailedAt.COURSES


def test_earlier_gate_wins_over_later_failures():
    result = evaluate(
        RULE,
        _metrics(performance_rating=10, position_start_date="2024-07-01", course_coverage=0, exam_grade=20),
        TODAY,
    )
    assert result.step == 1
    assert result.failed_at is FailedAt.PERFORMANCE


def test_no_rule_is_terminal_state():
    result = evaluate(None, _metrics(), TODAY)
    assert result == Eligibility(step=0, eligible=False, can_take_exam=False, failed_at=FailedAt.NONE)


@pytest.mark.parametrize("exam_grade", [0, 50, 80, 100])
def test_evaluation_is_deterministic(exam_grade):
    metrics = _metrics(exam_grade=exam_grade)
    first = evaluate(RULE, metrics, TODAY)
    assert evaluate(RULE, metrics, TODAY) == first
    if first.step == 5:
        assert first.eligible == (exam_grade >= RULE.min_exam_grade)


def test_evaluate_employee_looks_up_rule():
    catalog = RuleCatalog.from_rules([RULE])
    evaluator = EligibilityEvaluator()
    assert evaluator.evaluate_employee(catalog, _metrics(position=" operator c"), TODAY).step == 4
    assert evaluator.evaluate_employee(catalog, _metrics(position="Janitor"), TODAY).step == 0


def test_explain_reasons():
    evaluator = EligibilityEvaluator()
    metrics = _metrics(performance_rating=60)
    result = evaluator.evaluate(RULE, metrics, TODAY)
    assert evaluator.explain(RULE, metrics, result, TODAY) == "Performance 60% below required 80%"

    metrics = _metrics(position_start_date="2024-05-10")
    result = evaluator.evaluate(RULE, metrics, TODAY)
    assert evaluator.explain(RULE, metrics, result, TODAY) == "3 months in position, 6 required"

    metrics = _metrics(exam_grade=70)
    result = evaluator.evaluate(RULE, metrics, TODAY)
    assert "Exam grade 70%" in evaluator.explain(RULE, metrics, result, TODAY)

    metrics = _metrics(exam_grade=95)
    result = evaluator.evaluate(RULE, metrics, TODAY)
    assert evaluator.explain(RULE, metrics, result, TODAY) == "Eligible for promotion to OPERATOR B"
    assert evaluator.explain(None, metrics, evaluate(None, metrics), TODAY).startswith("No promotion rule")


def test_classify():
    assert classify(evaluate(RULE, _metrics(exam_grade=90), TODAY)) == ELIGIBLE
    assert classify(evaluate(RULE, _metrics(), TODAY)) == CAN_TAKE_EXAM
    assert classify(evaluate(RULE, _metrics(exam_grade=10), TODAY)) == CAN_TAKE_EXAM
    assert classify(evaluate(RULE, _metrics(course_coverage=0), TODAY)) == NOT_ELIGIBLE


def test_eligibility_to_dict():
    result = evaluate(RULE, _metrics(performance_rating=0), TODAY)
    assert result.to_dict() == {
        "step": 1,
        "eligible": False,
        "can_take_exam": False,
        "failed_at": "performance",
    }
