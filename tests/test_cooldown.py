import sys
from datetime import date, datetime
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from promotion_tracker.engine.cooldown import may_schedule_exam, next_eligible_date
from promotion_tracker.models.eligibility import Eligibility
from promotion_tracker.models.exam import ExamAttempt


def _attempt(attempt_id, exam_date, grade, minimum=80):
    return ExamAttempt.create(attempt_id, "E1", exam_date, grade, minimum)


def test_no_failures_may_retake():
    assert next_eligible_date([], date(2024, 1, 1)).can_retake
    status = next_eligible_date([_attempt("a", "2024-01-15", 95)], date(2024, 1, 16))
    assert status.can_retake
    assert status.next_date is None
    assert status.wait_months == 0
    assert status.days_remaining == 0


def test_first_failure_waits_one_month():
    status = next_eligible_date([_attempt("a", "2024-01-15", 70)], date(2024, 2, 10))
    assert not status.can_retake
    assert status.next_date == date(2024, 2, 15)
    assert status.wait_months == 1
    assert status.failed_count == 1
    assert status.days_remaining == 5


def test_second_failure_waits_six_months_from_latest():
    attempts = [_attempt("a", "2024-01-15", 70), _attempt("b", "2024-02-20", 75)]
    status = next_eligible_date(attempts, date(2024, 3, 1))
    assert not status.can_retake
    assert status.wait_months == 6
    assert status.next_date == date(2024, 8, 20)
    assert status.days_remaining == 172


def test_no_escalation_beyond_six_months():
    attempts = [_attempt(str(i), date(2023, i, 1), 10) for i in range(1, 11)]
    status = next_eligible_date(attempts, date(2023, 11, 1))
    assert status.failed_count == 10
    assert status.wait_months == 6
    assert status.next_date == date(2024, 4, 1)


def test_may_retake_on_the_next_date():
    status = next_eligible_date([_attempt("a", "2024-01-31", 70)], date(2024, 2, 29))
    assert status.next_date == date(2024, 2, 29)
    assert status.can_retake
    assert status.days_remaining == 0


def test_anchor_is_most_recent_failure_regardless_of_input_order():
    attempts = [_attempt("b", "2024-02-20", 75), _attempt("a", "2024-01-15", 70)]
    assert next_eligible_date(attempts, date(2024, 3, 1)).next_date == date(2024, 8, 20)


def test_consecutive_failures_reset_by_a_pass():
    attempts = [
        _attempt("a", "2023-01-10", 60),
        _attempt("b", "2023-06-10", 90),
        _attempt("c", "2024-01-10", 60),
    ]
    status = next_eligible_date(attempts, date(2024, 1, 20))
    assert status.failed_count == 2
    assert status.consecutive_failures == 1
    assert status.wait_months == 6


def test_to_dict():
    status = next_eligible_date([_attempt("a", "2024-01-15", 70)], date(2024, 2, 10))
    assert status.to_dict()["next_date"] == "2024-02-15"


def test_scheduling_needs_gates_and_cooldown():
    cleared = Eligibility(step=4, eligible=False, can_take_exam=True)
    blocked = Eligibility(step=1, eligible=False, can_take_exam=False)
    waiting = next_eligible_date([_attempt("a", "2024-01-15", 70)], date(2024, 2, 10))
    free = next_eligible_date([], date(2024, 2, 10))

    assert may_schedule_exam(cleared, free)
    assert not may_schedule_exam(cleared, waiting)
    assert not may_schedule_exam(blocked, free)


def test_today_may_be_a_datetime():
    status = next_eligible_date([_attempt("a1", "2024-01-15", 70)], datetime(2024, 2, 15, 8, 0))
    assert status.can_retake
    assert status.days_remaining == 0
