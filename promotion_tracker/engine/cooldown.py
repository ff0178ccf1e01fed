"""Waiting period before a failed qualification exam may be retaken."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Iterable, Optional

from ..models.dates import add_months, to_date
from ..models.eligibility import Eligibility
from ..models.exam import ExamAttempt

FIRST_FAILURE_WAIT_MONTHS = 1
REPEAT_FAILURE_WAIT_MONTHS = 6


@dataclass(frozen=True)
class CooldownStatus:
    can_retake: bool
    next_date: Optional[date] = None
    wait_months: int = 0
    failed_count: int = 0
    consecutive_failures: int = 0
    days_remaining: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "can_retake": self.can_retake,
            "next_date": self.next_date.isoformat() if self.next_date else None,
            "wait_months": self.wait_months,
            "failed_count": self.failed_count,
            "consecutive_failures": self.consecutive_failures,
            "days_remaining": self.days_remaining,
        }


def _most_recent_first(attempts: Iterable[ExamAttempt]) -> list:
    # sorted() is stable with reverse=True, so same-day attempts keep input order
    return sorted(attempts, key=lambda a: a.exam_date, reverse=True)


def next_eligible_date(
    attempts: Iterable[ExamAttempt], today: Optional[date] = None
) -> CooldownStatus:
    """Return when an employee may sit the exam again.

    Only failed attempts count. The first failure in an employee's history
    imposes a one month wait from the failed exam; two or more failures
    impose six months from the most recent one, with no further escalation.
    """
    today = to_date(today) or date.today()
    ordered = _most_recent_first(attempts)
    failed = [a for a in ordered if not a.passed]
    if not failed:
        return CooldownStatus(can_retake=True)

    streak = 0
    for attempt in ordered:
        if attempt.passed:
            break
        streak += 1

    wait = FIRST_FAILURE_WAIT_MONTHS if len(failed) == 1 else REPEAT_FAILURE_WAIT_MONTHS
    next_date = add_months(failed[0].exam_date, wait)
    can_retake = today >= next_date
    return CooldownStatus(
        can_retake=can_retake,
        next_date=next_date,
        wait_months=wait,
        failed_count=len(failed),
        consecutive_failures=streak,
        days_remaining=0 if can_retake else (next_date - today).days,
    )


def may_schedule_exam(eligibility: Eligibility, cooldown: CooldownStatus) -> bool:
    """Return True only if both the gates and the cooldown allow an exam."""
    return eligibility.can_take_exam and cooldown.can_retake
