from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict


class FailedAt(str, Enum):
    """Gate that blocked an employee, or ``NONE``."""

    PERFORMANCE = "performance"
    TIME = "time"
    COURSES = "courses"
    EXAM = "exam"
    NONE = "none"


@dataclass(frozen=True)
class Eligibility:
    """Gating state produced by the evaluator."""

    step: int
    eligible: bool
    can_take_exam: bool
    failed_at: FailedAt = FailedAt.NONE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "step": self.step,
            "eligible": self.eligible,
            "can_take_exam": self.can_take_exam,
            "failed_at": self.failed_at.value,
        }


NO_RULE = Eligibility(step=0, eligible=False, can_take_exam=False)
