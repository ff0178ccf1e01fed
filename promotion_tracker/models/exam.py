from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict

from .dates import to_date
from .metrics import clamp_percentage


@dataclass(frozen=True)
class ExamAttempt:
    """A recorded qualification exam result.

    ``passed`` is fixed when the attempt is recorded. Administrative
    corrections go through the exam store's ``update``, which stores a
    replaced copy.
    """

    attempt_id: str
    employee_id: str
    exam_date: date
    grade: float
    min_grade_required: float
    passed: bool
    position: str = ""
    created_at: datetime = field(default_factory=datetime.now)

    @classmethod
    def create(
        cls,
        attempt_id: str,
        employee_id: str,
        exam_date: Any,
        grade: Any,
        min_grade_required: Any,
        position: str = "",
    ) -> "ExamAttempt":
        """Build an attempt, deriving ``passed`` from the grade and threshold."""
        parsed = to_date(exam_date)
        if parsed is None:
            raise ValueError(f"Invalid exam date: {exam_date!r}")
        grade_value = clamp_percentage(grade)
        threshold = clamp_percentage(min_grade_required)
        return cls(
            attempt_id=attempt_id,
            employee_id=str(employee_id),
            exam_date=parsed,
            grade=grade_value,
            min_grade_required=threshold,
            passed=grade_value >= threshold,
            position=(position or "").strip(),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "attempt_id": self.attempt_id,
            "employee_id": self.employee_id,
            "exam_date": self.exam_date.isoformat(),
            "grade": self.grade,
            "min_grade_required": self.min_grade_required,
            "passed": self.passed,
            "position": self.position,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExamAttempt":
        """Rebuild a stored attempt, keeping its stored ``passed`` value."""
        exam_date = to_date(data.get("exam_date"))
        if exam_date is None:
            raise ValueError(f"Invalid exam date: {data.get('exam_date')!r}")
        created_at = data.get("created_at")
        if isinstance(created_at, str):
            created_at = datetime.fromisoformat(created_at)
        if not isinstance(created_at, datetime):
            created_at = datetime.now()
        return cls(
            attempt_id=str(data["attempt_id"]),
            employee_id=str(data["employee_id"]),
            exam_date=exam_date,
            grade=clamp_percentage(data.get("grade")),
            min_grade_required=clamp_percentage(data.get("min_grade_required")),
            passed=bool(data.get("passed", False)),
            position=data.get("position", "") or "",
            created_at=created_at,
        )
