from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, Optional

from .rule import normalize_position


def clamp_percentage(value: Any) -> float:
    """Coerce ``value`` to a number in ``[0, 100]``; junk becomes 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if number != number:  # NaN
        return 0.0
    return min(100.0, max(0.0, number))


@dataclass
class EmployeeMetrics:
    """Evaluation inputs recorded for one employee.

    Values are entered piecemeal, so nothing here raises: out-of-range or
    non-numeric percentages clamp to ``[0, 100]`` and a missing exam grade
    becomes the ``0`` "no exam yet" sentinel.
    """

    position: str = ""
    performance_rating: float = 0
    position_start_date: Any = None
    course_coverage: float = 0
    exam_grade: Optional[float] = 0

    def __post_init__(self) -> None:
        self.position = (self.position or "").strip()
        self.performance_rating = clamp_percentage(self.performance_rating)
        self.course_coverage = clamp_percentage(self.course_coverage)
        self.exam_grade = clamp_percentage(self.exam_grade)

    @property
    def position_key(self) -> str:
        return normalize_position(self.position)

    @property
    def has_exam_grade(self) -> bool:
        return self.exam_grade != 0

    def to_dict(self) -> Dict[str, Any]:
        start = self.position_start_date
        if isinstance(start, datetime):
            start = start.date()
        if isinstance(start, date):
            start = start.isoformat()
        return {
            "position": self.position,
            "performance_rating": self.performance_rating,
            "position_start_date": start,
            "course_coverage": self.course_coverage,
            "exam_grade": self.exam_grade,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EmployeeMetrics":
        return cls(
            position=data.get("position", ""),
            performance_rating=data.get("performance_rating", 0),
            position_start_date=data.get("position_start_date"),
            course_coverage=data.get("course_coverage", 0),
            exam_grade=data.get("exam_grade", 0),
        )


@dataclass
class MetricsRecord:
    """Stored metrics plus the derived eligibility fields.

    The derived fields are a cache of what the evaluator returns for
    ``metrics`` and the matching rule; :meth:`matches` tells whether they
    are still current.
    """

    employee_id: str
    metrics: EmployeeMetrics
    promotion: str = ""
    months_in_position: int = 0
    step: int = 0
    eligible: bool = False
    can_take_exam: bool = False
    failed_at: str = "none"
    updated_at: datetime = field(default_factory=datetime.now)

    def derived(self) -> Dict[str, Any]:
        return {
            "step": self.step,
            "eligible": self.eligible,
            "can_take_exam": self.can_take_exam,
            "failed_at": self.failed_at,
        }

    def matches(self, evaluation: Any) -> bool:
        """Return True if the cached fields equal ``evaluation``."""
        return self.derived() == evaluation.to_dict()

    def to_dict(self) -> Dict[str, Any]:
        data = {"employee_id": self.employee_id, **self.metrics.to_dict()}
        data.update(
            promotion=self.promotion,
            months_in_position=self.months_in_position,
            updated_at=self.updated_at.isoformat(),
            **self.derived(),
        )
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MetricsRecord":
        updated_at = data.get("updated_at")
        if isinstance(updated_at, str):
            updated_at = datetime.fromisoformat(updated_at)
        if not isinstance(updated_at, datetime):
            updated_at = datetime.now()
        return cls(
            employee_id=str(data["employee_id"]),
            metrics=EmployeeMetrics.from_dict(data),
            promotion=data.get("promotion", "") or "",
            months_in_position=int(data.get("months_in_position", 0) or 0),
            step=int(data.get("step", 0) or 0),
            eligible=bool(data.get("eligible", False)),
            can_take_exam=bool(data.get("can_take_exam", False)),
            failed_at=data.get("failed_at") or "none",
            updated_at=updated_at,
        )
