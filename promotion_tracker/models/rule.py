from __future__ import annotations

from dataclasses import dataclass


def normalize_position(position: str | None) -> str:
    """Return the catalog key for a position name."""
    return (position or "").strip().upper()


@dataclass(frozen=True)
class PromotionRule:
    """Thresholds an employee must meet to move to the next position."""

    current_position: str
    promotion: str
    min_tenure_months: int = 6
    min_exam_grade: float = 80
    min_course_coverage: float = 60
    min_performance_rating: float = 80

    def __post_init__(self) -> None:
        # frozen: normalize through object.__setattr__
        object.__setattr__(self, "current_position", normalize_position(self.current_position))
        object.__setattr__(self, "promotion", normalize_position(self.promotion))
        if not self.current_position:
            raise ValueError("current_position is required")
        if self.min_tenure_months < 0:
            raise ValueError("min_tenure_months must be non-negative")
        for name in ("min_exam_grade", "min_course_coverage", "min_performance_rating"):
            value = getattr(self, name)
            if not 0 <= value <= 100:
                raise ValueError(f"{name} must be between 0 and 100")

    @property
    def key(self) -> str:
        return self.current_position

    def to_dict(self) -> dict:
        return {
            "current_position": self.current_position,
            "promotion": self.promotion,
            "min_tenure_months": self.min_tenure_months,
            "min_exam_grade": self.min_exam_grade,
            "min_course_coverage": self.min_course_coverage,
            "min_performance_rating": self.min_performance_rating,
        }
