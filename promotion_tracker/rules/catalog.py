"""Promotion rules keyed by normalized current position."""
from __future__ import annotations

import logging
from typing import Dict, Iterable, Iterator, Optional, Tuple

from promotion_tracker.models.rule import PromotionRule, normalize_position

logger = logging.getLogger(__name__)


class RuleCatalog:
    """In-memory lookup of :class:`PromotionRule` objects.

    Positions are matched after trimming and upper-casing; there is no fuzzy
    matching. A position without a rule has no promotion path.
    """

    def __init__(self) -> None:
        self._rules: Dict[str, PromotionRule] = {}

    @classmethod
    def from_rules(cls, rules: Iterable[PromotionRule]) -> "RuleCatalog":
        """Build a catalog, rejecting two rules for the same position."""
        catalog = cls()
        for rule in rules:
            if rule.key in catalog._rules:
                raise ValueError(f"Duplicate rule for position {rule.key}")
            catalog._rules[rule.key] = rule
        return catalog

    def lookup(self, position: str | None) -> Optional[PromotionRule]:
        return self._rules.get(normalize_position(position))

    def upsert(self, rule: PromotionRule) -> None:
        """Create or replace the rule for ``rule.current_position``."""
        self._rules[rule.key] = rule

    def remove(self, position: str) -> bool:
        return self._rules.pop(normalize_position(position), None) is not None

    def merge(self, rules: Iterable[PromotionRule]) -> Tuple[int, int]:
        """Add rules for positions not yet in the catalog.

        Existing positions are left untouched. Returns ``(imported, skipped)``.
        """
        imported = skipped = 0
        for rule in rules:
            if rule.key in self._rules:
                skipped += 1
                continue
            self._rules[rule.key] = rule
            imported += 1
        logger.info("Imported %d rules, skipped %d existing", imported, skipped)
        return imported, skipped

    def min_exam_grade_for(self, position: str | None, default: float = 70) -> float:
        """Return the exam threshold for ``position`` or ``default``."""
        rule = self.lookup(position)
        return rule.min_exam_grade if rule is not None else default

    def __contains__(self, position: object) -> bool:
        return isinstance(position, str) and normalize_position(position) in self._rules

    def __iter__(self) -> Iterator[PromotionRule]:
        return iter(self._rules[key] for key in sorted(self._rules))

    def __len__(self) -> int:
        return len(self._rules)
