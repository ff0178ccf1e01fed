"""Promotion rules and the pre-exam gates for promotion_tracker."""
from __future__ import annotations

from typing import Dict, Type

from .base import Gate
from .catalog import RuleCatalog
from .library import CourseGate, PerformanceGate, TenureGate, default_gates


GATE_REGISTRY: Dict[str, Type[Gate]] = {
    PerformanceGate.slug: PerformanceGate,
    TenureGate.slug: TenureGate,
    CourseGate.slug: CourseGate,
}


def gate_for(slug: str) -> Gate:
    """Return the default gate registered under ``slug``."""
    if slug not in GATE_REGISTRY:
        raise KeyError(f"Unknown gate: {slug}")
    return next(g for g in default_gates() if isinstance(g, GATE_REGISTRY[slug]))


__all__ = [
    "Gate",
    "RuleCatalog",
    "PerformanceGate",
    "TenureGate",
    "CourseGate",
    "GATE_REGISTRY",
    "default_gates",
    "gate_for",
]
