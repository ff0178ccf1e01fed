"""Stores, exam ledger and record synchronization for promotion_tracker."""

from .debounce import DebounceScheduler
from .ledger import ExamHistoryLedger
from .stores import InMemoryExamStore, InMemoryMetricsStore, YamlExamStore, YamlMetricsStore
from .sync import RecomputeSummary, RecordSynchronizer, SyncResult

__all__ = [
    "DebounceScheduler",
    "ExamHistoryLedger",
    "InMemoryExamStore",
    "InMemoryMetricsStore",
    "YamlExamStore",
    "YamlMetricsStore",
    "RecomputeSummary",
    "RecordSynchronizer",
    "SyncResult",
]
