"""Metrics and exam-history stores.

The in-memory stores hold the current snapshot; the YAML stores extend them
by rewriting their file after every change.
"""
from __future__ import annotations

import itertools
import logging
import os
from dataclasses import replace
from typing import Any, Dict, List, Optional

import yaml

from ..errors import StorageError
from ..models.exam import ExamAttempt
from ..models.metrics import MetricsRecord

logger = logging.getLogger(__name__)


class InMemoryMetricsStore:
    """One :class:`MetricsRecord` per employee; writes replace (last write wins)."""

    def __init__(self) -> None:
        self._records: Dict[str, MetricsRecord] = {}

    def get(self, employee_id: str) -> Optional[MetricsRecord]:
        return self._records.get(str(employee_id))

    def put(self, employee_id: str, record: MetricsRecord) -> None:
        self._records[str(employee_id)] = record

    def all(self) -> List[MetricsRecord]:
        return [self._records[k] for k in sorted(self._records)]


class InMemoryExamStore:
    """Append-only exam attempts, kept in insertion order."""

    def __init__(self) -> None:
        self._attempts: Dict[str, ExamAttempt] = {}
        self._ids = itertools.count(1)

    def next_id(self) -> str:
        while True:
            candidate = f"exam-{next(self._ids):05d}"
            if candidate not in self._attempts:
                return candidate

    def append(self, attempt: ExamAttempt) -> ExamAttempt:
        if attempt.attempt_id in self._attempts:
            raise StorageError(f"Duplicate exam attempt id {attempt.attempt_id}")
        self._attempts[attempt.attempt_id] = attempt
        return attempt

    def list_by_employee(self, employee_id: str) -> List[ExamAttempt]:
        return [a for a in self._attempts.values() if a.employee_id == str(employee_id)]

    def update(self, attempt_id: str, **fields: Any) -> ExamAttempt:
        current = self._attempts.get(attempt_id)
        if current is None:
            raise StorageError(f"Unknown exam attempt {attempt_id}")
        updated = replace(current, **fields)
        self._attempts[attempt_id] = updated
        return updated

    def remove(self, attempt_id: str) -> bool:
        return self._attempts.pop(attempt_id, None) is not None

    def all(self) -> List[ExamAttempt]:
        return list(self._attempts.values())


def _read_yaml_list(path: str) -> List[Dict[str, Any]]:
    if not os.path.exists(path):
        return []
    with open(path, "r", encoding="utf8") as handle:
        data = yaml.safe_load(handle) or []
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a list of records")
    return data


def _write_yaml_list(path: str, rows: List[Dict[str, Any]]) -> None:
    try:
        with open(path, "w", encoding="utf8") as handle:
            yaml.safe_dump(rows, handle, sort_keys=True, allow_unicode=True)
    except OSError as exc:
        raise StorageError(f"Could not write {path}: {exc}") from exc


class YamlMetricsStore(InMemoryMetricsStore):
    """Metrics store backed by a YAML file.

    The file is written before the in-memory snapshot changes, so a failed
    write leaves the store as it was.
    """

    def __init__(self, path: str) -> None:
        super().__init__()
        self.path = path
        for row in _read_yaml_list(path):
            record = MetricsRecord.from_dict(row)
            self._records[record.employee_id] = record

    def put(self, employee_id: str, record: MetricsRecord) -> None:
        records = dict(self._records)
        records[str(employee_id)] = record
        _write_yaml_list(self.path, [records[k].to_dict() for k in sorted(records)])
        self._records = records


class YamlExamStore(InMemoryExamStore):
    """Exam store backed by a YAML file; writes happen before state changes."""

    def __init__(self, path: str) -> None:
        super().__init__()
        self.path = path
        for row in _read_yaml_list(path):
            attempt = ExamAttempt.from_dict(row)
            self._attempts[attempt.attempt_id] = attempt

    def _commit(self, attempts: Dict[str, ExamAttempt]) -> None:
        _write_yaml_list(self.path, [a.to_dict() for a in attempts.values()])
        self._attempts = attempts

    def append(self, attempt: ExamAttempt) -> ExamAttempt:
        if attempt.attempt_id in self._attempts:
            raise StorageError(f"Duplicate exam attempt id {attempt.attempt_id}")
        attempts = dict(self._attempts)
        attempts[attempt.attempt_id] = attempt
        self._commit(attempts)
        return attempt

    def update(self, attempt_id: str, **fields: Any) -> ExamAttempt:
        current = self._attempts.get(attempt_id)
        if current is None:
            raise StorageError(f"Unknown exam attempt {attempt_id}")
        updated = replace(current, **fields)
        attempts = dict(self._attempts)
        attempts[attempt_id] = updated
        self._commit(attempts)
        return updated

    def remove(self, attempt_id: str) -> bool:
        if attempt_id not in self._attempts:
            return False
        attempts = dict(self._attempts)
        del attempts[attempt_id]
        self._commit(attempts)
        return True
