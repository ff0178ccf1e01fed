"""Flask application exposing evaluation, exam history and cooldowns as JSON."""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from datetime import date
from typing import Any, Dict, Optional

from flask import Flask, current_app, jsonify, request

from ..config import Settings
from ..engine.cooldown import may_schedule_exam, next_eligible_date
from ..engine.evaluator import classify
from ..io.rule_loader import rule_from_dict
from ..models.dates import to_date
from ..models.metrics import EmployeeMetrics
from ..rules.catalog import RuleCatalog
from ..storage.debounce import DebounceScheduler
from ..storage.ledger import ExamHistoryLedger
from ..storage.stores import InMemoryExamStore, InMemoryMetricsStore
from ..storage.sync import RecordSynchronizer, SyncResult

logger = logging.getLogger(__name__)


@dataclass
class Services:
    catalog: RuleCatalog
    ledger: ExamHistoryLedger
    sync: RecordSynchronizer


def _services() -> Services:
    return current_app.extensions["promotion_tracker"]


def _json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValueError("Request body must be a JSON object")
    return data


def _log_failed_save(result: SyncResult) -> None:
    if not result.ok:
        logger.error("Autosave failed for %s: %s", result.record.employee_id, result.error)


def _today_arg() -> Optional[date]:
    raw = request.args.get("today")
    if raw is None:
        return None
    parsed = to_date(raw)
    if parsed is None:
        raise ValueError(f"Invalid date: {raw!r}")
    return parsed


def create_app(
    settings: Optional[Settings] = None,
    catalog: Optional[RuleCatalog] = None,
    metrics_store=None,
    exam_store=None,
) -> Flask:
    """Return a Flask application wired to the given stores.

    Stores default to in-memory implementations.
    """
    settings = settings or Settings()
    catalog = catalog if catalog is not None else RuleCatalog()
    metrics_store = metrics_store if metrics_store is not None else InMemoryMetricsStore()
    exam_store = exam_store if exam_store is not None else InMemoryExamStore()

    app = Flask(__name__)
    app.extensions["promotion_tracker"] = Services(
        catalog=catalog,
        ledger=ExamHistoryLedger(exam_store, settings.default_min_exam_grade),
        sync=RecordSynchronizer(
            catalog,
            metrics_store,
            exam_store=exam_store,
            scheduler=DebounceScheduler(settings.debounce_seconds),
            default_min_grade=settings.default_min_exam_grade,
        ),
    )

    @app.errorhandler(ValueError)
    def bad_request(exc: ValueError):
        return jsonify(error=str(exc)), 400

    @app.get("/rules")
    def list_rules():
        return jsonify([rule.to_dict() for rule in _services().catalog])

    @app.put("/rules/<position>")
    def put_rule(position: str):
        data = _json_body()
        data["current_position"] = position
        rule = rule_from_dict(data)
        _services().catalog.upsert(rule)
        return jsonify(rule.to_dict())

    @app.delete("/rules/<position>")
    def delete_rule(position: str):
        if not _services().catalog.remove(position):
            return jsonify(error=f"No rule for {position}"), 404
        return "", 204

    @app.put("/employees/<employee_id>/metrics")
    def put_metrics(employee_id: str):
        metrics = EmployeeMetrics.from_dict(_json_body())
        result = _services().sync.persist(employee_id, metrics)
        if not result.ok:
            return jsonify(error=result.error), 503
        return jsonify(result.record.to_dict())

    @app.post("/employees/<employee_id>/metrics/draft")
    def save_metrics_draft(employee_id: str):
        """Form autosave: coalesce rapid edits and write the latest one."""
        metrics = EmployeeMetrics.from_dict(_json_body())
        _services().sync.persist_later(employee_id, metrics, _log_failed_save)
        return jsonify(employee_id=employee_id, pending=True), 202

    @app.get("/employees/<employee_id>/eligibility")
    def get_eligibility(employee_id: str):
        services = _services()
        record = services.sync.metrics_store.get(employee_id)
        if record is None:
            return jsonify(error=f"No metrics for {employee_id}"), 404
        today = _today_arg()
        rule = services.catalog.lookup(record.metrics.position)
        result = services.sync.evaluator.evaluate(rule, record.metrics, today)
        cooldown = next_eligible_date(services.ledger.attempts_for(employee_id), today)
        return jsonify(
            employee_id=employee_id,
            **result.to_dict(),
            status=classify(result),
            reason=services.sync.evaluator.explain(rule, record.metrics, result, today),
            may_schedule_exam=may_schedule_exam(result, cooldown),
        )

    @app.get("/employees/<employee_id>/exams")
    def list_exams(employee_id: str):
        attempts = _services().ledger.attempts_for(employee_id)
        return jsonify([attempt.to_dict() for attempt in attempts])

    @app.post("/employees/<employee_id>/exams")
    def record_exam(employee_id: str):
        services = _services()
        data = _json_body()
        attempt = services.ledger.record_result(
            employee_id,
            data.get("position", ""),
            data.get("exam_date"),
            data.get("grade"),
            services.catalog,
        )
        return jsonify(attempt.to_dict()), 201

    @app.get("/employees/<employee_id>/cooldown")
    def get_cooldown(employee_id: str):
        services = _services()
        status = next_eligible_date(services.ledger.attempts_for(employee_id), _today_arg())
        return jsonify(status.to_dict())

    @app.post("/exams/recompute")
    def recompute():
        return jsonify(asdict(_services().sync.recompute_all()))

    return app


app = create_app()


if __name__ == "__main__":
    app.run(debug=True)
