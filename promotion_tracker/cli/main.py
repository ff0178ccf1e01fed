from __future__ import annotations

import argparse
import os
from datetime import date
from typing import List

from ..config import Settings, load_settings
from ..engine.cooldown import next_eligible_date
from ..io.exam_loader import load_exams
from ..io.hires_loader import load_hires
from ..io.metrics_loader import load_metrics
from ..io.rule_loader import load_catalog, load_rules, save_rules
from ..io.training_plan_loader import load_training_plan_rules
from ..models.dates import to_date
from ..reporting.deadlines import build_deadline_rows, export_deadlines_yaml
from ..reporting.eligibility import build_report, export_csv, export_yaml, filter_rows
from ..rules.catalog import RuleCatalog
from ..storage.ledger import ExamHistoryLedger
from ..storage.stores import InMemoryMetricsStore, YamlExamStore
from ..storage.sync import RecordSynchronizer


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------

def _parse_day(value: str) -> date:
    parsed = to_date(value)
    if parsed is None:
        raise argparse.ArgumentTypeError(f"invalid date: {value!r} (expected YYYY-MM-DD)")
    return parsed


def _settings(args: argparse.Namespace) -> Settings:
    return load_settings(getattr(args, "config", None))


def _resolve(value: str | None, fallback: str | None, what: str) -> str:
    path = value or fallback
    if not path:
        raise ValueError(f"No {what} path given on the command line or in the config")
    return path


def _catalog(args: argparse.Namespace, settings: Settings) -> RuleCatalog:
    return load_catalog(_resolve(args.rules, settings.rules_path, "rules"))


# ---------------------------------------------------------------------------
# Command implementations
# ---------------------------------------------------------------------------

def cmd_evaluate(args: argparse.Namespace) -> None:
    settings = _settings(args)
    catalog = _catalog(args, settings)
    metrics = load_metrics(_resolve(args.metrics, settings.metrics_path, "metrics"))

    ledger = None
    exams_path = args.exams or settings.exams_path
    if exams_path:
        ledger = ExamHistoryLedger(YamlExamStore(exams_path), settings.default_min_exam_grade)

    report = build_report(catalog, metrics, ledger=ledger, today=args.today)
    report.rows = filter_rows(report, args.status)

    os.makedirs(args.output, exist_ok=True)
    if args.format == "csv":
        report_file = os.path.join(args.output, "eligibility.csv")
        export_csv(report, report_file)
    else:
        report_file = os.path.join(args.output, "eligibility.yaml")
        export_yaml(report, report_file)

    print(f"Wrote eligibility report for {len(report.rows)} employees to {report_file}")


def cmd_cooldown(args: argparse.Namespace) -> None:
    settings = _settings(args)
    store = YamlExamStore(_resolve(args.exams, settings.exams_path, "exams"))
    ledger = ExamHistoryLedger(store, settings.default_min_exam_grade)
    status = next_eligible_date(ledger.attempts_for(args.employee), args.today)

    if status.can_retake:
        print(f"{args.employee}: may take the exam")
    else:
        print(
            f"{args.employee}: next attempt on {status.next_date.isoformat()} "
            f"({status.days_remaining} days, {status.wait_months} month wait "
            f"after {status.failed_count} failed attempts)"
        )


def cmd_record_exam(args: argparse.Namespace) -> None:
    settings = _settings(args)
    catalog = _catalog(args, settings)
    store = YamlExamStore(_resolve(args.exams, settings.exams_path, "exams"))
    ledger = ExamHistoryLedger(store, settings.default_min_exam_grade)
    attempt = ledger.record_result(args.employee, args.position, args.date, args.grade, catalog)
    outcome = "passed" if attempt.passed else "failed"
    print(f"Recorded {attempt.attempt_id}: {attempt.grade:g}/{attempt.min_grade_required:g} {outcome}")


def cmd_import_exams(args: argparse.Namespace) -> None:
    settings = _settings(args)
    catalog = _catalog(args, settings) if (args.rules or settings.rules_path) else None
    store = YamlExamStore(_resolve(args.exams, settings.exams_path, "exams"))
    for attempt in load_exams(args.source, catalog, settings.default_min_exam_grade):
        store.append(attempt)
    print(f"Exam history now holds {len(store.all())} attempts")


def cmd_recompute(args: argparse.Namespace) -> None:
    settings = _settings(args)
    catalog = _catalog(args, settings)
    store = YamlExamStore(_resolve(args.exams, settings.exams_path, "exams"))
    sync = RecordSynchronizer(
        catalog,
        InMemoryMetricsStore(),
        exam_store=store,
        default_min_grade=settings.default_min_exam_grade,
    )
    summary = sync.recompute_all()
    print(
        f"Checked {summary.checked} exam attempts: "
        f"{summary.changed} updated, {summary.failed} failed"
    )


def cmd_import_rules(args: argparse.Namespace) -> None:
    catalog = RuleCatalog()
    if os.path.exists(args.catalog):
        catalog = load_catalog(args.catalog)
    imported, skipped = catalog.merge(load_rules(args.source))
    save_rules(catalog, args.catalog)
    print(f"Imported {imported} rules, skipped {skipped} existing")


def cmd_deadlines(args: argparse.Namespace) -> None:
    settings = _settings(args)
    plan_path = args.training_plan or settings.training_plan_path
    plan_rules = load_training_plan_rules(plan_path) if plan_path else []
    rows = build_deadline_rows(
        load_hires(args.hires),
        plan_rules,
        today=args.today,
        contract_days=settings.contract_duration_days,
        plan_default_days=settings.training_plan_default_days,
    )

    os.makedirs(args.output, exist_ok=True)
    report_file = os.path.join(args.output, "deadlines.yaml")
    export_deadlines_yaml(rows, report_file, args.today)

    flagged = [
        row for row in rows
        if row["contract_status"] in ("critical", "expired")
        or row["training_plan_status"] == "overdue"
    ]
    print(f"Wrote deadlines for {len(rows)} hires to {report_file} ({len(flagged)} need attention)")


# ---------------------------------------------------------------------------
# Argument parser setup
# ---------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="promotion-tracker")
    parser.add_argument("--config", help="Settings YAML path")
    sub = parser.add_subparsers(dest="command", required=True)

    # evaluate
    p_eval = sub.add_parser("evaluate", help="Write an eligibility report")
    p_eval.add_argument("--rules", help="Promotion rules YAML path")
    p_eval.add_argument("--metrics", help="Employee metrics CSV path")
    p_eval.add_argument("--exams", help="Exam history YAML path")
    p_eval.add_argument("--output", required=True, help="Output directory")
    p_eval.add_argument(
        "--format",
        choices=["yaml", "csv"],
        default="yaml",
        help="Output format (default: yaml)",
    )
    p_eval.add_argument(
        "--status",
        choices=["all", "eligible", "can_take_exam", "not_eligible"],
        default="all",
        help="Only report employees with this status",
    )
    p_eval.add_argument("--today", type=_parse_day, help="Evaluation date (YYYY-MM-DD)")
    p_eval.set_defaults(func=cmd_evaluate)

    # cooldown
    p_cool = sub.add_parser("cooldown", help="Show when an employee may retake the exam")
    p_cool.add_argument("employee", help="Employee id")
    p_cool.add_argument("--exams", help="Exam history YAML path")
    p_cool.add_argument("--today", type=_parse_day, help="Reference date (YYYY-MM-DD)")
    p_cool.set_defaults(func=cmd_cooldown)

    # record-exam
    p_rec = sub.add_parser("record-exam", help="Record an exam result")
    p_rec.add_argument("employee", help="Employee id")
    p_rec.add_argument("position", help="Employee's current position")
    p_rec.add_argument("date", help="Exam date (YYYY-MM-DD)")
    p_rec.add_argument("grade", type=float, help="Exam grade (0-100)")
    p_rec.add_argument("--rules", help="Promotion rules YAML path")
    p_rec.add_argument("--exams", help="Exam history YAML path")
    p_rec.set_defaults(func=cmd_record_exam)

    # import-exams
    p_imp_ex = sub.add_parser("import-exams", help="Append exam attempts from a CSV file")
    p_imp_ex.add_argument("source", help="Exam CSV path")
    p_imp_ex.add_argument("--rules", help="Promotion rules YAML path")
    p_imp_ex.add_argument("--exams", help="Exam history YAML path")
    p_imp_ex.set_defaults(func=cmd_import_exams)

    # recompute
    p_recomp = sub.add_parser(
        "recompute", help="Re-derive pass/fail of stored exams from the current rules"
    )
    p_recomp.add_argument("--rules", help="Promotion rules YAML path")
    p_recomp.add_argument("--exams", help="Exam history YAML path")
    p_recomp.set_defaults(func=cmd_recompute)

    # import-rules
    p_imp = sub.add_parser("import-rules", help="Merge rules into a catalog file")
    p_imp.add_argument("catalog", help="Catalog YAML path (created if missing)")
    p_imp.add_argument("source", help="Rules YAML/JSON to import")
    p_imp.set_defaults(func=cmd_import_rules)

    # deadlines
    p_dead = sub.add_parser("deadlines", help="Report contract and training-plan deadlines")
    p_dead.add_argument("hires", help="New hires CSV path")
    p_dead.add_argument("--training-plan", help="Training-plan rules YAML path")
    p_dead.add_argument("--output", required=True, help="Output directory")
    p_dead.add_argument("--today", type=_parse_day, help="Reference date (YYYY-MM-DD)")
    p_dead.set_defaults(func=cmd_deadlines)

    return parser


def main(argv: List[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
