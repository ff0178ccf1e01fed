import sys
from datetime import date
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from promotion_tracker.io import (
    load_catalog,
    load_exams,
    load_hires,
    load_metrics,
    load_rules,
    load_training_plan_rules,
    rule_from_dict,
    save_rules,
)

ROOT = Path(__file__).resolve().parents[1]


def test_load_rules_valid(tmp_path):
    rule_file = tmp_path / "rules.yaml"
    rule_file.write_text(
        """
- current_position: operator c
  promotion: operator b
  min_tenure_months: 6
  min_exam_grade: 80
  min_course_coverage: 60
  min_performance_rating: 80
""",
        encoding="utf8",
    )
    rules = load_rules(str(rule_file))
    assert len(rules) == 1
    rule = rules[0]
    assert rule.current_position == "OPERATOR C"
    assert rule.promotion == "OPERATOR B"
    assert rule.min_tenure_months == 6


def test_load_rules_legacy_export_uses_defaults():
    rules = {r.current_position: r for r in load_rules(str(ROOT / "examples/legacy_rules.json"))}
    assert rules["OPERATOR C"].min_exam_grade == 80
    inspector = rules["QUALITY INSPECTOR"]
    assert inspector.promotion == "QUALITY LEAD"
    assert inspector.min_tenure_months == 6
    assert inspector.min_course_coverage == 60
    assert inspector.min_exam_grade == 90


def test_load_rules_validation_errors(tmp_path):
    rule_file = tmp_path / "bad_rules.yaml"
    rule_file.write_text("- current_position: Operator C\n", encoding="utf8")
    with pytest.raises(ValueError, match="Rule 1: missing required fields: promotion"):
        load_rules(str(rule_file))

    rule_file.write_text(
        "- current_position: A\n  promotion: B\n  min_exam_grade: lots\n", encoding="utf8"
    )
    with pytest.raises(ValueError, match="min_exam_grade must be an integer"):
        load_rules(str(rule_file))

    rule_file.write_text(
        "- current_position: A\n  promotion: B\n  min_exam_grade: 120\n", encoding="utf8"
    )
    with pytest.raises(ValueError, match="Rule 1"):
        load_rules(str(rule_file))

    rule_file.write_text("current_position: A\n", encoding="utf8")
    with pytest.raises(ValueError):
        load_rules(str(rule_file))


def test_load_catalog_rejects_duplicates(tmp_path):
    rule_file = tmp_path / "dupes.yaml"
    rule_file.write_text(
        "- {current_position: A, promotion: B}\n- {current_position: ' a ', promotion: C}\n",
        encoding="utf8",
    )
    with pytest.raises(ValueError, match="Duplicate"):
        load_catalog(str(rule_file))


def test_save_rules_round_trip(tmp_path):
    catalog = load_catalog(str(ROOT / "examples/rules.yaml"))
    path = tmp_path / "catalog.yaml"
    save_rules(catalog, str(path))
    assert [r.key for r in load_catalog(str(path))] == [r.key for r in catalog]


def test_rule_from_dict():
    rule = rule_from_dict({"current_position": "a", "promotion": "b", "min_exam_grade": 75})
    assert rule.min_exam_grade == 75
    assert rule.min_course_coverage == 60


def test_load_metrics_clamps_values(tmp_path):
    path = tmp_path / "metrics.csv"
    path.write_text(
        "employee_id,position,performance_rating,position_start_date,course_coverage,exam_grade\n"
        "E1,Operator C,85,2024-01-15,70,\n"
        "E2,Operator C,n/a,,120,-3\n",
        encoding="utf8",
    )
    metrics = load_metrics(str(path))
    assert metrics["E1"].performance_rating == 85
    assert metrics["E1"].position_start_date == "2024-01-15"
    assert metrics["E1"].exam_grade == 0
    assert metrics["E2"].performance_rating == 0
    assert metrics["E2"].position_start_date is None
    assert metrics["E2"].course_coverage == 100
    assert metrics["E2"].exam_grade == 0


def test_load_metrics_errors(tmp_path):
    path = tmp_path / "metrics.csv"
    path.write_text("employee_id\nE1\n", encoding="utf8")
    with pytest.raises(ValueError, match="Missing required columns: position"):
        load_metrics(str(path))

    path.write_text("employee_id,position\nE1,A\nE1,B\n", encoding="utf8")
    with pytest.raises(ValueError, match="Row 3"):
        load_metrics(str(path))


def test_load_exams_uses_catalog_thresholds(tmp_path):
    catalog = load_catalog(str(ROOT / "examples/rules.yaml"))
    path = tmp_path / "exams.csv"
    path.write_text(
        "employee_id,position,exam_date,grade,min_grade_required,passed\n"
        "E1,Operator C,2024-01-15,78,,\n"
        "E2,Janitor,2024-01-15,72,,\n"
        "E3,Operator C,2024-01-15,50,40,\n"
        "E4,Operator C,2024-01-15,50,,true\n",
        encoding="utf8",
    )
    attempts = load_exams(str(path), catalog)
    assert [a.min_grade_required for a in attempts] == [80, 70, 40, 80]
    assert [a.passed for a in attempts] == [False, True, True, True]
    assert attempts[0].exam_date == date(2024, 1, 15)
    assert attempts[0].attempt_id == "import-00002"


def test_load_exams_bad_date(tmp_path):
    path = tmp_path / "exams.csv"
    path.write_text("employee_id,exam_date,grade\nE1,2024-13-01,90\n", encoding="utf8")
    with pytest.raises(ValueError, match="Row 2"):
        load_exams(str(path))


def test_load_training_plan_rules_aliases():
    rules = load_training_plan_rules(str(ROOT / "examples/training_plan.yaml"))
    assert len(rules) == 3
    assert rules[2].department == "ADMINISTRACIÓN"
    assert rules[2].area == "NÓMINA"
    assert rules[2].deadline == "2 MESES"


def test_load_training_plan_rules_missing_fields(tmp_path):
    path = tmp_path / "plan.yaml"
    path.write_text("- department: X\n", encoding="utf8")
    with pytest.raises(ValueError, match="area, deadline"):
        load_training_plan_rules(str(path))


def test_load_hires(tmp_path):
    hires = load_hires(str(ROOT / "examples/hires.csv"))
    assert [h["employee_id"] for h in hires] == ["H001", "H002", "H003", "H004"]
    assert hires[1]["delivered"] is True
    assert hires[3]["hire_date"] == ""

    bad = tmp_path / "hires.csv"
    bad.write_text("employee_id,department\nH1,X\n", encoding="utf8")
    with pytest.raises(ValueError, match="hire_date"):
        load_hires(str(bad))
