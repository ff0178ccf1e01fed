import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from promotion_tracker.config import Settings, load_settings


def test_missing_file_gives_defaults(tmp_path):
    settings = load_settings(str(tmp_path / "nope.yaml"))
    assert settings == Settings()
    assert settings.default_min_exam_grade == 70
    assert settings.contract_duration_days == 89
    assert load_settings(None) == Settings()


def test_load_settings(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text("debounce_seconds: 2\ndefault_min_exam_grade: 75\nrules_path: rules.yaml\n", encoding="utf8")
    settings = load_settings(str(path))
    assert settings.debounce_seconds == 2
    assert settings.default_min_exam_grade == 75
    assert settings.rules_path == "rules.yaml"


def test_load_settings_rejects_bad_input(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text("colour: blue\n", encoding="utf8")
    with pytest.raises(ValueError, match="Unknown settings: colour"):
        load_settings(str(path))

    path.write_text("debounce_seconds: soon\n", encoding="utf8")
    with pytest.raises(ValueError, match="debounce_seconds"):
        load_settings(str(path))

    path.write_text("default_min_exam_grade: 120\n", encoding="utf8")
    with pytest.raises(ValueError):
        load_settings(str(path))

    path.write_text("- a\n- b\n", encoding="utf8")
    with pytest.raises(ValueError):
        load_settings(str(path))
