import sys
from datetime import date, datetime, timezone
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from promotion_tracker.engine.tenure import months_since

TODAY = date(2024, 8, 1)


def test_same_day_and_future_dates_count_zero():
    assert months_since(TODAY, TODAY) == 0
    assert months_since("2024-08-02", TODAY) == 0
    assert months_since("2030-01-01", TODAY) == 0


def test_counts_calendar_month_boundaries():
    assert months_since("2023-01-31", date(2023, 2, 28)) == 1
    assert months_since("2023-01-31", date(2023, 2, 1)) == 1
    assert months_since("2024-02-01", TODAY) == 6
    assert months_since("2024-02-29", TODAY) == 6
    assert months_since("2022-08-31", TODAY) == 24


def test_invalid_strings_count_zero():
    assert months_since("2024-13-01", TODAY) == 0
    assert months_since("2024-02-30", TODAY) == 0
    assert months_since("1850-01-01", TODAY) == 0
    assert months_since("2024/01/01", TODAY) == 0
    assert months_since("yesterday", TODAY) == 0
    assert months_since("", TODAY) == 0
    assert months_since(None, TODAY) == 0


def test_accepts_timestamps_and_dates():
    seconds = datetime(2024, 1, 15, tzinfo=timezone.utc).timestamp()
    assert months_since(seconds, TODAY) == 7
    assert months_since({"seconds": seconds}, TODAY) == 7
    assert months_since(datetime(2024, 1, 15, 8, 0), TODAY) == 7
    assert months_since(date(2024, 1, 15), TODAY) == 7


def test_defaults_to_today():
    assert months_since(date.today()) == 0


def test_today_may_be_a_datetime():
    assert months_since("2024-02-01", datetime(2024, 8, 1, 17, 30)) == 6
    assert months_since(date(2024, 8, 1), datetime(2024, 8, 1, 0, 0)) == 0
