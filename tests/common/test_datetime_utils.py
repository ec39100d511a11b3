from datetime import date, datetime

import pytest

from src.school_attendance.school_attendance.common.datetime_utils import DayWindow, parse_iso_date, parse_optional_date
from src.school_attendance.school_attendance.core.exceptions import ValidationError


def test_day_window_spans_the_whole_day():
    window = DayWindow.for_day(date(2024, 3, 15))

    assert window.start == datetime(2024, 3, 15, 0, 0, 0)
    assert window.end == datetime(2024, 3, 15, 23, 59, 59, 999000)
    assert window.contains(date(2024, 3, 15))
    assert not window.contains(date(2024, 3, 16))


def test_trailing_window_includes_last_day():
    window = DayWindow.trailing(date(2024, 3, 15), 7)

    assert window.start_date == date(2024, 3, 9)
    assert window.end_date == date(2024, 3, 15)


def test_reversed_window_is_rejected():
    with pytest.raises(ValidationError):
        DayWindow.for_range(date(2024, 3, 2), date(2024, 3, 1))


@pytest.mark.parametrize("value", ["2024-13-01", "15/03/2024", "yesterday", ""])
def test_bad_dates_are_rejected(value):
    with pytest.raises(ValidationError) as exc:
        parse_iso_date(value, "startDate")
    assert exc.value.field == "startDate"


def test_optional_date_blank_is_none():
    assert parse_optional_date(None, "date") is None
    assert parse_optional_date("  ", "date") is None
    assert parse_optional_date("2024-03-15", "date") == date(2024, 3, 15)
