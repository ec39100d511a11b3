from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Callable, Optional

from ..core.exceptions import ValidationError

Clock = Callable[[], datetime]

END_OF_DAY = time(23, 59, 59, 999000)


def parse_iso_date(value: str, field_name: str = "date") -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime((value or "").strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError("Invalid date format, use YYYY-MM-DD", field=field_name)


def parse_optional_date(value: Optional[str], field_name: str) -> Optional[date]:
    if value is None or not value.strip():
        return None
    return parse_iso_date(value, field_name)


def now_local() -> datetime:
    """Current local time.

    Services take a clock callable defaulting to this so tests can pin "now".
    """
    return datetime.now()


@dataclass(frozen=True)
class DayWindow:
    """Inclusive calendar-day interval [start 00:00:00.000, end 23:59:59.999]."""

    start: datetime
    end: datetime

    def __post_init__(self):
        if self.start > self.end:
            raise ValidationError("Start date must not be after end date", field="startDate")

    @classmethod
    def for_day(cls, day: date) -> "DayWindow":
        return cls.for_range(day, day)

    @classmethod
    def for_range(cls, first_day: date, last_day: date) -> "DayWindow":
        return cls(start=datetime.combine(first_day, time.min), end=datetime.combine(last_day, END_OF_DAY))

    @classmethod
    def trailing(cls, last_day: date, days: int) -> "DayWindow":
        """[last_day - (days - 1), last_day]"""
        if days < 1:
            raise ValueError("days must be positive")
        return cls.for_range(last_day - timedelta(days=days - 1), last_day)

    @property
    def start_date(self) -> date:
        return self.start.date()

    @property
    def end_date(self) -> date:
        return self.end.date()

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

