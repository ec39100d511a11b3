from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Optional

from ..common.datetime_utils import Clock, DayWindow, now_local
from ..core.constants import TRAILING_WINDOW_DAYS
from ..core.enums import AttendanceStatus
from ..users.model import Actor
from ..users.repository import UserRepository
from .model import ClassStats, DailyTotals, StatsResult, StatusCounts, TodayPercentage
from .policy import require_staff
from .repository import AttendanceRepository


class AttendanceStatsService:
    """Per-class and overall presence statistics for one day plus a trailing daily series.

    Percentages use the roster's student count as the denominator: a student
    without a record that day lowers the percentage but is not counted as absent.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        users: UserRepository,
        *,
        clock: Clock = now_local,
        trailing_days: int = TRAILING_WINDOW_DAYS,
    ):
        self._attendance = attendance
        self._users = users
        self._clock = clock
        self._trailing_days = int(trailing_days)

    def build_stats(self, actor: Actor, *, class_number: Optional[int] = None, day: Optional[date] = None) -> StatsResult:
        school_id = require_staff(actor)

        today = self._clock().date()
        day = day or today
        window = DayWindow.for_day(day)
        # daily series runs from the real today's trailing start up to the requested day
        series_start = DayWindow.trailing(today, self._trailing_days).start_date

        class_totals = self._users.count_students_by_class(school_id=school_id, class_number=class_number)
        events = self._attendance.list_window_events(
            school_id=school_id,
            start_date=min(series_start, window.start_date),
            end_date=window.end_date,
            class_number=class_number,
        )

        by_class: dict[int, StatusCounts] = defaultdict(StatusCounts)
        by_day: dict[date, StatusCounts] = defaultdict(StatusCounts)
        for event in events:
            if event.attendance_date >= series_start:
                by_day[event.attendance_date].add(event.status)
            if window.contains(event.attendance_date) and event.student_class is not None:
                by_class[int(event.student_class)].add(event.status)

        class_wise = [
            ClassStats(class_number=cls, counts=counts, total_students=class_totals.get(cls, 0))
            for cls, counts in sorted(by_class.items())
        ]
        daily = [
            DailyTotals(day=d, total_present=c.present, total_absent=c.absent, total_late=c.late)
            for d, c in sorted(by_day.items())
        ]

        return StatsResult(
            day=day,
            class_wise=class_wise,
            total_students=sum(class_totals.values()),
            daily=daily,
        )

    def today_percentage(self, actor: Actor) -> TodayPercentage:
        school_id = require_staff(actor)
        today = self._clock().date()

        total_students = self._users.count_students(school_id=school_id)
        events = self._attendance.list_window_events(school_id=school_id, start_date=today, end_date=today)
        present = sum(1 for e in events if e.status == AttendanceStatus.PRESENT)

        return TodayPercentage(day=today, total_students=total_students, present_today=present)
