from __future__ import annotations

from datetime import date
from typing import Iterable, Optional

from ..common.datetime_utils import DayWindow
from ..common.pagination import Pagination
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..users.model import Actor
from .model import HistoryPage, HistoryRow
from .policy import HistoryScope, history_scope
from .repository import AttendanceRepository


def _latest_per_student(rows: Iterable[HistoryRow]) -> list[HistoryRow]:
    """Keep each student's most recent record.

    Sorting happens before the reduction so the kept row does not depend on
    the order the store returned rows in.
    """
    ordered = sorted(rows, key=lambda r: (r.record.attendance_date, r.record.attendance_id), reverse=True)
    seen: set[int] = set()
    latest: list[HistoryRow] = []
    for row in ordered:
        if row.record.student_id in seen:
            continue
        seen.add(row.record.student_id)
        latest.append(row)
    return latest


def _matches(row: HistoryRow, *, scope: HistoryScope, class_number: Optional[int], search: Optional[str]) -> bool:
    if row.student_school_id is None or int(row.student_school_id) != scope.school_id:
        return False
    if row.student_is_deleted:
        return False
    if class_number is not None and row.student_class != class_number:
        return False
    if search:
        needle = search.casefold()
        haystacks = (row.student_name or "", row.student_roll_number or "")
        if not any(needle in h.casefold() for h in haystacks):
            return False
    return True


class AttendanceHistoryService:
    """One row per student (their latest matching record), newest first, paginated."""

    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def history(
        self,
        actor: Actor,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        class_number: Optional[int] = None,
        search: Optional[str] = None,
        self_only: bool = False,
        page: int = 1,
        limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> HistoryPage:
        scope = history_scope(actor, self_only=self_only)

        if start_date is not None:
            window = DayWindow.for_range(start_date, end_date or start_date)
            start_date, end_date = window.start_date, window.end_date

        rows = self._attendance.list_history_rows(
            school_id=scope.school_id,
            start_date=start_date,
            end_date=end_date,
            teacher_id=scope.teacher_id,
            student_id=scope.student_id,
        )

        search = (search or "").strip() or None
        matched = [
            row
            for row in _latest_per_student(rows)
            if _matches(row, scope=scope, class_number=class_number, search=search)
        ]

        matched.sort(key=lambda r: r.record.attendance_id)
        matched.sort(key=lambda r: r.record.attendance_date, reverse=True)

        pagination = Pagination(page=page, limit=limit, total=len(matched))
        return HistoryPage(rows=pagination.slice(matched), pagination=pagination)
