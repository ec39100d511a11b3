from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import TeacherAttendanceStatus
from .model import TeacherAttendanceRecord


class TeacherAttendanceRepository(Protocol):
    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[TeacherAttendanceRecord]:
        raise NotImplementedError

    def create_checkin(
        self,
        *,
        user_id: int,
        school_id: int,
        work_date: date,
        check_in_time: datetime,
        status: TeacherAttendanceStatus,
        name: str,
    ) -> int:
        """Raises DuplicateRecordError when the user already has a record for work_date."""
        raise NotImplementedError

    def update_checkout(self, *, record_id: int, check_out_time: datetime) -> bool:
        """Sets check-out only if it is still empty; False when nothing was updated."""
        raise NotImplementedError

    def count_for_school(
        self,
        *,
        school_id: int,
        name: Optional[str] = None,
        work_date: Optional[date] = None,
    ) -> int:
        raise NotImplementedError

    def list_for_school(
        self,
        *,
        school_id: int,
        name: Optional[str] = None,
        work_date: Optional[date] = None,
        offset: int = 0,
        limit: int = 10,
    ) -> Sequence[TeacherAttendanceRecord]:
        """Newest first (created_at, then record id)."""
        raise NotImplementedError

    def list_for_school_on(self, *, school_id: int, work_date: date) -> Sequence[TeacherAttendanceRecord]:
        """All records of one day in insertion order."""
        raise NotImplementedError
