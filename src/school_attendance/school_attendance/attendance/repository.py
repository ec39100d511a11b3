from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceMethod, AttendanceStatus
from .model import AttendanceEvent, AttendanceRecord, HistoryRow


class AttendanceRepository(Protocol):
    def get_for_student_and_date(self, student_id: int, attendance_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_students_and_date(self, student_ids: Sequence[int], attendance_date: date) -> dict[int, AttendanceRecord]:
        raise NotImplementedError

    def create_record(
        self,
        *,
        student_id: int,
        school_id: int,
        class_number: int,
        attendance_date: date,
        status: AttendanceStatus,
        method: AttendanceMethod,
        teacher_id: Optional[int],
        subject: Optional[str],
        notes: Optional[str],
        attendance_by_nfc: bool,
        marked_at: datetime,
    ) -> int:
        """Insert a new mark.

        Raises DuplicateRecordError when (student_id, attendance_date) already exists.
        """
        raise NotImplementedError

    def update_record(
        self,
        *,
        attendance_id: int,
        status: AttendanceStatus,
        method: AttendanceMethod,
        teacher_id: Optional[int],
        subject: Optional[str],
        notes: Optional[str],
        attendance_by_nfc: bool,
        marked_at: datetime,
    ) -> bool:
        raise NotImplementedError

    def list_window_events(
        self,
        *,
        school_id: int,
        start_date: date,
        end_date: date,
        class_number: Optional[int] = None,
    ) -> Sequence[AttendanceEvent]:
        """Records in [start_date, end_date] of non-deleted students currently in the school."""
        raise NotImplementedError

    def list_history_rows(
        self,
        *,
        school_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        teacher_id: Optional[int] = None,
        student_id: Optional[int] = None,
    ) -> Sequence[HistoryRow]:
        """Records stamped with the school, joined to student/marker display fields.

        No ordering guarantee; callers sort.
        """
        raise NotImplementedError
