from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..common.formatting import iso_or_none, percentage
from ..common.pagination import Pagination
from ..core.enums import AttendanceMethod, AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """One attendance mark; at most one per (student_id, attendance_date)."""

    attendance_id: int
    student_id: int
    school_id: int
    class_number: int
    attendance_date: date
    status: AttendanceStatus
    method: AttendanceMethod
    teacher_id: Optional[int] = None
    subject: Optional[str] = None
    notes: Optional[str] = None
    attendance_by_nfc: bool = False
    marked_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "studentId": self.student_id,
            "schoolId": self.school_id,
            "teacherId": self.teacher_id,
            "class": self.class_number,
            "subject": self.subject or "",
            "status": self.status.value,
            "method": self.method.value,
            "date": self.attendance_date.isoformat(),
            "notes": self.notes or "",
            "attendanceByNFC": self.attendance_by_nfc,
            "markedAt": iso_or_none(self.marked_at),
            "createdAt": iso_or_none(self.created_at),
            "updatedAt": iso_or_none(self.updated_at),
        }


@dataclass(frozen=True)
class AttendanceEvent:
    """Read-model: a record joined to the student's current roster class."""

    attendance_id: int
    student_id: int
    student_class: Optional[int]
    attendance_date: date
    status: AttendanceStatus


@dataclass(frozen=True)
class HistoryRow:
    """Read-model: a record joined to student and marker display fields."""

    record: AttendanceRecord
    student_name: str
    student_roll_number: Optional[str]
    student_class: Optional[int]
    student_school_id: Optional[int]
    student_is_deleted: bool = False
    teacher_name: Optional[str] = None

    def to_dict(self) -> dict:
        out = self.record.to_dict()
        out["student"] = {
            "id": self.record.student_id,
            "name": self.student_name,
            "rollNumber": self.student_roll_number,
            "class": self.student_class,
        }
        out["teacher"] = (
            {"id": self.record.teacher_id, "name": self.teacher_name} if self.record.teacher_id is not None else None
        )
        return out


@dataclass(frozen=True)
class MarkResult:
    record: AttendanceRecord
    created: bool


@dataclass
class StatusCounts:
    present: int = 0
    absent: int = 0
    late: int = 0
    total: int = 0

    def add(self, status: AttendanceStatus) -> None:
        if status == AttendanceStatus.PRESENT:
            self.present += 1
        elif status == AttendanceStatus.ABSENT:
            self.absent += 1
        elif status == AttendanceStatus.LATE:
            self.late += 1
        self.total += 1


@dataclass(frozen=True)
class ClassStats:
    class_number: int
    counts: StatusCounts
    total_students: int

    @property
    def attendance_percentage(self) -> str:
        return percentage(self.counts.present, self.total_students)

    def to_dict(self) -> dict:
        return {
            "present": self.counts.present,
            "absent": self.counts.absent,
            "late": self.counts.late,
            "total": self.counts.total,
            "totalStudents": self.total_students,
            "attendancePercentage": self.attendance_percentage,
        }


@dataclass(frozen=True)
class DailyTotals:
    day: date
    total_present: int
    total_absent: int
    total_late: int

    def to_dict(self) -> dict:
        return {
            "date": self.day.isoformat(),
            "totalPresent": self.total_present,
            "totalAbsent": self.total_absent,
            "totalLate": self.total_late,
        }


@dataclass(frozen=True)
class StatsResult:
    day: date
    class_wise: list[ClassStats]
    total_students: int
    daily: list[DailyTotals] = field(default_factory=list)

    @property
    def total_present(self) -> int:
        return sum(c.counts.present for c in self.class_wise)

    @property
    def total_absent(self) -> int:
        return sum(c.counts.absent for c in self.class_wise)

    @property
    def total_late(self) -> int:
        return sum(c.counts.late for c in self.class_wise)

    @property
    def overall_percentage(self) -> str:
        return percentage(self.total_present, self.total_students)

    def to_dict(self) -> dict:
        return {
            "daily": [d.to_dict() for d in self.daily],
            "today": {
                "date": self.day.isoformat(),
                "classWise": {str(c.class_number): c.to_dict() for c in self.class_wise},
                "overall": {
                    "totalStudents": self.total_students,
                    "totalPresent": self.total_present,
                    "totalAbsent": self.total_absent,
                    "totalLate": self.total_late,
                    "overallAttendancePercentage": self.overall_percentage,
                },
            },
        }


@dataclass(frozen=True)
class TodayPercentage:
    day: date
    total_students: int
    present_today: int

    def to_dict(self) -> dict:
        return {
            "date": self.day.isoformat(),
            "totalStudents": self.total_students,
            "presentToday": self.present_today,
            "attendancePercentage": percentage(self.present_today, self.total_students),
        }


@dataclass(frozen=True)
class HistoryPage:
    rows: list[HistoryRow]
    pagination: Pagination

    def to_dict(self) -> dict:
        return {
            "attendance": [r.to_dict() for r in self.rows],
            "pagination": self.pagination.to_dict(),
        }
