from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.formatting import iso_or_none
from ..core.enums import TeacherAttendanceStatus


@dataclass(frozen=True)
class TeacherAttendanceRecord:
    """One teacher's check-in/check-out for a work day; unique per (user_id, work_date)."""

    record_id: int
    user_id: int
    school_id: int
    work_date: date
    check_in_time: Optional[datetime]
    check_out_time: Optional[datetime]
    status: TeacherAttendanceStatus
    name: str
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.record_id,
            "userId": self.user_id,
            "schoolId": self.school_id,
            "date": self.work_date.isoformat(),
            "checkIn": iso_or_none(self.check_in_time),
            "checkOut": iso_or_none(self.check_out_time),
            "status": self.status.value,
            "name": self.name,
            "createdAt": iso_or_none(self.created_at),
        }


@dataclass(frozen=True)
class ScanResult:
    kind: str  # "checkin" | "checkout"
    record: TeacherAttendanceRecord

    def to_dict(self) -> dict:
        return {"message": f"{self.kind} successful", "type": self.kind, "record": self.record.to_dict()}
