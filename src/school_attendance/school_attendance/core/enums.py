from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roster roles used for authorization."""

    STUDENT = "student"
    TEACHER = "teacher"
    ADMIN = "admin"
    PARENT = "parent"


class AttendanceStatus(str, Enum):
    """Status of a student's attendance mark for one day."""

    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"
    LEAVE = "leave"


class AttendanceMethod(str, Enum):
    """How an attendance mark was recorded."""

    MANUAL = "manual"
    URL = "url"


class TeacherAttendanceStatus(str, Enum):
    PRESENT = "present"
    LATE = "late"
    ABSENT = "absent"
