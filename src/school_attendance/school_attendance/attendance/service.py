from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Optional

from ..common.datetime_utils import Clock, now_local
from ..common.pagination import Pagination
from ..common.validators import require_int
from ..core.constants import DEFAULT_STUDENT_PAGE_LIMIT
from ..core.enums import AttendanceMethod, AttendanceStatus, Role
from ..core.exceptions import ConflictError, DuplicateRecordError, NotFoundError, ValidationError
from ..users.model import Actor, User
from ..users.repository import UserRepository
from .model import AttendanceRecord, MarkResult
from .policy import can_access_attendance, require_staff
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Mark:
    status: AttendanceStatus
    method: AttendanceMethod
    teacher_id: Optional[int]
    subject: str
    notes: str
    attendance_by_nfc: bool


def parse_status(value: Any) -> AttendanceStatus:
    if value is None or not str(value).strip():
        raise ValidationError("status is required", field="status")
    try:
        return AttendanceStatus(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(s.value for s in AttendanceStatus)
        raise ValidationError(f"status must be one of: {allowed}", field="status")


class AttendanceService:
    """Use cases: mark a student's attendance for today, list the roster with today's marks.

    Marking is an upsert on (student, day): a second mark on the same day
    updates the existing record instead of creating another one.
    """

    def __init__(self, attendance: AttendanceRepository, users: UserRepository, *, clock: Clock = now_local):
        self._attendance = attendance
        self._users = users
        self._clock = clock

    def _active_student(self, student_id: int) -> User:
        student = self._users.get_by_id(student_id)
        if not student or student.role != Role.STUDENT or student.is_deleted or student.school_id is None:
            raise NotFoundError("Student not found or invalid role")
        if student.class_number is None:
            raise ValidationError("Student has no class assigned", field="studentId")
        return student

    def get_student(self, actor: Actor, student_id: Any) -> User:
        require_staff(actor)
        student = self._active_student(require_int(student_id, "studentId"))
        if not can_access_attendance(actor, actor.school_id, student):
            raise NotFoundError("Student not found or invalid role")
        return student

    def mark_manual(
        self,
        actor: Actor,
        *,
        student_id: Any,
        status: Any,
        subject: Optional[str] = None,
        notes: Optional[str] = None,
        attendance_by_nfc: bool = False,
    ) -> MarkResult:
        require_staff(actor)
        if student_id is None or str(student_id).strip() == "":
            raise ValidationError("studentId is required", field="studentId")
        mark = _Mark(
            status=parse_status(status),
            method=AttendanceMethod.MANUAL,
            teacher_id=actor.user_id,
            subject=(subject or "").strip(),
            notes=(notes or "").strip(),
            attendance_by_nfc=bool(attendance_by_nfc),
        )
        student = self.get_student(actor, student_id)
        return self._mark(student, mark)

    def mark_via_url(self, student_id: Any) -> MarkResult:
        """Unauthenticated mark from a scanned link; scoped to the student's own school."""
        student = self._active_student(require_int(student_id, "studentId"))
        mark = _Mark(
            status=AttendanceStatus.PRESENT,
            method=AttendanceMethod.URL,
            teacher_id=None,
            subject="",
            notes="",
            attendance_by_nfc=False,
        )
        return self._mark(student, mark)

    def _mark(self, student: User, mark: _Mark) -> MarkResult:
        now = self._clock()
        today = now.date()

        existing = self._attendance.get_for_student_and_date(student.user_id, today)
        if existing:
            return self._update(existing, mark, now)

        try:
            attendance_id = self._attendance.create_record(
                student_id=student.user_id,
                school_id=int(student.school_id),
                class_number=int(student.class_number),
                attendance_date=today,
                status=mark.status,
                method=mark.method,
                teacher_id=mark.teacher_id,
                subject=mark.subject,
                notes=mark.notes,
                attendance_by_nfc=mark.attendance_by_nfc,
                marked_at=now,
            )
        except DuplicateRecordError:
            # Another request created today's record first; apply ours on top of it.
            logger.warning("Concurrent mark for student %s on %s, retrying as update", student.user_id, today)
            existing = self._attendance.get_for_student_and_date(student.user_id, today)
            if not existing:
                raise ConflictError("Attendance was changed concurrently, please retry")
            return self._update(existing, mark, now)

        logger.info("Attendance created for student %s on %s (%s, %s)", student.user_id, today, mark.status.value, mark.method.value)
        record = AttendanceRecord(
            attendance_id=attendance_id,
            student_id=student.user_id,
            school_id=int(student.school_id),
            class_number=int(student.class_number),
            attendance_date=today,
            status=mark.status,
            method=mark.method,
            teacher_id=mark.teacher_id,
            subject=mark.subject,
            notes=mark.notes,
            attendance_by_nfc=mark.attendance_by_nfc,
            marked_at=now,
            created_at=now,
            updated_at=now,
        )
        return MarkResult(record=record, created=True)

    def _update(self, existing: AttendanceRecord, mark: _Mark, now: datetime) -> MarkResult:
        ok = self._attendance.update_record(
            attendance_id=existing.attendance_id,
            status=mark.status,
            method=mark.method,
            teacher_id=mark.teacher_id,
            subject=mark.subject,
            notes=mark.notes,
            attendance_by_nfc=mark.attendance_by_nfc,
            marked_at=now,
        )
        if not ok:
            raise ConflictError("Attendance was changed concurrently, please retry")

        logger.info(
            "Attendance updated for student %s on %s (%s, %s)",
            existing.student_id,
            existing.attendance_date,
            mark.status.value,
            mark.method.value,
        )
        record = replace(
            existing,
            status=mark.status,
            method=mark.method,
            teacher_id=mark.teacher_id,
            subject=mark.subject,
            notes=mark.notes,
            attendance_by_nfc=mark.attendance_by_nfc,
            marked_at=now,
            updated_at=now,
        )
        return MarkResult(record=record, created=False)

    def list_students(
        self,
        actor: Actor,
        *,
        search: Optional[str] = None,
        class_number: Optional[int] = None,
        descending: bool = False,
        page: int = 1,
        limit: int = DEFAULT_STUDENT_PAGE_LIMIT,
    ) -> dict:
        school_id = require_staff(actor)
        search = (search or "").strip() or None

        total = self._users.count_students(school_id=school_id, search=search, class_number=class_number)
        pagination = Pagination(page=page, limit=limit, total=total)
        students = self._users.list_students(
            school_id=school_id,
            search=search,
            class_number=class_number,
            descending=descending,
            offset=pagination.offset,
            limit=limit,
        )

        day = self._clock().date()
        marks = self._attendance.get_for_students_and_date([s.user_id for s in students], day)

        rows = []
        for s in students:
            rec = marks.get(s.user_id)
            row = s.to_public_dict()
            row["attendanceStatus"] = rec.status.value if rec else None
            row["remarks"] = (rec.notes or "") if rec else ""
            rows.append(row)

        return {"students": rows, "pagination": pagination.to_dict()}
