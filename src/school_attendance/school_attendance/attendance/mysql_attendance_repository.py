from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional, Sequence

from ..core.enums import AttendanceMethod, AttendanceStatus
from ..core.exceptions import DuplicateRecordError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key, placeholders
from .model import AttendanceEvent, AttendanceRecord, HistoryRow
from .repository import AttendanceRepository

_RECORD_COLUMNS = """
    ar.attendance_id, ar.student_id, ar.school_id, ar.class_number, ar.attendance_date,
    ar.status, ar.method, ar.teacher_id, ar.subject, ar.notes, ar.attendance_by_nfc,
    ar.marked_at, ar.created_at, ar.updated_at
"""


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        student_id=int(r["student_id"]),
        school_id=int(r["school_id"]),
        class_number=int(r["class_number"]),
        attendance_date=r["attendance_date"],
        status=AttendanceStatus(r["status"]),
        method=AttendanceMethod(r["method"]),
        teacher_id=r.get("teacher_id"),
        subject=r.get("subject"),
        notes=r.get("notes"),
        attendance_by_nfc=bool(r.get("attendance_by_nfc")),
        marked_at=r.get("marked_at"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_student_and_date(self, student_id: int, attendance_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS}
                FROM attendance_records ar
                WHERE ar.student_id=%s AND ar.attendance_date=%s
                """,
                (int(student_id), attendance_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_for_students_and_date(self, student_ids: Sequence[int], attendance_date: date) -> dict[int, AttendanceRecord]:
        if not student_ids:
            return {}
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS}
                FROM attendance_records ar
                WHERE ar.attendance_date=%s AND ar.student_id IN ({placeholders(student_ids)})
                """,
                (attendance_date, *[int(s) for s in student_ids]),
            )
            return {int(r["student_id"]): _to_record(r) for r in fetchall(cur)}

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
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records(
                        student_id, school_id, class_number, attendance_date, status, method,
                        teacher_id, subject, notes, attendance_by_nfc, marked_at
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        int(student_id),
                        int(school_id),
                        int(class_number),
                        attendance_date,
                        status.value,
                        method.value,
                        teacher_id,
                        subject,
                        notes,
                        int(bool(attendance_by_nfc)),
                        marked_at,
                    ),
                )
                return int(cur.lastrowid)
        except Exception as e:
            if is_duplicate_key(e):
                raise DuplicateRecordError(f"Attendance already exists for student {student_id} on {attendance_date}")
            raise

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET status=%s, method=%s, teacher_id=%s, subject=%s, notes=%s,
                    attendance_by_nfc=%s, marked_at=%s
                WHERE attendance_id=%s
                """,
                (
                    status.value,
                    method.value,
                    teacher_id,
                    subject,
                    notes,
                    int(bool(attendance_by_nfc)),
                    marked_at,
                    int(attendance_id),
                ),
            )
            # rowcount is 0 when the values are unchanged; existence is what matters here
            if cur.rowcount > 0:
                return True
            cur.execute("SELECT 1 AS found FROM attendance_records WHERE attendance_id=%s", (int(attendance_id),))
            return fetchone(cur) is not None

    def list_window_events(
        self,
        *,
        school_id: int,
        start_date: date,
        end_date: date,
        class_number: Optional[int] = None,
    ) -> Sequence[AttendanceEvent]:
        clauses = ["u.school_id=%s", "u.is_deleted=0", "ar.attendance_date BETWEEN %s AND %s"]
        params: list[Any] = [int(school_id), start_date, end_date]
        if class_number is not None:
            clauses.append("u.class_number=%s")
            params.append(int(class_number))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT ar.attendance_id, ar.student_id, ar.attendance_date, ar.status,
                       u.class_number AS student_class
                FROM attendance_records ar
                JOIN users u ON u.user_id = ar.student_id
                WHERE {" AND ".join(clauses)}
                """,
                tuple(params),
            )
            return [
                AttendanceEvent(
                    attendance_id=int(r["attendance_id"]),
                    student_id=int(r["student_id"]),
                    student_class=r.get("student_class"),
                    attendance_date=r["attendance_date"],
                    status=AttendanceStatus(r["status"]),
                )
                for r in fetchall(cur)
            ]

    def list_history_rows(
        self,
        *,
        school_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        teacher_id: Optional[int] = None,
        student_id: Optional[int] = None,
    ) -> Sequence[HistoryRow]:
        clauses = ["ar.school_id=%s"]
        params: list[Any] = [int(school_id)]

        if start_date is not None:
            clauses.append("ar.attendance_date >= %s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("ar.attendance_date <= %s")
            params.append(end_date)
        if teacher_id is not None:
            clauses.append("ar.teacher_id=%s")
            params.append(int(teacher_id))
        if student_id is not None:
            clauses.append("ar.student_id=%s")
            params.append(int(student_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS},
                       s.name AS student_name, s.roll_number AS student_roll_number,
                       s.class_number AS student_class, s.school_id AS student_school_id,
                       s.is_deleted AS student_is_deleted,
                       t.name AS teacher_name
                FROM attendance_records ar
                JOIN users s ON s.user_id = ar.student_id
                LEFT JOIN users t ON t.user_id = ar.teacher_id
                WHERE {" AND ".join(clauses)}
                ORDER BY ar.attendance_date DESC, ar.attendance_id DESC
                """,
                tuple(params),
            )
            return [
                HistoryRow(
                    record=_to_record(r),
                    student_name=r["student_name"],
                    student_roll_number=r.get("student_roll_number"),
                    student_class=r.get("student_class"),
                    student_school_id=r.get("student_school_id"),
                    student_is_deleted=bool(r.get("student_is_deleted")),
                    teacher_name=r.get("teacher_name"),
                )
                for r in fetchall(cur)
            ]
