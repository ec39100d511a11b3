from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional, Sequence

from ..core.enums import TeacherAttendanceStatus
from ..core.exceptions import DuplicateRecordError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key, like_pattern
from .model import TeacherAttendanceRecord
from .repository import TeacherAttendanceRepository

_COLUMNS = """
    record_id, user_id, school_id, work_date, check_in_time, check_out_time, status, name, created_at
"""


def _to_record(r: dict) -> TeacherAttendanceRecord:
    return TeacherAttendanceRecord(
        record_id=int(r["record_id"]),
        user_id=int(r["user_id"]),
        school_id=int(r["school_id"]),
        work_date=r["work_date"],
        check_in_time=r.get("check_in_time"),
        check_out_time=r.get("check_out_time"),
        status=TeacherAttendanceStatus(r["status"]),
        name=r.get("name") or "",
        created_at=r.get("created_at"),
    )


def _school_filter(*, school_id: int, name: Optional[str], work_date: Optional[date]) -> tuple[str, list[Any]]:
    clauses = ["school_id=%s"]
    params: list[Any] = [int(school_id)]
    if name:
        clauses.append("name LIKE %s")
        params.append(like_pattern(name))
    if work_date is not None:
        clauses.append("work_date=%s")
        params.append(work_date)
    return " AND ".join(clauses), params


class MySQLTeacherAttendanceRepository(TeacherAttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[TeacherAttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM teacher_attendance WHERE user_id=%s AND work_date=%s",
                (int(user_id), work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

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
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO teacher_attendance(user_id, school_id, work_date, check_in_time, status, name)
                    VALUES(%s,%s,%s,%s,%s,%s)
                    """,
                    (int(user_id), int(school_id), work_date, check_in_time, status.value, name),
                )
                return int(cur.lastrowid)
        except Exception as e:
            if is_duplicate_key(e):
                raise DuplicateRecordError(f"Teacher {user_id} already checked in on {work_date}")
            raise

    def update_checkout(self, *, record_id: int, check_out_time: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE teacher_attendance
                SET check_out_time=%s
                WHERE record_id=%s AND check_out_time IS NULL
                """,
                (check_out_time, int(record_id)),
            )
            return cur.rowcount > 0

    def count_for_school(
        self,
        *,
        school_id: int,
        name: Optional[str] = None,
        work_date: Optional[date] = None,
    ) -> int:
        where, params = _school_filter(school_id=school_id, name=name, work_date=work_date)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM teacher_attendance WHERE {where}", tuple(params))
            r = fetchone(cur)
            return int(r["total"]) if r else 0

    def list_for_school(
        self,
        *,
        school_id: int,
        name: Optional[str] = None,
        work_date: Optional[date] = None,
        offset: int = 0,
        limit: int = 10,
    ) -> Sequence[TeacherAttendanceRecord]:
        where, params = _school_filter(school_id=school_id, name=name, work_date=work_date)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM teacher_attendance
                WHERE {where}
                ORDER BY created_at DESC, record_id DESC
                LIMIT %s OFFSET %s
                """,
                (*params, int(limit), int(offset)),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_school_on(self, *, school_id: int, work_date: date) -> Sequence[TeacherAttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM teacher_attendance
                WHERE school_id=%s AND work_date=%s
                ORDER BY record_id ASC
                """,
                (int(school_id), work_date),
            )
            return [_to_record(r) for r in fetchall(cur)]
