from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Optional

from .attendance.history_service import AttendanceHistoryService
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .attendance.stats_service import AttendanceStatsService
from .common.datetime_utils import Clock, now_local
from .core.constants import DEFAULT_TEACHER_CHECKIN_CUTOFF
from .database.connection import DBConfig, DatabaseConnection
from .teacher_attendance.factory import CheckinStrategyFactory
from .teacher_attendance.mysql_teacher_attendance_repository import MySQLTeacherAttendanceRepository
from .teacher_attendance.repository import TeacherAttendanceRepository
from .teacher_attendance.service import TeacherAttendanceService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    users_repo: UserRepository
    attendance_repo: AttendanceRepository
    teacher_attendance_repo: TeacherAttendanceRepository

    auth_service: AuthService
    attendance_service: AttendanceService
    attendance_stats_service: AttendanceStatsService
    attendance_history_service: AttendanceHistoryService
    teacher_attendance_service: TeacherAttendanceService


def wire(
    *,
    users_repo: UserRepository,
    attendance_repo: AttendanceRepository,
    teacher_attendance_repo: TeacherAttendanceRepository,
    qr_token: str,
    checkin_cutoff: time = DEFAULT_TEACHER_CHECKIN_CUTOFF,
    clock: Clock = now_local,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Build the services on top of the given repositories (MySQL or in-memory)."""
    return Container(
        conn=conn,
        users_repo=users_repo,
        attendance_repo=attendance_repo,
        teacher_attendance_repo=teacher_attendance_repo,
        auth_service=AuthService(users_repo),
        attendance_service=AttendanceService(attendance_repo, users_repo, clock=clock),
        attendance_stats_service=AttendanceStatsService(attendance_repo, users_repo, clock=clock),
        attendance_history_service=AttendanceHistoryService(attendance_repo),
        teacher_attendance_service=TeacherAttendanceService(
            teacher_attendance_repo,
            users_repo,
            qr_token=qr_token,
            checkin_cutoff=checkin_cutoff,
            strategy_factory=CheckinStrategyFactory(),
            clock=clock,
        ),
    )


def build_container(
    *,
    db_config: dict,
    qr_token: str,
    checkin_cutoff: time = DEFAULT_TEACHER_CHECKIN_CUTOFF,
    clock: Clock = now_local,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    return wire(
        users_repo=MySQLUserRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        teacher_attendance_repo=MySQLTeacherAttendanceRepository(conn),
        qr_token=qr_token,
        checkin_cutoff=checkin_cutoff,
        clock=clock,
        conn=conn,
    )
