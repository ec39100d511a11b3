from datetime import datetime, time

from src.school_attendance.school_attendance.core.enums import TeacherAttendanceStatus
from src.school_attendance.school_attendance.teacher_attendance.factory import CheckinStrategyFactory
from src.school_attendance.school_attendance.teacher_attendance.strategies.late_strategy import LateStrategy
from src.school_attendance.school_attendance.teacher_attendance.strategies.present_strategy import PresentStrategy

CUTOFF = time(9, 30)


def test_factory_checkin_at_cutoff_is_present():
    now = datetime(2025, 1, 1, 9, 30, 0)

    strategy = CheckinStrategyFactory().for_checkin(now=now, cutoff=CUTOFF)

    assert isinstance(strategy, PresentStrategy)
    assert strategy.decide_checkin(now=now, cutoff=CUTOFF).status == TeacherAttendanceStatus.PRESENT


def test_factory_checkin_after_cutoff_is_late():
    now = datetime(2025, 1, 1, 9, 30, 1)

    strategy = CheckinStrategyFactory().for_checkin(now=now, cutoff=CUTOFF)

    assert isinstance(strategy, LateStrategy)
    assert strategy.decide_checkin(now=now, cutoff=CUTOFF).status == TeacherAttendanceStatus.LATE
