from __future__ import annotations

from datetime import date, timedelta

import pytest

from src.school_attendance.school_attendance.attendance.stats_service import AttendanceStatsService
from src.school_attendance.school_attendance.core.enums import AttendanceMethod, AttendanceStatus, Role
from src.school_attendance.school_attendance.core.exceptions import AuthorizationError
from tests.fakes import actor_for, make_staff, make_student


@pytest.fixture
def admin(users):
    return users.add(make_staff(100, role=Role.ADMIN))


@pytest.fixture
def service(attendance_repo, users, fixed_now):
    return AttendanceStatsService(attendance_repo, users, clock=lambda: fixed_now)


def test_class_stats_use_roster_count_as_denominator(service, attendance_repo, users, admin, fixed_now):
    today = fixed_now.date()
    for i in (1, 2, 3):
        users.add(make_student(i, class_number=5))
    users.add(make_student(4, class_number=6))
    attendance_repo.seed(student_id=1, day=today, status=AttendanceStatus.PRESENT, teacher_id=admin.user_id)
    attendance_repo.seed(student_id=2, day=today, status=AttendanceStatus.PRESENT, method=AttendanceMethod.URL)
    attendance_repo.seed(student_id=4, day=today, status=AttendanceStatus.ABSENT)

    result = service.build_stats(actor_for(admin), class_number=5).to_dict()

    assert result["today"]["classWise"] == {
        "5": {
            "present": 2,
            "absent": 0,
            "late": 0,
            "total": 2,
            "totalStudents": 3,
            "attendancePercentage": "66.67%",
        }
    }
    assert result["today"]["overall"] == {
        "totalStudents": 3,
        "totalPresent": 2,
        "totalAbsent": 0,
        "totalLate": 0,
        "overallAttendancePercentage": "66.67%",
    }


def test_overall_sums_all_classes(service, attendance_repo, users, admin, fixed_now):
    today = fixed_now.date()
    users.add(make_student(1, class_number=5))
    users.add(make_student(2, class_number=6))
    users.add(make_student(3, class_number=6))
    attendance_repo.seed(student_id=1, day=today, status=AttendanceStatus.LATE)
    attendance_repo.seed(student_id=2, day=today, status=AttendanceStatus.PRESENT)
    attendance_repo.seed(student_id=3, day=today, status=AttendanceStatus.ABSENT)

    result = service.build_stats(actor_for(admin))

    assert [c.class_number for c in result.class_wise] == [5, 6]
    assert result.total_students == 3
    assert (result.total_present, result.total_absent, result.total_late) == (1, 1, 1)
    assert result.overall_percentage == "33.33%"


def test_empty_school_reports_zero_percent(service, admin):
    result = service.build_stats(actor_for(admin)).to_dict()

    assert result["daily"] == []
    assert result["today"]["classWise"] == {}
    assert result["today"]["overall"]["totalStudents"] == 0
    assert result["today"]["overall"]["overallAttendancePercentage"] == "0.00%"


def test_trailing_series_covers_seven_days_ending_today(service, attendance_repo, users, admin, fixed_now):
    today = fixed_now.date()
    for i in (1, 2, 3, 4):
        users.add(make_student(i))
    attendance_repo.seed(student_id=1, day=today - timedelta(days=7))
    attendance_repo.seed(student_id=1, day=today - timedelta(days=6), status=AttendanceStatus.LATE)
    attendance_repo.seed(student_id=2, day=today - timedelta(days=1), status=AttendanceStatus.ABSENT)
    attendance_repo.seed(student_id=3, day=today)
    attendance_repo.seed(student_id=4, day=today)

    daily = service.build_stats(actor_for(admin)).to_dict()["daily"]

    assert daily == [
        {"date": (today - timedelta(days=6)).isoformat(), "totalPresent": 0, "totalAbsent": 0, "totalLate": 1},
        {"date": (today - timedelta(days=1)).isoformat(), "totalPresent": 0, "totalAbsent": 1, "totalLate": 0},
        {"date": today.isoformat(), "totalPresent": 2, "totalAbsent": 0, "totalLate": 0},
    ]


def test_explicit_date_ends_the_series_but_keeps_todays_start(service, attendance_repo, users, admin, fixed_now):
    day = date(2024, 3, 10)
    users.add(make_student(1))
    users.add(make_student(2))
    attendance_repo.seed(student_id=1, day=date(2024, 3, 5))
    attendance_repo.seed(student_id=1, day=date(2024, 3, 9))
    attendance_repo.seed(student_id=1, day=day)
    attendance_repo.seed(student_id=2, day=day, status=AttendanceStatus.LATE)
    attendance_repo.seed(student_id=1, day=fixed_now.date())

    result = service.build_stats(actor_for(admin), day=day)

    assert result.day == day
    assert result.total_present == 1
    assert result.total_late == 1
    assert [d.day for d in result.daily] == [date(2024, 3, 9), day]


def test_day_before_the_series_still_gets_class_stats(service, attendance_repo, users, admin):
    day = date(2024, 2, 1)
    users.add(make_student(1))
    attendance_repo.seed(student_id=1, day=day)

    result = service.build_stats(actor_for(admin), day=day)

    assert result.total_present == 1
    assert result.daily == []


def test_other_schools_never_leak_into_stats(service, attendance_repo, users, admin, fixed_now):
    today = fixed_now.date()
    users.add(make_student(1, school_id=1))
    users.add(make_student(2, school_id=2))
    users.add(make_student(3, school_id=2))
    attendance_repo.seed(student_id=2, day=today)
    attendance_repo.seed(student_id=3, day=today)

    result = service.build_stats(actor_for(admin))

    assert result.total_students == 1
    assert result.class_wise == []
    assert result.daily == []


def test_deleted_students_are_not_counted(service, attendance_repo, users, admin, fixed_now):
    users.add(make_student(1))
    users.add(make_student(2, is_deleted=True))
    attendance_repo.seed(student_id=2, day=fixed_now.date())

    result = service.build_stats(actor_for(admin))

    assert result.total_students == 1
    assert result.total_present == 0


def test_students_cannot_read_stats(service, users):
    student = users.add(make_student(1))

    with pytest.raises(AuthorizationError):
        service.build_stats(actor_for(student))


def test_today_percentage(service, attendance_repo, users, admin, fixed_now):
    today = fixed_now.date()
    for i in (1, 2, 3, 4):
        users.add(make_student(i, class_number=i))
    attendance_repo.seed(student_id=1, day=today)
    attendance_repo.seed(student_id=2, day=today, status=AttendanceStatus.LATE)
    attendance_repo.seed(student_id=3, day=today - timedelta(days=1))

    result = service.today_percentage(actor_for(admin)).to_dict()

    assert result == {
        "date": today.isoformat(),
        "totalStudents": 4,
        "presentToday": 1,
        "attendancePercentage": "25.00%",
    }
