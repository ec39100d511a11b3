from __future__ import annotations

from datetime import datetime

import pytest

from src.school_attendance.school_attendance.container import wire
from src.school_attendance.school_attendance.main import create_app
from tests.fakes import InMemoryAttendance, InMemoryTeacherAttendance, InMemoryUsers

QR_TOKEN = "TEST_CHECKIN"


@pytest.fixture
def fixed_now() -> datetime:
    # Friday, before the 09:30 teacher check-in cutoff
    return datetime(2024, 3, 15, 9, 0, 0)


@pytest.fixture
def users() -> InMemoryUsers:
    return InMemoryUsers()


@pytest.fixture
def attendance_repo(users) -> InMemoryAttendance:
    return InMemoryAttendance(users)


@pytest.fixture
def teacher_attendance_repo() -> InMemoryTeacherAttendance:
    return InMemoryTeacherAttendance()


@pytest.fixture
def container(users, attendance_repo, teacher_attendance_repo, fixed_now):
    return wire(
        users_repo=users,
        attendance_repo=attendance_repo,
        teacher_attendance_repo=teacher_attendance_repo,
        qr_token=QR_TOKEN,
        clock=lambda: fixed_now,
    )


@pytest.fixture
def app(monkeypatch, container):
    monkeypatch.setenv("APP_ENV", "testing")
    return create_app(container)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def login_as(client):
    """Put a user into the session without going through /auth/login."""

    def _login(user) -> None:
        with client.session_transaction() as sess:
            sess["user_id"] = user.user_id
            sess["role"] = user.role.value
            sess["school_id"] = user.school_id
            sess["name"] = user.name

    return _login
