from __future__ import annotations

import pytest
from werkzeug.security import generate_password_hash

from src.school_attendance.school_attendance.core.enums import Role
from src.school_attendance.school_attendance.core.exceptions import AuthenticationError, ValidationError
from src.school_attendance.school_attendance.users.service import AuthService
from tests.fakes import InMemoryUsers, make_staff


@pytest.fixture
def users():
    return InMemoryUsers(
        [
            make_staff(1, role=Role.ADMIN, username="admin", password_hash=generate_password_hash("right")),
            make_staff(2, username="gone", password_hash=generate_password_hash("right"), is_deleted=True),
            make_staff(3, username="seeded"),
        ]
    )


def test_auth_by_username_or_email(users):
    auth = AuthService(users)

    assert auth.authenticate("admin", "right").user_id == 1
    actor = auth.authenticate("admin1@school.test", "right")
    assert (actor.role, actor.school_id) == (Role.ADMIN, 1)


def test_auth_wrong_password_raises(users):
    with pytest.raises(AuthenticationError):
        AuthService(users).authenticate("admin", "wrong")


def test_auth_deleted_user_raises(users):
    with pytest.raises(AuthenticationError):
        AuthService(users).authenticate("gone", "right")


def test_auth_placeholder_hash_never_matches(users):
    with pytest.raises(AuthenticationError):
        AuthService(users).authenticate("seeded", "CHANGE_ME")


def test_auth_requires_identifier(users):
    with pytest.raises(ValidationError):
        AuthService(users).authenticate("  ", "right")
