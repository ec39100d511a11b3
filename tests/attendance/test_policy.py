from __future__ import annotations

import pytest

from src.school_attendance.school_attendance.attendance.policy import (
    can_access_attendance,
    history_scope,
    require_history_access,
    require_staff,
)
from src.school_attendance.school_attendance.core.enums import Role
from src.school_attendance.school_attendance.core.exceptions import AuthorizationError
from src.school_attendance.school_attendance.users.model import Actor
from tests.fakes import make_student


def test_staff_of_the_same_school_can_access():
    teacher = Actor(user_id=1, role=Role.TEACHER, school_id=1)
    admin = Actor(user_id=2, role=Role.ADMIN, school_id=1)

    assert can_access_attendance(teacher, 1)
    assert can_access_attendance(admin, 1, make_student(10, school_id=1))


def test_other_school_or_role_is_denied():
    teacher = Actor(user_id=1, role=Role.TEACHER, school_id=1)
    student = Actor(user_id=3, role=Role.STUDENT, school_id=1)
    parent = Actor(user_id=4, role=Role.PARENT, school_id=1)

    assert not can_access_attendance(teacher, 2)
    assert not can_access_attendance(teacher, 1, make_student(10, school_id=2))
    assert not can_access_attendance(teacher, 1, make_student(10, is_deleted=True))
    assert not can_access_attendance(student, 1)
    assert not can_access_attendance(parent, 1)


def test_staff_without_school_is_denied():
    with pytest.raises(AuthorizationError):
        require_staff(Actor(user_id=1, role=Role.ADMIN, school_id=None))


def test_history_scope_by_role():
    assert history_scope(Actor(1, Role.ADMIN, 7), self_only=True).teacher_id is None
    assert history_scope(Actor(2, Role.TEACHER, 7), self_only=True).teacher_id == 2
    assert history_scope(Actor(2, Role.TEACHER, 7), self_only=False).teacher_id is None
    scope = history_scope(Actor(3, Role.STUDENT, 7), self_only=False)
    assert (scope.school_id, scope.student_id) == (7, 3)


def test_history_access_denies_parents_and_schoolless_actors():
    require_history_access(Actor(3, Role.STUDENT, 7))
    require_history_access(Actor(2, Role.TEACHER, 7))

    with pytest.raises(AuthorizationError):
        require_history_access(Actor(4, Role.PARENT, 7))
    with pytest.raises(AuthorizationError):
        require_history_access(Actor(3, Role.STUDENT, None))
