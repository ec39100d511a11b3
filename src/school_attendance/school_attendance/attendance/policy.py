"""Who may read or write attendance for which school and student.

Every attendance service checks access through this module before touching
a repository, so the rules live in one place.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role
from ..core.exceptions import AuthorizationError
from ..users.model import Actor, User

STAFF_ROLES = frozenset({Role.TEACHER, Role.ADMIN})


def is_same_school(actor: Actor, school_id: Optional[int]) -> bool:
    return actor.school_id is not None and school_id is not None and int(actor.school_id) == int(school_id)


def can_access_attendance(actor: Actor, target_school_id: Optional[int], target_student: Optional[User] = None) -> bool:
    """Staff of the target school may access; the student (if any) must be an active student there."""
    if actor.role not in STAFF_ROLES:
        return False
    if not is_same_school(actor, target_school_id):
        return False
    if target_student is not None:
        if target_student.role != Role.STUDENT or target_student.is_deleted:
            return False
        if target_student.school_id is None or int(target_student.school_id) != int(target_school_id):
            return False
    return True


def require_attendance_access(actor: Actor, target_school_id: Optional[int], target_student: Optional[User] = None) -> None:
    if not can_access_attendance(actor, target_school_id, target_student):
        raise AuthorizationError()


def require_staff(actor: Actor) -> int:
    """Staff actor with a school; returns the school id the request is scoped to."""
    require_attendance_access(actor, actor.school_id)
    return int(actor.school_id)


@dataclass(frozen=True)
class HistoryScope:
    school_id: int
    teacher_id: Optional[int] = None
    student_id: Optional[int] = None


def require_history_access(actor: Actor) -> None:
    """Staff and students of a school may read history; everyone else is denied."""
    if actor.school_id is None:
        raise AuthorizationError()
    if actor.role != Role.STUDENT:
        require_staff(actor)


def history_scope(actor: Actor, *, self_only: bool) -> HistoryScope:
    """School-wide for staff, marker-restricted for a teacher's self view, own records for a student."""
    require_history_access(actor)

    if actor.role == Role.STUDENT:
        return HistoryScope(school_id=int(actor.school_id), student_id=actor.user_id)

    if actor.role == Role.TEACHER and self_only:
        return HistoryScope(school_id=int(actor.school_id), teacher_id=actor.user_id)
    return HistoryScope(school_id=int(actor.school_id))
