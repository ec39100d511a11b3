from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Roster entry (student, teacher, admin or parent).

    Plain data object: no database access here.
    """

    user_id: int
    name: str
    username: Optional[str]
    email: str
    phone: Optional[str]
    password_hash: str
    role: Role
    school_id: Optional[int]
    class_number: Optional[int] = None
    roll_number: Optional[str] = None
    status: str = "active"
    is_deleted: bool = False

    def to_public_dict(self) -> dict:
        return {
            "id": self.user_id,
            "name": self.name,
            "username": self.username,
            "role": self.role.value,
            "email": self.email,
            "phone": self.phone,
            "class": self.class_number,
            "rollNumber": self.roll_number,
            "status": self.status,
            "schoolId": self.school_id,
        }


@dataclass(frozen=True)
class Actor:
    """Who is making the request, as stored in the Flask session after login."""

    user_id: int
    role: Role
    school_id: Optional[int]
    name: str = ""

    def to_dict(self) -> dict:
        return {"userId": self.user_id, "role": self.role.value, "schoolId": self.school_id, "name": self.name}
