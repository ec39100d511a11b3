from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import User


class UserRepository(Protocol):
    """Roster queries the attendance services depend on.

    Student queries only ever see non-deleted students of the given school.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_login(self, identifier: str) -> Optional[User]:
        """Look a user up by username or email."""
        raise NotImplementedError

    def count_students_by_class(self, *, school_id: int, class_number: Optional[int] = None) -> dict[int, int]:
        raise NotImplementedError

    def count_students(
        self,
        *,
        school_id: int,
        search: Optional[str] = None,
        class_number: Optional[int] = None,
    ) -> int:
        raise NotImplementedError

    def list_students(
        self,
        *,
        school_id: int,
        search: Optional[str] = None,
        class_number: Optional[int] = None,
        descending: bool = False,
        offset: int = 0,
        limit: int = 10,
    ) -> Sequence[User]:
        raise NotImplementedError
