from __future__ import annotations

from typing import Any, Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, like_pattern
from .model import User
from .repository import UserRepository

_USER_COLUMNS = """
    user_id, name, username, email, phone, password_hash, role, school_id,
    class_number, roll_number, status, is_deleted
"""

_SEARCH_COLUMNS = ("name", "roll_number", "username", "email", "phone")


def _to_user(row: dict) -> User:
    return User(
        user_id=int(row["user_id"]),
        name=row["name"],
        username=row.get("username"),
        email=row["email"],
        phone=row.get("phone"),
        password_hash=row["password_hash"],
        role=Role(row["role"]),
        school_id=row.get("school_id"),
        class_number=row.get("class_number"),
        roll_number=row.get("roll_number"),
        status=row.get("status") or "active",
        is_deleted=bool(row.get("is_deleted", False)),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def get_by_login(self, identifier: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_USER_COLUMNS} FROM users WHERE username=%s OR email=%s LIMIT 1",
                (identifier, identifier),
            )
            row = fetchone(cur)
            return _to_user(row) if row else None

    @staticmethod
    def _student_filter(
        *, school_id: int, search: Optional[str], class_number: Optional[int]
    ) -> tuple[str, list[Any]]:
        clauses = ["role='student'", "is_deleted=0", "school_id=%s"]
        params: list[Any] = [int(school_id)]

        if class_number is not None:
            clauses.append("class_number=%s")
            params.append(int(class_number))
        if search:
            pattern = like_pattern(search)
            clauses.append("(" + " OR ".join(f"{col} LIKE %s" for col in _SEARCH_COLUMNS) + ")")
            params.extend([pattern] * len(_SEARCH_COLUMNS))

        return " AND ".join(clauses), params

    def count_students_by_class(self, *, school_id: int, class_number: Optional[int] = None) -> dict[int, int]:
        where, params = self._student_filter(school_id=school_id, search=None, class_number=class_number)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT class_number, COUNT(*) AS total_students
                FROM users
                WHERE {where} AND class_number IS NOT NULL
                GROUP BY class_number
                """,
                tuple(params),
            )
            return {int(r["class_number"]): int(r["total_students"]) for r in fetchall(cur)}

    def count_students(
        self,
        *,
        school_id: int,
        search: Optional[str] = None,
        class_number: Optional[int] = None,
    ) -> int:
        where, params = self._student_filter(school_id=school_id, search=search, class_number=class_number)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM users WHERE {where}", tuple(params))
            row = fetchone(cur)
            return int(row["total"]) if row else 0

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
        where, params = self._student_filter(school_id=school_id, search=search, class_number=class_number)
        direction = "DESC" if descending else "ASC"
        params.extend([int(limit), int(offset)])
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_USER_COLUMNS}
                FROM users
                WHERE {where}
                ORDER BY class_number {direction}, user_id ASC
                LIMIT %s OFFSET %s
                """,
                tuple(params),
            )
            return [_to_user(r) for r in fetchall(cur)]
