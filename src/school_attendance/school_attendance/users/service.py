from __future__ import annotations

import logging

from werkzeug.security import check_password_hash

from ..common.validators import require_non_empty
from ..core.exceptions import AuthenticationError
from .model import Actor
from .repository import UserRepository

logger = logging.getLogger(__name__)


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, identifier: str, password: str) -> Actor:
        identifier = require_non_empty(identifier, "username")
        user = self._users.get_by_login(identifier)
        if not user or user.is_deleted:
            raise AuthenticationError("Invalid username or password")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' in seed data
            ok = False

        if not ok:
            logger.info("Failed login for %s", identifier)
            raise AuthenticationError("Invalid username or password")

        return Actor(user_id=user.user_id, role=user.role, school_id=user.school_id, name=user.name)
