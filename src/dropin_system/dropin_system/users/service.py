from __future__ import annotations

import logging
from dataclasses import dataclass

from werkzeug.security import check_password_hash

from ..core.exceptions import AuthenticationError
from .repository import UserRepository

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after login."""

    user_id: int
    full_name: str
    username: str


class AuthService:
    """Use case: authenticate a staff member (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, username: str, password: str) -> SessionUser:
        username = (username or "").strip()
        user = self._users.get_by_username(username) if username else None
        if not user or not user.is_active:
            log.info("login rejected for %r", username)
            raise AuthenticationError("Incorrect username or password.")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            log.info("login rejected for %r", username)
            raise AuthenticationError("Incorrect username or password.")

        return SessionUser(user_id=user.user_id, full_name=user.full_name, username=user.username)
