from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class User:
    """Staff account allowed to use the drop-in screens.

    Plain data object (no DB access code).
    """

    user_id: int
    full_name: str
    username: str
    password_hash: str
    is_active: bool = True
