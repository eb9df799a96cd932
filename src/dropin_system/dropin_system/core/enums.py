from __future__ import annotations

from enum import Enum, IntEnum


class ServiceStatus(IntEnum):
    """Doctor/lawyer status stored on each attendance row."""

    NOT_NEEDED = 0
    WAITING = 1
    SEEN = 2

    def label(self, who: str) -> str:
        return {
            ServiceStatus.NOT_NEEDED: f"No need for {who}",
            ServiceStatus.WAITING: f"Waiting for {who}",
            ServiceStatus.SEEN: f"Already seen {who}",
        }[self]


class Gender(str, Enum):
    MALE = "M"
    FEMALE = "F"


class Entrance(str, Enum):
    """Which clients a drop-in session admits through the main entrance."""

    A_TO_M = "A-M"
    M_TO_Z = "M-Z"
    ALL = "ALL"


class NameGroup(str, Enum):
    A_TO_L = "A-L"
    M_TO_Z = "M-Z"
