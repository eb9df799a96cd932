from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import NameGroup, ServiceStatus


def name_group(name: Optional[str]) -> NameGroup:
    """A-L when the name starts with A..L (any case), otherwise M-Z."""
    first = (name or "").strip()[:1].upper()
    if "A" <= first <= "L":
        return NameGroup.A_TO_L
    return NameGroup.M_TO_Z


@dataclass(frozen=True)
class Customer:
    """A client of the drop-in service."""

    customer_id: int
    name: str
    gender: str
    eligible: bool
    need_interpreter: bool
    comments: Optional[str] = None
    comments_old: Optional[str] = None
    interpreter: Optional[int] = None
    first_dropin: Optional[date] = None
    confirmation_date: Optional[date] = None

    @property
    def name_group(self) -> NameGroup:
        return name_group(self.name)


@dataclass(frozen=True)
class CustomerListRow:
    """Customer joined with today's attendance for the main list."""

    customer: Customer
    language_name: str = "-"
    today_attendance_id: Optional[int] = None
    dropin: bool = False
    doctor: ServiceStatus = ServiceStatus.NOT_NEEDED
    lawyer: ServiceStatus = ServiceStatus.NOT_NEEDED
