from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, time
from typing import Optional

from ..common.datetime_utils import format_clock, format_display_date
from ..core.enums import ServiceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """One customer's visit on one drop-in date.

    ``attendance_id`` is None for a draft that has not been saved yet.
    ``customer_name`` is only filled by queries that join Customers.
    """

    attendance_id: Optional[int]
    customer_id: int
    dropin_date: date
    dropin_time: Optional[time] = None
    dropin: bool = False
    doctor: ServiceStatus = ServiceStatus.NOT_NEEDED
    lawyer: ServiceStatus = ServiceStatus.NOT_NEEDED
    observation: Optional[str] = None
    customer_name: Optional[str] = field(default=None, compare=False)

    @property
    def is_new(self) -> bool:
        return self.attendance_id is None

    @property
    def formatted_date(self) -> str:
        return format_display_date(self.dropin_date)

    @property
    def formatted_time(self) -> str:
        return format_clock(self.dropin_time)


@dataclass(frozen=True)
class HistoryPage:
    """One page of a customer's previous visits."""

    rows: list[AttendanceRecord]
    page: int
    page_size: int
    total: int

    @property
    def pages(self) -> int:
        return max((self.total + self.page_size - 1) // self.page_size, 1)

    @property
    def has_next(self) -> bool:
        return self.page < self.pages

    @property
    def has_prev(self) -> bool:
        return self.page > 1
