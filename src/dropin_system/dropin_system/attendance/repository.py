from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_customer_and_date(self, customer_id: int, dropin_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create(self, record: AttendanceRecord) -> int:
        """Insert ``record`` and return its id.

        Raises DuplicateAttendanceError when the customer already has a row
        for ``record.dropin_date``.
        """

        raise NotImplementedError

    def update(self, record: AttendanceRecord) -> bool:
        """Raises DuplicateAttendanceError when the new date collides."""

        raise NotImplementedError

    def delete(self, attendance_id: int) -> bool:
        raise NotImplementedError

    def search(
        self,
        *,
        attendance_id: Optional[int] = None,
        customer_id: Optional[int] = None,
        customer_name: Optional[str] = None,
        doctor: Optional[int] = None,
        lawyer: Optional[int] = None,
        dropin: Optional[bool] = None,
        dropin_date: Optional[date] = None,
        observation: Optional[str] = None,
        sort: Optional[str] = None,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def history(self, customer_id: int, *, limit: int, offset: int) -> Sequence[AttendanceRecord]:
        """Newest visit first."""

        raise NotImplementedError

    def count_for_customer(self, customer_id: int) -> int:
        raise NotImplementedError

    def list_for_date(
        self,
        dropin_date: date,
        *,
        need_doctor: bool = False,
        need_lawyer: bool = False,
    ) -> Sequence[AttendanceRecord]:
        """Rows of one date ordered by arrival time.

        With both flags set a row qualifies when either status is non-zero.
        """

        raise NotImplementedError
