from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from mysql.connector.errors import IntegrityError

from ..core.enums import ServiceStatus
from ..core.exceptions import DuplicateAttendanceError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key, like, normalize_mysql_time
from .model import AttendanceRecord
from .repository import AttendanceRepository

_SELECT = """
    SELECT a.ID, a.CustomersID, a.DropinDate, a.DropinTime, a.Dropin, a.Doctor, a.Lawyer, a.Observation,
           c.Name AS CustomerName
    FROM Attendance a
    JOIN Customers c ON c.ID = a.CustomersID
"""

_SORTS = {
    "customerName": "c.Name ASC",
    "-customerName": "c.Name DESC",
    "DropinDate": "a.DropinDate ASC, a.DropinTime ASC",
    "-DropinDate": "a.DropinDate DESC, a.DropinTime DESC",
}


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["ID"]),
        customer_id=int(r["CustomersID"]),
        dropin_date=r["DropinDate"],
        dropin_time=normalize_mysql_time(r.get("DropinTime")),
        dropin=bool(r["Dropin"]),
        doctor=ServiceStatus(int(r["Doctor"])),
        lawyer=ServiceStatus(int(r["Lawyer"])),
        observation=r.get("Observation"),
        customer_name=r.get("CustomerName"),
    )


def _params(record: AttendanceRecord) -> tuple:
    return (
        int(record.customer_id),
        int(record.doctor),
        int(record.lawyer),
        1 if record.dropin else 0,
        record.dropin_date,
        record.dropin_time,
        record.observation,
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE a.ID=%s", (int(attendance_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_for_customer_and_date(self, customer_id: int, dropin_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE a.CustomersID=%s AND a.DropinDate=%s",
                (int(customer_id), dropin_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def create(self, record: AttendanceRecord) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO Attendance(CustomersID, Doctor, Lawyer, Dropin, DropinDate, DropinTime, Observation)
                    VALUES(%s,%s,%s,%s,%s,%s,%s)
                    """,
                    _params(record),
                )
                return int(cur.lastrowid)
        except IntegrityError as e:
            if is_duplicate_key(e):
                raise DuplicateAttendanceError(
                    f"customer {record.customer_id} already has an attendance on {record.dropin_date}"
                ) from e
            raise

    def update(self, record: AttendanceRecord) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    UPDATE Attendance
                    SET CustomersID=%s, Doctor=%s, Lawyer=%s, Dropin=%s, DropinDate=%s, DropinTime=%s, Observation=%s
                    WHERE ID=%s
                    """,
                    _params(record) + (int(record.attendance_id),),
                )
                return cur.rowcount > 0
        except IntegrityError as e:
            if is_duplicate_key(e):
                raise DuplicateAttendanceError(
                    f"customer {record.customer_id} already has an attendance on {record.dropin_date}"
                ) from e
            raise

    def delete(self, attendance_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM Attendance WHERE ID=%s", (int(attendance_id),))
            return cur.rowcount > 0

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
        clauses = ["1=1"]
        params: list[object] = []
        if attendance_id is not None:
            clauses.append("a.ID=%s")
            params.append(int(attendance_id))
        if customer_id is not None:
            clauses.append("a.CustomersID=%s")
            params.append(int(customer_id))
        if customer_name:
            clauses.append("c.Name LIKE %s")
            params.append(like(customer_name))
        if doctor is not None:
            clauses.append("a.Doctor=%s")
            params.append(int(doctor))
        if lawyer is not None:
            clauses.append("a.Lawyer=%s")
            params.append(int(lawyer))
        if dropin is not None:
            clauses.append("a.Dropin=%s")
            params.append(1 if dropin else 0)
        if dropin_date is not None:
            clauses.append("a.DropinDate=%s")
            params.append(dropin_date)
        if observation:
            clauses.append("a.Observation LIKE %s")
            params.append(like(observation))

        where = " AND ".join(clauses)
        order_by = _SORTS.get(sort or "", _SORTS["-DropinDate"])

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE {where} ORDER BY {order_by}", tuple(params))
            return [_to_record(r) for r in fetchall(cur)]

    def history(self, customer_id: int, *, limit: int, offset: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT
                + """
                WHERE a.CustomersID=%s
                ORDER BY a.DropinDate DESC
                LIMIT %s OFFSET %s
                """,
                (int(customer_id), int(limit), int(offset)),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def count_for_customer(self, customer_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM Attendance WHERE CustomersID=%s", (int(customer_id),))
            r = fetchone(cur)
            return int(r["n"]) if r else 0

    def list_for_date(
        self,
        dropin_date: date,
        *,
        need_doctor: bool = False,
        need_lawyer: bool = False,
    ) -> Sequence[AttendanceRecord]:
        clauses = ["a.DropinDate=%s"]
        if need_doctor and need_lawyer:
            clauses.append("(a.Doctor > 0 OR a.Lawyer > 0)")
        elif need_doctor:
            clauses.append("a.Doctor > 0")
        elif need_lawyer:
            clauses.append("a.Lawyer > 0")

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE {where} ORDER BY a.DropinTime ASC", (dropin_date,))
            return [_to_record(r) for r in fetchall(cur)]
