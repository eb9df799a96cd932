from __future__ import annotations

from datetime import date
from typing import Any, Optional, Sequence

from ..core.enums import ServiceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, like
from .model import Customer, CustomerListRow
from .repository import CustomerRepository

_COLUMNS = "c.ID, c.Name, c.Gender, c.ConfirmationDate, c.Eligible, c.Comments, c.CommentsOld, c.Interpreter, c.NeedInterpreter, c.FirstDropin"


def _flag(value: Any) -> bool:
    return str(value).strip().lower() in {"1", "true", "yes", "y"}


def _language_id(value: Any) -> Optional[int]:
    s = str(value).strip() if value is not None else ""
    return int(s) if s.isdigit() else None


def _to_customer(r: dict) -> Customer:
    return Customer(
        customer_id=int(r["ID"]),
        name=r["Name"],
        gender=r["Gender"],
        eligible=_flag(r["Eligible"]),
        need_interpreter=_flag(r["NeedInterpreter"]),
        comments=r.get("Comments"),
        comments_old=r.get("CommentsOld"),
        interpreter=_language_id(r.get("Interpreter")),
        first_dropin=r.get("FirstDropin"),
        confirmation_date=r.get("ConfirmationDate"),
    )


def _params(customer: Customer) -> tuple:
    return (
        customer.name,
        customer.gender,
        customer.confirmation_date,
        "1" if customer.eligible else "0",
        customer.comments,
        customer.comments_old,
        str(customer.interpreter) if customer.interpreter else None,
        "1" if customer.need_interpreter else "0",
        customer.first_dropin,
    )


class MySQLCustomerRepository(CustomerRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, customer_id: int) -> Optional[Customer]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM Customers c WHERE c.ID=%s", (int(customer_id),))
            r = fetchone(cur)
            return _to_customer(r) if r else None

    def search(
        self,
        *,
        today: date,
        customer_id: Optional[int] = None,
        name: Optional[str] = None,
        gender: Optional[str] = None,
        eligible: Optional[bool] = None,
        interpreter: Optional[int] = None,
    ) -> Sequence[CustomerListRow]:
        clauses = ["1=1"]
        params: list[object] = [today]
        if customer_id is not None:
            clauses.append("c.ID=%s")
            params.append(int(customer_id))
        if name:
            clauses.append("c.Name LIKE %s")
            params.append(like(name))
        if gender:
            clauses.append("c.Gender=%s")
            params.append(gender)
        if eligible is not None:
            clauses.append("c.Eligible=%s")
            params.append("1" if eligible else "0")
        if interpreter is not None:
            clauses.append("c.Interpreter=%s")
            params.append(str(interpreter))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS},
                       a.ID AS TodayAttendanceID,
                       COALESCE(a.Dropin, 0) AS TodayDropin,
                       COALESCE(a.Doctor, 0) AS TodayDoctor,
                       COALESCE(a.Lawyer, 0) AS TodayLawyer,
                       l.Language AS LanguageName
                FROM Customers c
                LEFT JOIN Attendance a ON a.CustomersID = c.ID AND a.DropinDate = %s
                LEFT JOIN Languages l ON l.ID = c.Interpreter
                WHERE {where}
                ORDER BY c.Name ASC
                """,
                tuple(params),
            )
            rows = fetchall(cur)
            return [
                CustomerListRow(
                    customer=_to_customer(r),
                    language_name=r.get("LanguageName") or "-",
                    today_attendance_id=int(r["TodayAttendanceID"]) if r.get("TodayAttendanceID") else None,
                    dropin=bool(r["TodayDropin"]),
                    doctor=ServiceStatus(int(r["TodayDoctor"])),
                    lawyer=ServiceStatus(int(r["TodayLawyer"])),
                )
                for r in rows
            ]

    def create(self, customer: Customer) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO Customers(Name, Gender, ConfirmationDate, Eligible, Comments, CommentsOld,
                                      Interpreter, NeedInterpreter, FirstDropin)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                _params(customer),
            )
            return int(cur.lastrowid)

    def update(self, customer: Customer) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE Customers
                SET Name=%s, Gender=%s, ConfirmationDate=%s, Eligible=%s, Comments=%s, CommentsOld=%s,
                    Interpreter=%s, NeedInterpreter=%s, FirstDropin=%s
                WHERE ID=%s
                """,
                _params(customer) + (int(customer.customer_id),),
            )
            return cur.rowcount > 0

    def delete(self, customer_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM Attendance WHERE CustomersID=%s", (int(customer_id),))
            cur.execute("DELETE FROM Customers WHERE ID=%s", (int(customer_id),))
            return cur.rowcount > 0

    def list_all(self) -> Sequence[Customer]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM Customers c ORDER BY c.ID ASC")
            return [_to_customer(r) for r in fetchall(cur)]

    def list_observations(self) -> Sequence[dict[str, Any]]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT CustomersID, Name, DropinDate, Doctor, Lawyer, Observation
                FROM qry_observations
                ORDER BY DropinDate DESC, Name ASC
                """
            )
            return fetchall(cur)
