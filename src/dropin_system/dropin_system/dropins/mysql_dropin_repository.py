from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Dropin
from .repository import DropinRepository


def _to_dropin(r: dict) -> Dropin:
    return Dropin(dropin_id=int(r["ID"]), dropin_date=r["DropinDate"], main_entrance=r.get("MainEntrance"))


class MySQLDropinRepository(DropinRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, dropin_id: int) -> Optional[Dropin]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT ID, DropinDate, MainEntrance FROM Dropins WHERE ID=%s", (int(dropin_id),))
            r = fetchone(cur)
            return _to_dropin(r) if r else None

    def get_by_date(self, dropin_date: date) -> Optional[Dropin]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT ID, DropinDate, MainEntrance FROM Dropins WHERE DropinDate=%s", (dropin_date,))
            r = fetchone(cur)
            return _to_dropin(r) if r else None

    def search(
        self,
        *,
        dropin_id: Optional[int] = None,
        dropin_date: Optional[date] = None,
        main_entrance: Optional[str] = None,
        up_to: Optional[date] = None,
    ) -> Sequence[Dropin]:
        clauses = ["1=1"]
        params: list[object] = []
        if dropin_id is not None:
            clauses.append("ID=%s")
            params.append(int(dropin_id))
        if dropin_date is not None:
            clauses.append("DropinDate=%s")
            params.append(dropin_date)
        if main_entrance:
            clauses.append("MainEntrance=%s")
            params.append(main_entrance)
        if up_to is not None:
            clauses.append("DropinDate<=%s")
            params.append(up_to)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT ID, DropinDate, MainEntrance
                FROM Dropins
                WHERE {where}
                ORDER BY DropinDate DESC
                """,
                tuple(params),
            )
            return [_to_dropin(r) for r in fetchall(cur)]

    def create(self, *, dropin_date: date, main_entrance: Optional[str]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO Dropins(DropinDate, MainEntrance) VALUES(%s,%s)",
                (dropin_date, main_entrance),
            )
            return int(cur.lastrowid)

    def update(self, *, dropin_id: int, dropin_date: date, main_entrance: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE Dropins SET DropinDate=%s, MainEntrance=%s WHERE ID=%s",
                (dropin_date, main_entrance, int(dropin_id)),
            )
            return cur.rowcount > 0

    def delete(self, dropin_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM Dropins WHERE ID=%s", (int(dropin_id),))
            return cur.rowcount > 0
