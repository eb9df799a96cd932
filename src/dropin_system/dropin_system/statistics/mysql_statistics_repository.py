from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import StatisticsRow
from .repository import StatisticsRepository


class MySQLStatisticsRepository(StatisticsRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_totals(self, *, start: Optional[date] = None, end: Optional[date] = None) -> Sequence[StatisticsRow]:
        clauses = ["1=1"]
        params: list[object] = []
        if start is not None:
            clauses.append("DropinDate>=%s")
            params.append(start)
        if end is not None:
            clauses.append("DropinDate<=%s")
            params.append(end)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT DropinDate, MainEntrance, `A-L`, `M-Z`, SeenDoctor, SeenLawyer, Total
                FROM qry_totals
                WHERE {where}
                ORDER BY DropinDate DESC
                """,
                tuple(params),
            )
            rows = fetchall(cur)
            return [
                StatisticsRow(
                    dropin_date=r["DropinDate"],
                    main_entrance=r.get("MainEntrance"),
                    a_to_l=int(r["A-L"] or 0),
                    m_to_z=int(r["M-Z"] or 0),
                    seen_doctor=int(r["SeenDoctor"] or 0),
                    seen_lawyer=int(r["SeenLawyer"] or 0),
                    total=int(r["Total"] or 0),
                )
                for r in rows
            ]
