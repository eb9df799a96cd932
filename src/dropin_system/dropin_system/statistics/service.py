from __future__ import annotations

import csv
import io
from datetime import date
from typing import Optional

from .model import StatisticsReport, StatisticsRow
from .repository import StatisticsRepository

CSV_FIELDS = ["DropinDate", "MainEntrance", "A-L", "M-Z", "SeenDoctor", "SeenLawyer", "Total"]


class StatisticsService:
    """Read-only per-date totals."""

    def __init__(self, statistics: StatisticsRepository):
        self._statistics = statistics

    def build_report(self, *, start: Optional[date] = None, end: Optional[date] = None) -> StatisticsReport:
        rows = list(self._statistics.list_totals(start=start, end=end))
        totals = StatisticsRow(
            dropin_date=None,
            main_entrance=None,
            a_to_l=sum(r.a_to_l for r in rows),
            m_to_z=sum(r.m_to_z for r in rows),
            seen_doctor=sum(r.seen_doctor for r in rows),
            seen_lawyer=sum(r.seen_lawyer for r in rows),
            total=sum(r.total for r in rows),
        )
        return StatisticsReport(rows=rows, totals=totals)

    def to_csv(self, report: StatisticsReport) -> bytes:
        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=CSV_FIELDS)
        writer.writeheader()
        for r in [*report.rows, report.totals]:
            writer.writerow(
                {
                    "DropinDate": r.dropin_date.isoformat() if r.dropin_date else "Total",
                    "MainEntrance": r.main_entrance or "",
                    "A-L": r.a_to_l,
                    "M-Z": r.m_to_z,
                    "SeenDoctor": r.seen_doctor,
                    "SeenLawyer": r.seen_lawyer,
                    "Total": r.total,
                }
            )
        return out.getvalue().encode("utf-8-sig")
