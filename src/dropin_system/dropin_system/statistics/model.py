from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..common.datetime_utils import format_display_date


@dataclass(frozen=True)
class StatisticsRow:
    """Totals of one drop-in date."""

    dropin_date: Optional[date]
    main_entrance: Optional[str]
    a_to_l: int
    m_to_z: int
    seen_doctor: int
    seen_lawyer: int
    total: int

    @property
    def formatted_date(self) -> str:
        return format_display_date(self.dropin_date)


@dataclass(frozen=True)
class StatisticsReport:
    rows: list[StatisticsRow]
    totals: StatisticsRow
