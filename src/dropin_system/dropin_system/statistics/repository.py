from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import StatisticsRow


class StatisticsRepository(Protocol):
    def list_totals(self, *, start: Optional[date] = None, end: Optional[date] = None) -> Sequence[StatisticsRow]:
        """Per-date totals, newest date first."""

        raise NotImplementedError
