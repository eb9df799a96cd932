from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..common.datetime_utils import format_display_date


@dataclass(frozen=True)
class Dropin:
    """A scheduled drop-in session and its entrance restriction."""

    dropin_id: int
    dropin_date: date
    main_entrance: Optional[str] = None

    @property
    def formatted_date(self) -> str:
        return format_display_date(self.dropin_date)
