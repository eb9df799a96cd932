from __future__ import annotations

from datetime import date, datetime, time
from typing import Optional

from ..core.constants import DATE_FORMAT, DISPLAY_DATE_FORMAT


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, DATE_FORMAT).date()


def format_display_date(value: Optional[date]) -> str:
    """Render a date as ``07 Mar 2015``; empty string for None."""
    if value is None:
        return ""
    return value.strftime(DISPLAY_DATE_FORMAT)


def format_clock(value: Optional[time]) -> str:
    """Render a time as ``3:05 PM``."""
    if value is None:
        return ""
    hour = value.hour % 12 or 12
    suffix = "AM" if value.hour < 12 else "PM"
    return f"{hour}:{value.minute:02d} {suffix}"


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch it.
    """
    return datetime.now().replace(microsecond=0)
