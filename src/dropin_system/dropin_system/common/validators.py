from __future__ import annotations

from datetime import date, datetime, time
from typing import Optional

from ..core.constants import DATE_FORMAT, MAX_TEXT_LENGTH


class FieldErrors:
    """Collects per-field messages while a form is validated."""

    def __init__(self):
        self.errors: dict[str, str] = {}

    def add(self, field: str, message: str) -> None:
        self.errors.setdefault(field, message)

    def __bool__(self) -> bool:
        return bool(self.errors)


def require_non_empty(value: Optional[str], field: str, label: str, errors: FieldErrors) -> str:
    v = (value or "").strip()
    if not v:
        errors.add(field, f"{label} cannot be blank.")
    return v


def max_length(value: Optional[str], field: str, label: str, errors: FieldErrors, limit: int = MAX_TEXT_LENGTH) -> Optional[str]:
    if value is not None and len(value) > limit:
        errors.add(field, f"{label} should contain at most {limit} characters.")
    return value


def optional_text(value: Optional[str]) -> Optional[str]:
    v = (value or "").strip()
    return v or None


def parse_flag(value, field: str, label: str, errors: FieldErrors, *, required: bool = True) -> Optional[bool]:
    """Accept the values HTML forms send for yes/no selects and checkboxes."""
    if value is None or (isinstance(value, str) and not value.strip()):
        if required:
            errors.add(field, f"{label} cannot be blank.")
        return None
    if isinstance(value, bool):
        return value
    v = str(value).strip().lower()
    if v in {"1", "true", "yes", "on", "y"}:
        return True
    if v in {"0", "false", "no", "off", "n"}:
        return False
    errors.add(field, f"{label} is invalid.")
    return None


def parse_optional_int(value, field: str, label: str, errors: FieldErrors) -> Optional[int]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        errors.add(field, f"{label} must be an integer.")
        return None


def parse_optional_date(value, field: str, label: str, errors: FieldErrors) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value).strip(), DATE_FORMAT).date()
    except ValueError:
        errors.add(field, f"The format of {label} is invalid.")
        return None


def parse_optional_time(value, field: str, label: str, errors: FieldErrors) -> Optional[time]:
    if value is None or value == "":
        return None
    if isinstance(value, time):
        return value
    v = str(value).strip()
    for fmt in ("%H:%M:%S", "%H:%M"):
        try:
            return datetime.strptime(v, fmt).time()
        except ValueError:
            continue
    errors.add(field, f"The format of {label} is invalid.")
    return None
