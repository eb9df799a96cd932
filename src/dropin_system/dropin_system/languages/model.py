from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Language:
    """Interpreter language offered to customers."""

    language_id: int
    language: str
    short_name: Optional[str] = None
