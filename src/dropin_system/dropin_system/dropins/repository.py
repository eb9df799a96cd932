from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import Dropin


class DropinRepository(Protocol):
    def get_by_id(self, dropin_id: int) -> Optional[Dropin]:
        raise NotImplementedError

    def get_by_date(self, dropin_date: date) -> Optional[Dropin]:
        raise NotImplementedError

    def search(
        self,
        *,
        dropin_id: Optional[int] = None,
        dropin_date: Optional[date] = None,
        main_entrance: Optional[str] = None,
        up_to: Optional[date] = None,
    ) -> Sequence[Dropin]:
        """Newest date first."""

        raise NotImplementedError

    def create(self, *, dropin_date: date, main_entrance: Optional[str]) -> int:
        raise NotImplementedError

    def update(self, *, dropin_id: int, dropin_date: date, main_entrance: Optional[str]) -> bool:
        raise NotImplementedError

    def delete(self, dropin_id: int) -> bool:
        raise NotImplementedError
