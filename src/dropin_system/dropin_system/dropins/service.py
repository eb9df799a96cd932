from __future__ import annotations

import logging
from datetime import date
from typing import Mapping, Optional

from ..common.datetime_utils import now_local
from ..common.validators import FieldErrors, optional_text, parse_optional_date, parse_optional_int
from ..core.enums import Entrance
from ..core.exceptions import NotFoundError, ValidationError
from .model import Dropin
from .repository import DropinRepository

log = logging.getLogger(__name__)

ENTRANCE_CHOICES = [(e.value, e.value) for e in Entrance]


class DropinService:
    def __init__(self, dropins: DropinRepository):
        self._dropins = dropins

    def get(self, dropin_id: int) -> Dropin:
        dropin = self._dropins.get_by_id(int(dropin_id))
        if not dropin:
            raise NotFoundError()
        return dropin

    def search(self, filters: Optional[Mapping[str, str]] = None) -> list[Dropin]:
        filters = filters or {}
        errors = FieldErrors()
        dropin_id = parse_optional_int(filters.get("ID"), "ID", "ID", errors)
        dropin_date = parse_optional_date(filters.get("DropinDate"), "DropinDate", "Dropin Date", errors)
        if errors:
            return []
        return list(
            self._dropins.search(
                dropin_id=dropin_id,
                dropin_date=dropin_date,
                main_entrance=optional_text(filters.get("MainEntrance")),
            )
        )

    def list_up_to(self, today: Optional[date] = None) -> list[Dropin]:
        """Past and current drop-ins, newest first."""
        today = today or now_local().date()
        return list(self._dropins.search(up_to=today))

    def date_options(self, today: Optional[date] = None) -> list[tuple[str, str]]:
        """(iso date, display date) pairs for the first-drop-in select."""
        return [(d.dropin_date.isoformat(), d.formatted_date) for d in self.list_up_to(today)]

    def _parse(self, form: Mapping[str, str], *, dropin_id: Optional[int] = None) -> tuple[date, Optional[str]]:
        errors = FieldErrors()
        dropin_date = parse_optional_date(form.get("DropinDate"), "DropinDate", "Dropin Date", errors)
        if dropin_date is None and "DropinDate" not in errors.errors:
            errors.add("DropinDate", "Dropin Date cannot be blank.")

        entrance = optional_text(form.get("MainEntrance"))
        if entrance is not None and entrance not in {e.value for e in Entrance}:
            errors.add("MainEntrance", "Main Entrance is invalid.")

        if dropin_date is not None:
            clash = self._dropins.get_by_date(dropin_date)
            if clash and clash.dropin_id != dropin_id:
                errors.add("DropinDate", f"A drop-in on {clash.formatted_date} already exists.")

        if errors:
            raise ValidationError("Please correct the errors below.", errors.errors)
        return dropin_date, entrance

    def create(self, form: Mapping[str, str]) -> int:
        dropin_date, entrance = self._parse(form)
        dropin_id = self._dropins.create(dropin_date=dropin_date, main_entrance=entrance)
        log.info("drop-in %s created for %s", dropin_id, dropin_date)
        return dropin_id

    def update(self, dropin_id: int, form: Mapping[str, str]) -> None:
        self.get(dropin_id)
        dropin_date, entrance = self._parse(form, dropin_id=int(dropin_id))
        self._dropins.update(dropin_id=int(dropin_id), dropin_date=dropin_date, main_entrance=entrance)

    def delete(self, dropin_id: int) -> None:
        if not self._dropins.delete(int(dropin_id)):
            raise NotFoundError()
        log.info("drop-in %s deleted", dropin_id)
