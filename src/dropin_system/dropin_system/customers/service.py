from __future__ import annotations

import io
import logging
from datetime import date, datetime
from typing import Any, Mapping, Optional

import pandas as pd

from ..attendance.service import AttendanceService
from ..common.datetime_utils import now_local
from ..common.validators import (
    FieldErrors,
    max_length,
    optional_text,
    parse_flag,
    parse_optional_date,
    parse_optional_int,
    require_non_empty,
)
from ..core.enums import Gender
from ..core.exceptions import NotFoundError, ValidationError
from ..dropins.service import DropinService
from ..languages.service import LanguageService
from .model import Customer, CustomerListRow
from .repository import CustomerRepository

log = logging.getLogger(__name__)

GENDER_CHOICES = [(Gender.MALE.value, "Male"), (Gender.FEMALE.value, "Female")]

EXPORT_ALL_COLUMNS = ["ID", "Name", "Gender", "ConfirmationDate", "Eligible", "Comments", "CommentsOld"]
EXPORT_OBSERVATION_COLUMNS = ["CustomersID", "Name", "DropinDate", "Doctor", "Lawyer", "Observation"]

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _to_xlsx(rows: list[dict[str, Any]], *, columns: list[str], sheet_name: str) -> io.BytesIO:
    df = pd.DataFrame(rows, columns=columns)
    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name=sheet_name)
    output.seek(0)
    return output


class CustomerService:
    def __init__(
        self,
        customers: CustomerRepository,
        attendance_service: AttendanceService,
        language_service: LanguageService,
        dropin_service: DropinService,
    ):
        self._customers = customers
        self._attendance = attendance_service
        self._languages = language_service
        self._dropins = dropin_service

    def get(self, customer_id: int) -> Customer:
        customer = self._customers.get_by_id(int(customer_id))
        if not customer:
            raise NotFoundError()
        return customer

    def language_name(self, customer: Customer) -> str:
        return self._languages.name_for(customer.interpreter)

    def search(self, filters: Optional[Mapping[str, str]] = None, *, now: Optional[datetime] = None) -> list[CustomerListRow]:
        filters = filters or {}
        now = now or now_local()
        errors = FieldErrors()
        customer_id = parse_optional_int(filters.get("ID"), "ID", "ID", errors)
        eligible = parse_flag(filters.get("Eligible"), "Eligible", "Eligible", errors, required=False)
        interpreter = parse_optional_int(filters.get("Interpreter"), "Interpreter", "Interpreter", errors)
        if errors:
            return []
        return list(
            self._customers.search(
                today=now.date(),
                customer_id=customer_id,
                name=optional_text(filters.get("Name")),
                gender=optional_text(filters.get("Gender")),
                eligible=eligible,
                interpreter=interpreter,
            )
        )

    def _parse(
        self,
        form: Mapping[str, Any],
        *,
        today: date,
        customer_id: int = 0,
        comments_old: Optional[str] = None,
    ) -> Customer:
        errors = FieldErrors()

        name = require_non_empty(form.get("Name"), "Name", "Name", errors)
        max_length(name, "Name", "Name", errors)

        gender = require_non_empty(form.get("Gender"), "Gender", "Gender", errors)
        if gender and gender not in {g.value for g in Gender}:
            errors.add("Gender", "Gender is invalid.")

        eligible = parse_flag(form.get("Eligible"), "Eligible", "Eligible", errors)
        need_interpreter = parse_flag(form.get("NeedInterpreter"), "NeedInterpreter", "Need Interpreter", errors)

        comments = optional_text(form.get("Comments"))
        max_length(comments, "Comments", "Comments", errors)

        interpreter = parse_optional_int(form.get("Interpreter"), "Interpreter", "Interpreter", errors)
        first_dropin = parse_optional_date(form.get("FirstDropin"), "FirstDropin", "First Dropin", errors)
        if first_dropin and first_dropin not in {d.dropin_date for d in self._dropins.list_up_to(today)}:
            errors.add("FirstDropin", "First Dropin must be a drop-in date up to today.")
        confirmation_date = parse_optional_date(
            form.get("ConfirmationDate"), "ConfirmationDate", "Confirmation Date", errors
        )

        if errors:
            raise ValidationError("Please correct the errors below.", errors.errors)

        return Customer(
            customer_id=customer_id,
            name=name,
            gender=gender,
            eligible=bool(eligible),
            need_interpreter=bool(need_interpreter),
            comments=comments,
            comments_old=comments_old,
            interpreter=interpreter,
            first_dropin=first_dropin,
            confirmation_date=confirmation_date,
        )

    def create(
        self,
        form: Mapping[str, Any],
        *,
        need_doctor: bool = False,
        need_lawyer: bool = False,
        now: Optional[datetime] = None,
    ) -> int:
        """Register a customer and check them in for today."""
        now = now or now_local()
        customer = self._parse(form, today=now.date())
        customer_id = self._customers.create(customer)
        log.info("customer %s created", customer_id)
        try:
            self._attendance.check_in_new_customer(
                customer_id,
                need_doctor=need_doctor,
                need_lawyer=need_lawyer,
                now=now,
            )
        except Exception:
            log.warning("check-in for new customer %s failed, removing the customer", customer_id)
            self._customers.delete(customer_id)
            raise
        return customer_id

    def update(self, customer_id: int, form: Mapping[str, Any], *, now: Optional[datetime] = None) -> Customer:
        current = self.get(customer_id)
        now = now or now_local()
        customer = self._parse(
            form,
            today=now.date(),
            customer_id=current.customer_id,
            comments_old=current.comments_old,
        )
        self._customers.update(customer)
        return customer

    def delete(self, customer_id: int) -> None:
        if not self._customers.delete(int(customer_id)):
            raise NotFoundError()
        log.info("customer %s deleted with their attendance", customer_id)

    def form_values(self, customer: Customer) -> dict[str, str]:
        """Field values for re-rendering the edit form."""
        return {
            "Name": customer.name,
            "Gender": customer.gender,
            "Eligible": "1" if customer.eligible else "0",
            "NeedInterpreter": "1" if customer.need_interpreter else "0",
            "Comments": customer.comments or "",
            "Interpreter": str(customer.interpreter or ""),
            "FirstDropin": customer.first_dropin.isoformat() if customer.first_dropin else "",
            "ConfirmationDate": customer.confirmation_date.isoformat() if customer.confirmation_date else "",
        }

    # --- exports ------------------------------------------------------------

    def export_all(self) -> io.BytesIO:
        rows = [
            {
                "ID": c.customer_id,
                "Name": c.name,
                "Gender": c.gender,
                "ConfirmationDate": c.confirmation_date,
                "Eligible": "Yes" if c.eligible else "No",
                "Comments": c.comments,
                "CommentsOld": c.comments_old,
            }
            for c in self._customers.list_all()
        ]
        return _to_xlsx(rows, columns=EXPORT_ALL_COLUMNS, sheet_name="Customers")

    def export_dropin_observations(self) -> io.BytesIO:
        rows = [dict(r) for r in self._customers.list_observations()]
        return _to_xlsx(rows, columns=EXPORT_OBSERVATION_COLUMNS, sheet_name="Observations")
