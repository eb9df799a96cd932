from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Any, Mapping, Optional

from ..common.datetime_utils import now_local
from ..common.validators import (
    FieldErrors,
    max_length,
    optional_text,
    parse_flag,
    parse_optional_date,
    parse_optional_int,
    parse_optional_time,
)
from ..core.constants import DEFAULT_PAGE_SIZE, MAX_OBSERVATION_LENGTH
from ..core.enums import ServiceStatus
from ..core.exceptions import DuplicateAttendanceError, NotFoundError, ValidationError
from ..customers.repository import CustomerRepository
from .model import AttendanceRecord, HistoryPage
from .repository import AttendanceRepository

log = logging.getLogger(__name__)

STATUS_LABELS = {
    "doctor": [(int(s), s.label("Doctor")) for s in ServiceStatus],
    "lawyer": [(int(s), s.label("Lawyer")) for s in ServiceStatus],
}

DUPLICATE_MESSAGE = "This customer already has an attendance on that date."


def _parse_status(value: Any, field: str, label: str, errors: FieldErrors) -> Optional[ServiceStatus]:
    raw = parse_optional_int(value, field, label, errors)
    if raw is None:
        return None
    try:
        return ServiceStatus(raw)
    except ValueError:
        errors.add(field, f"{label} is invalid.")
        return None


def _parse_observation(form: Mapping[str, Any], errors: FieldErrors) -> Optional[str]:
    observation = optional_text(form.get("Observation"))
    return max_length(observation, "Observation", "Observation", errors, limit=MAX_OBSERVATION_LENGTH)


class AttendanceService:
    """Check-ins, doctor/lawyer queues and attendance maintenance."""

    def __init__(self, attendance: AttendanceRepository, customers: CustomerRepository):
        self._attendance = attendance
        self._customers = customers

    def get(self, attendance_id: int) -> AttendanceRecord:
        record = self._attendance.get_by_id(int(attendance_id))
        if not record:
            raise NotFoundError()
        return record

    # --- today's check-in -------------------------------------------------

    def today_draft(self, customer_id: int, *, now: Optional[datetime] = None) -> AttendanceRecord:
        """Today's row for the customer, or an unsaved one with the defaults."""
        now = now or now_local()
        if not self._customers.get_by_id(int(customer_id)):
            raise NotFoundError()
        existing = self._attendance.get_for_customer_and_date(int(customer_id), now.date())
        if existing:
            return existing
        return AttendanceRecord(
            attendance_id=None,
            customer_id=int(customer_id),
            dropin_date=now.date(),
            dropin_time=now.time(),
            dropin=True,
        )

    def check_in_today(
        self,
        customer_id: int,
        form: Mapping[str, Any],
        *,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        """Find-or-create today's row and apply the posted Dropin/Doctor/Lawyer/Observation."""
        now = now or now_local()
        if not self._customers.get_by_id(int(customer_id)):
            raise NotFoundError()

        errors = FieldErrors()
        changes: dict[str, Any] = {}
        if "Dropin" in form:
            dropin = parse_flag(form.get("Dropin"), "Dropin", "Dropin", errors, required=False)
            if dropin is not None:
                changes["dropin"] = dropin
        for key, label in (("Doctor", "Doctor"), ("Lawyer", "Lawyer")):
            status = _parse_status(form.get(key), key, label, errors)
            if status is not None:
                changes[key.lower()] = status
        if "Observation" in form:
            changes["observation"] = _parse_observation(form, errors)
        if errors:
            raise ValidationError("Please correct the errors below.", errors.errors)

        return self._save_for_date(int(customer_id), changes, now=now)

    def check_in_new_customer(
        self,
        customer_id: int,
        *,
        need_doctor: bool,
        need_lawyer: bool,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        """Mark a freshly registered customer as present today."""
        changes = {
            "dropin": True,
            "doctor": ServiceStatus.WAITING if need_doctor else ServiceStatus.NOT_NEEDED,
            "lawyer": ServiceStatus.WAITING if need_lawyer else ServiceStatus.NOT_NEEDED,
        }
        return self._save_for_date(int(customer_id), changes, now=now or now_local())

    def _save_for_date(self, customer_id: int, changes: dict[str, Any], *, now: datetime) -> AttendanceRecord:
        today = now.date()
        existing = self._attendance.get_for_customer_and_date(customer_id, today)
        if existing:
            return self._apply(existing, changes)

        draft = AttendanceRecord(
            attendance_id=None,
            customer_id=customer_id,
            dropin_date=today,
            dropin_time=now.time(),
            dropin=True,
        )
        record = replace(draft, **changes)
        try:
            new_id = self._attendance.create(record)
        except DuplicateAttendanceError:
            # another request checked the customer in first; update that row instead
            log.warning("concurrent check-in for customer %s on %s", customer_id, today)
            existing = self._attendance.get_for_customer_and_date(customer_id, today)
            if existing is None:
                raise
            return self._apply(existing, changes)

        log.info("customer %s checked in on %s (attendance %s)", customer_id, today, new_id)
        return replace(record, attendance_id=new_id)

    def _apply(self, existing: AttendanceRecord, changes: dict[str, Any]) -> AttendanceRecord:
        updated = replace(existing, **changes)
        if updated != existing:
            self._attendance.update(updated)
        return updated

    # --- doctor / lawyer status -------------------------------------------

    def update_doctor(self, attendance_id: int, form: Mapping[str, Any]) -> AttendanceRecord:
        return self._update_status(attendance_id, form, key="Doctor")

    def update_lawyer(self, attendance_id: int, form: Mapping[str, Any]) -> AttendanceRecord:
        return self._update_status(attendance_id, form, key="Lawyer")

    def _update_status(self, attendance_id: int, form: Mapping[str, Any], *, key: str) -> AttendanceRecord:
        record = self.get(attendance_id)
        errors = FieldErrors()
        status = _parse_status(form.get(key), key, key, errors)
        if status is None and key not in errors.errors:
            errors.add(key, f"{key} cannot be blank.")
        observation = _parse_observation(form, errors)
        if errors:
            raise ValidationError("Please correct the errors below.", errors.errors)

        updated = replace(record, observation=observation, **{key.lower(): status})
        self._attendance.update(updated)
        log.info("attendance %s: %s set to %s", attendance_id, key.lower(), int(status))
        return updated

    # --- plain maintenance --------------------------------------------------

    def _parse(self, form: Mapping[str, Any]) -> AttendanceRecord:
        errors = FieldErrors()
        customer_id = parse_optional_int(form.get("CustomersID"), "CustomersID", "Customers ID", errors)
        if customer_id is None and "CustomersID" not in errors.errors:
            errors.add("CustomersID", "Customers ID cannot be blank.")
        elif customer_id is not None and not self._customers.get_by_id(customer_id):
            errors.add("CustomersID", "Customers ID is invalid.")

        dropin_date = parse_optional_date(form.get("DropinDate"), "DropinDate", "Dropin Date", errors)
        if dropin_date is None and "DropinDate" not in errors.errors:
            errors.add("DropinDate", "Dropin Date cannot be blank.")
        dropin_time = parse_optional_time(form.get("DropinTime"), "DropinTime", "Dropin Time", errors)
        dropin = parse_flag(form.get("Dropin"), "Dropin", "Dropin", errors, required=False)
        doctor = _parse_status(form.get("Doctor"), "Doctor", "Doctor", errors)
        lawyer = _parse_status(form.get("Lawyer"), "Lawyer", "Lawyer", errors)
        observation = _parse_observation(form, errors)

        if errors:
            raise ValidationError("Please correct the errors below.", errors.errors)

        return AttendanceRecord(
            attendance_id=None,
            customer_id=int(customer_id),
            dropin_date=dropin_date,
            dropin_time=dropin_time,
            dropin=bool(dropin),
            doctor=doctor or ServiceStatus.NOT_NEEDED,
            lawyer=lawyer or ServiceStatus.NOT_NEEDED,
            observation=observation,
        )

    def create(self, form: Mapping[str, Any]) -> int:
        record = self._parse(form)
        existing = self._attendance.get_for_customer_and_date(record.customer_id, record.dropin_date)
        if existing:
            raise ValidationError(DUPLICATE_MESSAGE, {"DropinDate": DUPLICATE_MESSAGE})
        try:
            attendance_id = self._attendance.create(record)
        except DuplicateAttendanceError:
            raise ValidationError(DUPLICATE_MESSAGE, {"DropinDate": DUPLICATE_MESSAGE})
        log.info("attendance %s created for customer %s", attendance_id, record.customer_id)
        return attendance_id

    def update(self, attendance_id: int, form: Mapping[str, Any]) -> AttendanceRecord:
        self.get(attendance_id)
        record = replace(self._parse(form), attendance_id=int(attendance_id))
        clash = self._attendance.get_for_customer_and_date(record.customer_id, record.dropin_date)
        if clash and clash.attendance_id != record.attendance_id:
            raise ValidationError(DUPLICATE_MESSAGE, {"DropinDate": DUPLICATE_MESSAGE})
        try:
            self._attendance.update(record)
        except DuplicateAttendanceError:
            raise ValidationError(DUPLICATE_MESSAGE, {"DropinDate": DUPLICATE_MESSAGE})
        return record

    def delete(self, attendance_id: int) -> None:
        if not self._attendance.delete(int(attendance_id)):
            raise NotFoundError()
        log.info("attendance %s deleted", attendance_id)

    def search(self, filters: Optional[Mapping[str, str]] = None, *, sort: Optional[str] = None) -> list[AttendanceRecord]:
        filters = filters or {}
        errors = FieldErrors()
        attendance_id = parse_optional_int(filters.get("ID"), "ID", "ID", errors)
        customer_id = parse_optional_int(filters.get("CustomersID"), "CustomersID", "Customers ID", errors)
        doctor = parse_optional_int(filters.get("Doctor"), "Doctor", "Doctor", errors)
        lawyer = parse_optional_int(filters.get("Lawyer"), "Lawyer", "Lawyer", errors)
        dropin = parse_flag(filters.get("Dropin"), "Dropin", "Dropin", errors, required=False)
        dropin_date = parse_optional_date(filters.get("DropinDate"), "DropinDate", "Dropin Date", errors)
        if errors:
            return []
        return list(
            self._attendance.search(
                attendance_id=attendance_id,
                customer_id=customer_id,
                customer_name=optional_text(filters.get("customerName")),
                doctor=doctor,
                lawyer=lawyer,
                dropin=dropin,
                dropin_date=dropin_date,
                observation=optional_text(filters.get("Observation")),
                sort=sort,
            )
        )

    def history(self, customer_id: int, page: int = 1, *, page_size: int = DEFAULT_PAGE_SIZE) -> HistoryPage:
        page = max(int(page), 1)
        total = self._attendance.count_for_customer(int(customer_id))
        rows = self._attendance.history(int(customer_id), limit=page_size, offset=(page - 1) * page_size)
        return HistoryPage(rows=list(rows), page=page, page_size=page_size, total=total)

    # --- queues -------------------------------------------------------------

    def doctor_list(self, day: Optional[date] = None) -> list[AttendanceRecord]:
        return list(self._attendance.list_for_date(day or now_local().date(), need_doctor=True))

    def lawyer_list(self, day: Optional[date] = None) -> list[AttendanceRecord]:
        return list(self._attendance.list_for_date(day or now_local().date(), need_lawyer=True))

    def queue(self, day: Optional[date] = None) -> list[AttendanceRecord]:
        return list(
            self._attendance.list_for_date(day or now_local().date(), need_doctor=True, need_lawyer=True)
        )
