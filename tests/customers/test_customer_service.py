from __future__ import annotations

from datetime import date

import pytest
from openpyxl import load_workbook

from src.dropin_system.dropin_system.core.enums import NameGroup, ServiceStatus
from src.dropin_system.dropin_system.core.exceptions import NotFoundError, ValidationError
from src.dropin_system.dropin_system.customers.model import name_group


def _form(**overrides):
    form = {"Name": "Alice Martin", "Gender": "F", "Eligible": "1", "NeedInterpreter": "0"}
    form.update(overrides)
    return form


@pytest.mark.parametrize(
    "name, expected",
    [
        ("alice", NameGroup.A_TO_L),
        ("Lena", NameGroup.A_TO_L),
        ("Maria", NameGroup.M_TO_Z),
        ("zoe", NameGroup.M_TO_Z),
        ("  bob", NameGroup.A_TO_L),
        ("9 Lives", NameGroup.M_TO_Z),
        ("", NameGroup.M_TO_Z),
    ],
)
def test_name_group(name, expected):
    assert name_group(name) == expected


def test_create_with_doctor_box_checks_in_today(container, attendance_repo, fixed_now):
    cid = container.customer_service.create(_form(), need_doctor=True, now=fixed_now)

    record = attendance_repo.get_for_customer_and_date(cid, fixed_now.date())
    assert record is not None
    assert record.dropin is True
    assert record.doctor == ServiceStatus.WAITING
    assert record.lawyer == ServiceStatus.NOT_NEEDED
    assert record.dropin_time == fixed_now.time()


def test_create_without_boxes_still_checks_in(container, attendance_repo, fixed_now):
    cid = container.customer_service.create(_form(), now=fixed_now)

    record = attendance_repo.get_for_customer_and_date(cid, fixed_now.date())
    assert record.doctor == ServiceStatus.NOT_NEEDED
    assert record.lawyer == ServiceStatus.NOT_NEEDED


def test_create_requires_fields(container, customers_repo):
    with pytest.raises(ValidationError) as exc:
        container.customer_service.create({"Name": "  "})

    assert set(exc.value.errors) == {"Name", "Gender", "Eligible", "NeedInterpreter"}
    assert exc.value.errors["Name"] == "Name cannot be blank."
    assert customers_repo.rows == {}


def test_create_rejects_long_comments_and_bad_gender(container):
    with pytest.raises(ValidationError) as exc:
        container.customer_service.create(_form(Gender="X", Comments="c" * 256))

    assert exc.value.errors["Gender"] == "Gender is invalid."
    assert exc.value.errors["Comments"] == "Comments should contain at most 255 characters."


def test_update_keeps_old_comments(container, customers_repo, dropins_repo, fixed_now):
    cid = customers_repo.add("Maria", comments_old="from the paper register")
    dropins_repo.create(dropin_date=date(2026, 2, 28), main_entrance="ALL")

    updated = container.customer_service.update(
        cid, _form(Name="Maria Lopez", Comments="new", FirstDropin="2026-02-28"), now=fixed_now
    )

    assert updated.name == "Maria Lopez"
    assert updated.comments_old == "from the paper register"
    assert customers_repo.get_by_id(cid).first_dropin == date(2026, 2, 28)


def test_create_removes_customer_when_check_in_fails(container, customers_repo, attendance_repo, monkeypatch, fixed_now):
    def broken_create(record):
        raise RuntimeError("connection lost")

    monkeypatch.setattr(attendance_repo, "create", broken_create)

    with pytest.raises(RuntimeError):
        container.customer_service.create(_form(Name="Ana"), now=fixed_now)

    assert customers_repo.rows == {}
    assert attendance_repo.rows == {}


@pytest.mark.parametrize("first_dropin", ["2026-03-14", "2026-03-01"])
def test_first_dropin_must_be_a_past_dropin_date(container, dropins_repo, customers_repo, fixed_now, first_dropin):
    dropins_repo.create(dropin_date=date(2026, 2, 28), main_entrance="ALL")
    dropins_repo.create(dropin_date=date(2026, 3, 14), main_entrance="ALL")

    with pytest.raises(ValidationError) as exc:
        container.customer_service.create(_form(FirstDropin=first_dropin), now=fixed_now)

    assert exc.value.errors == {"FirstDropin": "First Dropin must be a drop-in date up to today."}
    assert customers_repo.rows == {}


def test_first_dropin_accepts_todays_dropin(container, dropins_repo, customers_repo, fixed_now):
    dropins_repo.create(dropin_date=fixed_now.date(), main_entrance="ALL")

    cid = container.customer_service.create(_form(FirstDropin=fixed_now.date().isoformat()), now=fixed_now)

    assert customers_repo.get_by_id(cid).first_dropin == fixed_now.date()


def test_update_missing_customer(container):
    with pytest.raises(NotFoundError):
        container.customer_service.update(77, _form())


def test_delete_removes_attendance(container, customers_repo, attendance_repo, fixed_now):
    cid = customers_repo.add("Nina")
    container.attendance_service.check_in_today(cid, {}, now=fixed_now)

    container.customer_service.delete(cid)

    assert customers_repo.get_by_id(cid) is None
    assert attendance_repo.rows == {}


def test_search_orders_by_name_and_carries_today(container, customers_repo, fixed_now):
    zed = customers_repo.add("Zed")
    customers_repo.add("Abe")
    container.attendance_service.check_in_today(zed, {"Lawyer": "1"}, now=fixed_now)

    rows = container.customer_service.search(now=fixed_now)

    assert [r.customer.name for r in rows] == ["Abe", "Zed"]
    assert rows[0].dropin is False and rows[0].doctor == ServiceStatus.NOT_NEEDED
    assert rows[1].dropin is True and rows[1].lawyer == ServiceStatus.WAITING


def test_search_filters(container, customers_repo, fixed_now):
    customers_repo.add("Abe", gender="M", eligible=False)
    customers_repo.add("Amy", gender="F")

    assert [r.customer.name for r in container.customer_service.search({"Gender": "F"}, now=fixed_now)] == ["Amy"]
    assert [r.customer.name for r in container.customer_service.search({"Eligible": "0"}, now=fixed_now)] == ["Abe"]
    assert container.customer_service.search({"ID": "x"}, now=fixed_now) == []


def test_language_name_falls_back_to_dash(container, customers_repo, languages_repo):
    lid = languages_repo.add("Arabic", "ar")
    with_lang = container.customer_service.get(customers_repo.add("Omar", interpreter=lid, need_interpreter=True))
    without = container.customer_service.get(customers_repo.add("Olga"))

    assert container.customer_service.language_name(with_lang) == "Arabic"
    assert container.customer_service.language_name(without) == "-"


def test_export_all_columns(container, customers_repo):
    customers_repo.add("Abe", comments="first visit")

    wb = load_workbook(container.customer_service.export_all())
    ws = wb.active

    header = [cell.value for cell in ws[1]]
    assert header == ["ID", "Name", "Gender", "ConfirmationDate", "Eligible", "Comments", "CommentsOld"]
    assert ws.cell(row=2, column=2).value == "Abe"
    assert ws.cell(row=2, column=6).value == "first visit"


def test_export_observations(container, customers_repo, fixed_now):
    cid = customers_repo.add("Abe")
    container.attendance_service.check_in_today(cid, {"Observation": "needs a coat"}, now=fixed_now)

    ws = load_workbook(container.customer_service.export_dropin_observations()).active

    assert [cell.value for cell in ws[1]] == ["CustomersID", "Name", "DropinDate", "Doctor", "Lawyer", "Observation"]
    assert ws.cell(row=2, column=6).value == "needs a coat"
