from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from src.dropin_system.dropin_system.attendance.model import AttendanceRecord
from src.dropin_system.dropin_system.container import wire
from src.dropin_system.dropin_system.core.enums import ServiceStatus
from src.dropin_system.dropin_system.core.exceptions import DuplicateAttendanceError
from src.dropin_system.dropin_system.customers.model import Customer, CustomerListRow
from src.dropin_system.dropin_system.dropins.model import Dropin
from src.dropin_system.dropin_system.languages.model import Language
from src.dropin_system.dropin_system.users.model import User

FIXED_NOW = datetime(2026, 3, 7, 10, 30, 0)


class FakeUsersRepo:
    def __init__(self, users=()):
        self._users = {u.user_id: u for u in users}

    def get_by_username(self, username):
        return next((u for u in self._users.values() if u.username == username), None)


class FakeLanguagesRepo:
    def __init__(self):
        self._next_id = 1
        self.rows: dict[int, Language] = {}

    def add(self, language, short_name=None) -> int:
        return self.create(language=language, short_name=short_name)

    def get_by_id(self, language_id):
        return self.rows.get(int(language_id))

    def search(self, *, language_id=None, language=None, short_name=None):
        out = list(self.rows.values())
        if language_id is not None:
            out = [r for r in out if r.language_id == language_id]
        if language:
            out = [r for r in out if language.lower() in r.language.lower()]
        if short_name:
            out = [r for r in out if short_name.lower() in (r.short_name or "").lower()]
        return sorted(out, key=lambda r: r.language)

    def create(self, *, language, short_name):
        lid = self._next_id
        self._next_id += 1
        self.rows[lid] = Language(language_id=lid, language=language, short_name=short_name)
        return lid

    def update(self, *, language_id, language, short_name):
        if language_id not in self.rows:
            return False
        self.rows[language_id] = Language(language_id=language_id, language=language, short_name=short_name)
        return True

    def delete(self, language_id):
        return self.rows.pop(int(language_id), None) is not None


class FakeDropinsRepo:
    def __init__(self):
        self._next_id = 1
        self.rows: dict[int, Dropin] = {}

    def get_by_id(self, dropin_id):
        return self.rows.get(int(dropin_id))

    def get_by_date(self, dropin_date):
        return next((d for d in self.rows.values() if d.dropin_date == dropin_date), None)

    def search(self, *, dropin_id=None, dropin_date=None, main_entrance=None, up_to=None):
        out = list(self.rows.values())
        if dropin_id is not None:
            out = [d for d in out if d.dropin_id == dropin_id]
        if dropin_date is not None:
            out = [d for d in out if d.dropin_date == dropin_date]
        if main_entrance:
            out = [d for d in out if d.main_entrance == main_entrance]
        if up_to is not None:
            out = [d for d in out if d.dropin_date <= up_to]
        return sorted(out, key=lambda d: d.dropin_date, reverse=True)

    def create(self, *, dropin_date, main_entrance):
        did = self._next_id
        self._next_id += 1
        self.rows[did] = Dropin(dropin_id=did, dropin_date=dropin_date, main_entrance=main_entrance)
        return did

    def update(self, *, dropin_id, dropin_date, main_entrance):
        if dropin_id not in self.rows:
            return False
        self.rows[dropin_id] = Dropin(dropin_id=dropin_id, dropin_date=dropin_date, main_entrance=main_entrance)
        return True

    def delete(self, dropin_id):
        return self.rows.pop(int(dropin_id), None) is not None


class FakeAttendanceRepo:
    """In-memory Attendance table with the (customer, date) unique key."""

    def __init__(self):
        self._next_id = 1
        self.rows: dict[int, AttendanceRecord] = {}
        self.customers: Optional["FakeCustomersRepo"] = None
        self.create_calls = 0
        self.update_calls = 0

    def _with_name(self, record: AttendanceRecord) -> AttendanceRecord:
        customer = self.customers.get_by_id(record.customer_id) if self.customers else None
        return replace(record, customer_name=customer.name if customer else None)

    def get_by_id(self, attendance_id):
        r = self.rows.get(int(attendance_id))
        return self._with_name(r) if r else None

    def get_for_customer_and_date(self, customer_id, dropin_date):
        for r in self.rows.values():
            if r.customer_id == int(customer_id) and r.dropin_date == dropin_date:
                return self._with_name(r)
        return None

    def _clashes(self, record, *, ignore_id=None):
        return any(
            r.customer_id == record.customer_id and r.dropin_date == record.dropin_date and r.attendance_id != ignore_id
            for r in self.rows.values()
        )

    def create(self, record):
        self.create_calls += 1
        if self._clashes(record):
            raise DuplicateAttendanceError("duplicate")
        aid = self._next_id
        self._next_id += 1
        self.rows[aid] = replace(record, attendance_id=aid, customer_name=None)
        return aid

    def update(self, record):
        self.update_calls += 1
        if record.attendance_id not in self.rows:
            return False
        if self._clashes(record, ignore_id=record.attendance_id):
            raise DuplicateAttendanceError("duplicate")
        self.rows[record.attendance_id] = replace(record, customer_name=None)
        return True

    def delete(self, attendance_id):
        return self.rows.pop(int(attendance_id), None) is not None

    def search(self, *, attendance_id=None, customer_id=None, customer_name=None, doctor=None, lawyer=None,
               dropin=None, dropin_date=None, observation=None, sort=None):
        out = [self._with_name(r) for r in self.rows.values()]
        if attendance_id is not None:
            out = [r for r in out if r.attendance_id == attendance_id]
        if customer_id is not None:
            out = [r for r in out if r.customer_id == customer_id]
        if customer_name:
            out = [r for r in out if customer_name.lower() in (r.customer_name or "").lower()]
        if doctor is not None:
            out = [r for r in out if int(r.doctor) == doctor]
        if lawyer is not None:
            out = [r for r in out if int(r.lawyer) == lawyer]
        if dropin is not None:
            out = [r for r in out if r.dropin == dropin]
        if dropin_date is not None:
            out = [r for r in out if r.dropin_date == dropin_date]
        if observation:
            out = [r for r in out if observation.lower() in (r.observation or "").lower()]
        if sort in {"customerName", "-customerName"}:
            return sorted(out, key=lambda r: r.customer_name or "", reverse=sort.startswith("-"))
        return sorted(out, key=lambda r: (r.dropin_date, r.dropin_time or datetime.min.time()), reverse=True)

    def history(self, customer_id, *, limit, offset):
        rows = [self._with_name(r) for r in self.rows.values() if r.customer_id == int(customer_id)]
        rows.sort(key=lambda r: r.dropin_date, reverse=True)
        return rows[offset:offset + limit]

    def count_for_customer(self, customer_id):
        return sum(1 for r in self.rows.values() if r.customer_id == int(customer_id))

    def list_for_date(self, dropin_date, *, need_doctor=False, need_lawyer=False):
        out = [self._with_name(r) for r in self.rows.values() if r.dropin_date == dropin_date]
        if need_doctor and need_lawyer:
            out = [r for r in out if r.doctor > 0 or r.lawyer > 0]
        elif need_doctor:
            out = [r for r in out if r.doctor > 0]
        elif need_lawyer:
            out = [r for r in out if r.lawyer > 0]
        return sorted(out, key=lambda r: r.dropin_time or datetime.min.time())


class FakeCustomersRepo:
    def __init__(self, attendance: FakeAttendanceRepo, languages: FakeLanguagesRepo):
        self._next_id = 1
        self.rows: dict[int, Customer] = {}
        self._attendance = attendance
        self._languages = languages
        attendance.customers = self

    def add(self, name, **kwargs) -> int:
        fields = {"gender": "M", "eligible": True, "need_interpreter": False}
        fields.update(kwargs)
        return self.create(Customer(customer_id=0, name=name, **fields))

    def get_by_id(self, customer_id):
        return self.rows.get(int(customer_id))

    def search(self, *, today, customer_id=None, name=None, gender=None, eligible=None, interpreter=None):
        out = list(self.rows.values())
        if customer_id is not None:
            out = [c for c in out if c.customer_id == customer_id]
        if name:
            out = [c for c in out if name.lower() in c.name.lower()]
        if gender:
            out = [c for c in out if c.gender == gender]
        if eligible is not None:
            out = [c for c in out if c.eligible == eligible]
        if interpreter is not None:
            out = [c for c in out if c.interpreter == interpreter]

        rows = []
        for c in sorted(out, key=lambda c: c.name):
            today_row = self._attendance.get_for_customer_and_date(c.customer_id, today)
            language = self._languages.get_by_id(c.interpreter) if c.interpreter else None
            rows.append(
                CustomerListRow(
                    customer=c,
                    language_name=language.language if language else "-",
                    today_attendance_id=today_row.attendance_id if today_row else None,
                    dropin=today_row.dropin if today_row else False,
                    doctor=today_row.doctor if today_row else ServiceStatus.NOT_NEEDED,
                    lawyer=today_row.lawyer if today_row else ServiceStatus.NOT_NEEDED,
                )
            )
        return rows

    def create(self, customer):
        cid = self._next_id
        self._next_id += 1
        self.rows[cid] = replace(customer, customer_id=cid)
        return cid

    def update(self, customer):
        if customer.customer_id not in self.rows:
            return False
        self.rows[customer.customer_id] = customer
        return True

    def delete(self, customer_id):
        for aid in [a.attendance_id for a in self._attendance.rows.values() if a.customer_id == int(customer_id)]:
            self._attendance.delete(aid)
        return self.rows.pop(int(customer_id), None) is not None

    def list_all(self):
        return sorted(self.rows.values(), key=lambda c: c.customer_id)

    def list_observations(self):
        out = []
        for a in self._attendance.rows.values():
            if a.observation:
                c = self.rows[a.customer_id]
                out.append(
                    {
                        "CustomersID": c.customer_id,
                        "Name": c.name,
                        "DropinDate": a.dropin_date,
                        "Doctor": int(a.doctor),
                        "Lawyer": int(a.lawyer),
                        "Observation": a.observation,
                    }
                )
        return out


class FakeStatisticsRepo:
    def __init__(self, rows=()):
        self.rows = list(rows)
        self.last_args = None

    def list_totals(self, *, start=None, end=None):
        self.last_args = {"start": start, "end": end}
        out = [
            r for r in self.rows
            if (start is None or r.dropin_date >= start) and (end is None or r.dropin_date <= end)
        ]
        return sorted(out, key=lambda r: r.dropin_date, reverse=True)


@pytest.fixture
def fixed_now(monkeypatch):
    """Freeze ``now_local`` wherever it was imported."""
    from src.dropin_system.dropin_system.attendance import controller as attendance_controller
    from src.dropin_system.dropin_system.attendance import service as attendance_service
    from src.dropin_system.dropin_system.customers import service as customer_service
    from src.dropin_system.dropin_system.dropins import service as dropin_service

    for module in (attendance_controller, attendance_service, customer_service, dropin_service):
        monkeypatch.setattr(module, "now_local", lambda: FIXED_NOW)
    return FIXED_NOW


@pytest.fixture
def languages_repo():
    return FakeLanguagesRepo()


@pytest.fixture
def dropins_repo():
    return FakeDropinsRepo()


@pytest.fixture
def attendance_repo():
    return FakeAttendanceRepo()


@pytest.fixture
def customers_repo(attendance_repo, languages_repo):
    return FakeCustomersRepo(attendance_repo, languages_repo)


@pytest.fixture
def statistics_repo():
    return FakeStatisticsRepo()


@pytest.fixture
def users_repo():
    return FakeUsersRepo(
        [
            User(user_id=1, full_name="Admin Demo", username="admin", password_hash=generate_password_hash("admin123")),
            User(
                user_id=2,
                full_name="Old Volunteer",
                username="old",
                password_hash=generate_password_hash("secret"),
                is_active=False,
            ),
        ]
    )


@pytest.fixture
def container(users_repo, customers_repo, attendance_repo, dropins_repo, languages_repo, statistics_repo):
    return wire(
        users_repo=users_repo,
        customers_repo=customers_repo,
        attendance_repo=attendance_repo,
        dropins_repo=dropins_repo,
        languages_repo=languages_repo,
        statistics_repo=statistics_repo,
    )


@pytest.fixture
def app(monkeypatch, container, fixed_now):
    monkeypatch.setenv("YII_ENV", "test")
    from src.dropin_system.dropin_system.main import create_app

    flask_app = create_app(container=container)
    flask_app.config.update(TESTING=True)
    return flask_app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def logged_in(client):
    with client.session_transaction() as sess:
        sess["user_id"] = 1
        sess["name"] = "Admin Demo"
    return client
