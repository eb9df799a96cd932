from __future__ import annotations

from src.dropin_system.dropin_system.core.enums import ServiceStatus


def test_home_is_public(client):
    resp = client.get("/")

    assert resp.status_code == 200
    assert b"Login" in resp.data


def test_protected_pages_redirect_to_login(client):
    resp = client.get("/customers/index")

    assert resp.status_code == 302
    location = resp.headers["Location"]
    assert location.split("?")[0].endswith("/login")
    assert "next=" in location


def test_login_and_logout(client):
    resp = client.post("/login", data={"username": "admin", "password": "admin123"})
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/customers/index")
    with client.session_transaction() as sess:
        assert sess["user_id"] == 1

    resp = client.post("/logout")
    assert resp.status_code == 302
    with client.session_transaction() as sess:
        assert "user_id" not in sess


def test_login_failure_stays_on_form(client):
    resp = client.post("/login", data={"username": "admin", "password": "nope"})

    assert resp.status_code == 200
    assert b"Incorrect username or password." in resp.data


def test_login_ignores_external_next(client):
    resp = client.post("/login?next=//evil.example", data={"username": "admin", "password": "admin123"})

    assert resp.headers["Location"].endswith("/customers/index")


def test_unknown_customer_is_404(logged_in):
    resp = logged_in.get("/customers/view/999")

    assert resp.status_code == 404
    assert b"The requested page does not exist." in resp.data


def test_create_customer_with_doctor_checks_in(logged_in, customers_repo, attendance_repo, fixed_now):
    resp = logged_in.post(
        "/customers/create",
        data={"Name": "Lena", "Gender": "F", "Eligible": "1", "NeedInterpreter": "0", "Doctor": "1"},
    )

    assert resp.status_code == 302
    cid = next(iter(customers_repo.rows))
    record = attendance_repo.get_for_customer_and_date(cid, fixed_now.date())
    assert record.doctor == ServiceStatus.WAITING


def test_create_customer_invalid_rerenders_form(logged_in, customers_repo):
    resp = logged_in.post("/customers/create", data={"Name": ""})

    assert resp.status_code == 200
    assert b"Name cannot be blank." in resp.data
    assert customers_repo.rows == {}


def test_customers_index_lists_today(logged_in, customers_repo, container, fixed_now):
    cid = customers_repo.add("Maria")
    container.attendance_service.check_in_today(cid, {"Lawyer": "1"}, now=fixed_now)

    resp = logged_in.get("/customers/index")

    assert resp.status_code == 200
    assert b"Maria" in resp.data
    assert b"name-m-z" in resp.data
    assert b"Waiting for Lawyer" in resp.data


def test_today_redirects_to_parent_url(logged_in, customers_repo, attendance_repo, fixed_now):
    cid = customers_repo.add("Abe")

    resp = logged_in.get(f"/attendance/today/{cid}", headers={"Referer": "http://localhost/doctor/index"})
    assert resp.status_code == 200

    resp = logged_in.post(f"/attendance/today/{cid}", data={"Dropin": "1", "Doctor": "1", "Lawyer": "0"})
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/doctor/index")
    assert len(attendance_repo.rows) == 1

    # parent URL is consumed; next save falls back to the customers list
    resp = logged_in.post(f"/attendance/today/{cid}", data={"Doctor": "2"})
    assert resp.headers["Location"].endswith("/customers/index")
    assert len(attendance_repo.rows) == 1


def test_doctor_edit_redirects_to_doctor_list(logged_in, customers_repo, container, fixed_now):
    cid = customers_repo.add("Abe")
    record = container.attendance_service.check_in_today(cid, {"Doctor": "1"}, now=fixed_now)

    resp = logged_in.post(f"/attendance/doctor/{record.attendance_id}", data={"Doctor": "2", "Observation": "ok"})

    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/doctor/index")


def test_doctor_and_lawyer_pages(logged_in, customers_repo, container, fixed_now):
    cid = customers_repo.add("Abe")
    container.attendance_service.check_in_today(cid, {"Doctor": "1"}, now=fixed_now)

    doctor = logged_in.get("/doctor/index")
    lawyer = logged_in.get("/lawyer/index")
    queue = logged_in.get("/attendance/queue")

    assert b"Abe" in doctor.data
    assert b"Abe" not in lawyer.data
    assert b"Abe" in queue.data
    assert b'http-equiv="refresh" content="5"' in queue.data


def test_detail_without_key(logged_in):
    resp = logged_in.post("/attendance/detail", data={})

    assert resp.data == b'<div class="alert alert-danger">No data found</div>'


def test_detail_with_history(logged_in, customers_repo, container):
    cid = customers_repo.add("Abe")
    container.attendance_service.create({"CustomersID": str(cid), "DropinDate": "2026-02-14", "Observation": "coat"})

    resp = logged_in.post("/attendance/detail", data={"expandRowKey": str(cid)})

    assert b"14 Feb 2026" in resp.data
    assert b"coat" in resp.data


def test_attendance_delete_goes_to_customers(logged_in, customers_repo, container, attendance_repo, fixed_now):
    cid = customers_repo.add("Abe")
    record = container.attendance_service.check_in_today(cid, {}, now=fixed_now)

    resp = logged_in.post(f"/attendance/delete/{record.attendance_id}")

    assert resp.headers["Location"].endswith("/customers/index")
    assert attendance_repo.rows == {}


def test_statistics_csv(logged_in):
    resp = logged_in.get("/attendance/statistics.csv")

    assert resp.status_code == 200
    assert resp.mimetype == "text/csv"
    assert resp.data.decode("utf-8-sig").startswith("DropinDate,MainEntrance,A-L,M-Z")


def test_export_all_is_xlsx(logged_in, customers_repo):
    customers_repo.add("Abe")

    resp = logged_in.get("/customers/export-all")

    assert resp.status_code == 200
    assert resp.mimetype == "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    assert resp.data[:2] == b"PK"


def test_languages_and_dropins_crud(logged_in, languages_repo, dropins_repo):
    assert logged_in.post("/languages/create", data={"Language": "Somali", "ShortName": "so"}).status_code == 302
    assert logged_in.post("/dropin/create", data={"DropinDate": "2026-03-07", "MainEntrance": "ALL"}).status_code == 302

    assert b"Somali" in logged_in.get("/languages/index").data
    assert b"07 Mar 2026" in logged_in.get("/dropin/index").data

    lid = next(iter(languages_repo.rows))
    assert logged_in.post(f"/languages/delete/{lid}").status_code == 302
    assert languages_repo.rows == {}
    assert logged_in.post("/languages/delete/99").status_code == 404


def test_today_ignores_offsite_referrer(logged_in, customers_repo, attendance_repo, fixed_now):
    cid = customers_repo.add("Abe")

    logged_in.get(f"/attendance/today/{cid}", headers={"Referer": "https://evil.example/phish"})
    resp = logged_in.post(f"/attendance/today/{cid}", data={"Dropin": "1"})

    assert resp.status_code == 302
    assert "evil.example" not in resp.headers["Location"]
    assert resp.headers["Location"].endswith("/customers/index")
    assert len(attendance_repo.rows) == 1


def test_today_keeps_query_string_of_local_referrer(logged_in, customers_repo, fixed_now):
    cid = customers_repo.add("Abe")

    logged_in.get(f"/attendance/today/{cid}", headers={"Referer": "http://localhost/customers/index?Name=Ab"})
    resp = logged_in.post(f"/attendance/today/{cid}", data={"Dropin": "1"})

    assert resp.headers["Location"].endswith("/customers/index?Name=Ab")


def test_customer_update_returns_to_parent_url(logged_in, customers_repo):
    cid = customers_repo.add("Maria")
    form = {"Name": "Maria Lopez", "Gender": "F", "Eligible": "1", "NeedInterpreter": "0"}

    resp = logged_in.get(f"/customers/update/{cid}", headers={"Referer": "http://localhost/customers/index?Gender=F"})
    assert resp.status_code == 200

    resp = logged_in.post(f"/customers/update/{cid}", data=form)
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/customers/index?Gender=F")
    assert customers_repo.get_by_id(cid).name == "Maria Lopez"

    resp = logged_in.post(f"/customers/update/{cid}", data=form)
    assert resp.headers["Location"].endswith(f"/customers/view/{cid}")
