from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from flask import Flask, flash, redirect, render_template, request, url_for

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.web import login_required, page_arg, pop_parent_url, query_filters, remember_parent_url
from ..container import Container
from ..core.constants import QUEUE_REFRESH_SECONDS, TIME_FORMAT
from ..core.exceptions import NotFoundError, ValidationError
from .model import AttendanceRecord
from .service import STATUS_LABELS

NO_DATA_HTML = '<div class="alert alert-danger">No data found</div>'


def _record_form(record: AttendanceRecord) -> dict[str, str]:
    return {
        "CustomersID": str(record.customer_id),
        "DropinDate": record.dropin_date.isoformat(),
        "DropinTime": record.dropin_time.strftime(TIME_FORMAT) if record.dropin_time else "",
        "Dropin": "1" if record.dropin else "0",
        "Doctor": str(int(record.doctor)),
        "Lawyer": str(int(record.lawyer)),
        "Observation": record.observation or "",
    }


def register(app: Flask, container: Container) -> None:
    def _parse_date_arg(name: str) -> Optional[date]:
        value = request.args.get(name)
        if not value:
            return None
        try:
            return parse_iso_date(value)
        except ValueError:
            flash(f"Ignoring invalid {name} date: {value}", "warning")
            return None

    def _render_form(form: dict, errors: dict, title: str):
        return render_template(
            "attendance/form.html",
            form=form,
            errors=errors,
            title=title,
            status_labels=STATUS_LABELS,
            active_page="attendance_index",
        )

    # --- maintenance ----------------------------------------------------------

    @app.route("/attendance/index", methods=["GET"], endpoint="attendance_index")
    @login_required
    def attendance_index():
        filters = query_filters("ID", "CustomersID", "customerName", "Doctor", "Lawyer", "Dropin", "DropinDate", "Observation")
        sort = request.args.get("sort")
        records = container.attendance_service.search(filters, sort=sort)
        return render_template(
            "attendance/index.html",
            records=records,
            filters=filters,
            sort=sort or "",
            status_labels=STATUS_LABELS,
            active_page="attendance_index",
        )

    @app.route("/attendance/view/<int:attendance_id>", methods=["GET"], endpoint="attendance_view")
    @login_required
    def attendance_view(attendance_id: int):
        record = container.attendance_service.get(attendance_id)
        return render_template("attendance/view.html", record=record, active_page="attendance_index")

    @app.route("/attendance/create", methods=["GET", "POST"], endpoint="attendance_create")
    @login_required
    def attendance_create():
        now = now_local()
        form = (
            dict(request.form)
            if request.method == "POST"
            else {
                "CustomersID": request.args.get("customer_id", ""),
                "DropinDate": now.date().isoformat(),
                "DropinTime": now.strftime(TIME_FORMAT),
                "Dropin": "1",
                "Doctor": "0",
                "Lawyer": "0",
            }
        )
        errors: dict[str, str] = {}

        if request.method == "POST":
            try:
                attendance_id = container.attendance_service.create(form)
                flash("Attendance saved.", "success")
                return redirect(url_for("attendance_view", attendance_id=attendance_id))
            except ValidationError as e:
                errors = e.errors
                flash(str(e), "danger")
            except Exception:
                app.logger.exception("attendance create failed")
                flash("System error while saving the attendance.", "danger")

        return _render_form(form, errors, "Create Attendance")

    @app.route("/attendance/update/<int:attendance_id>", methods=["GET", "POST"], endpoint="attendance_update")
    @login_required
    def attendance_update(attendance_id: int):
        record = container.attendance_service.get(attendance_id)
        form = _record_form(record)
        errors: dict[str, str] = {}

        if request.method == "POST":
            form = dict(request.form)
            try:
                container.attendance_service.update(attendance_id, form)
                flash("Attendance updated.", "success")
                return redirect(url_for("attendance_view", attendance_id=attendance_id))
            except ValidationError as e:
                errors = e.errors
                flash(str(e), "danger")
            except Exception:
                app.logger.exception("attendance %s update failed", attendance_id)
                flash("System error while saving the attendance.", "danger")

        return _render_form(form, errors, f"Update Attendance: {attendance_id}")

    @app.route("/attendance/delete/<int:attendance_id>", methods=["POST"], endpoint="attendance_delete")
    @login_required
    def attendance_delete(attendance_id: int):
        try:
            container.attendance_service.delete(attendance_id)
            flash("Attendance deleted.", "success")
        except NotFoundError:
            raise
        except Exception:
            app.logger.exception("attendance %s delete failed", attendance_id)
            flash("System error while deleting the attendance.", "danger")
        return redirect(url_for("customers_index"))

    # --- today's check-in -----------------------------------------------------

    @app.route("/attendance/today/<int:customer_id>", methods=["GET", "POST"], endpoint="attendance_today")
    @login_required
    def attendance_today(customer_id: int):
        customer = container.customer_service.get(customer_id)
        errors: dict[str, str] = {}

        if request.method == "POST":
            try:
                container.attendance_service.check_in_today(customer_id, request.form)
                flash(f"{customer.name} checked in.", "success")
                return redirect(pop_parent_url(url_for("customers_index")))
            except ValidationError as e:
                errors = e.errors
                flash(str(e), "danger")
            except Exception:
                app.logger.exception("check-in for customer %s failed", customer_id)
                flash("System error while saving the attendance.", "danger")
        else:
            remember_parent_url()

        record = container.attendance_service.today_draft(customer_id)
        form = dict(request.form) if request.method == "POST" else _record_form(record)
        return render_template(
            "attendance/today.html",
            customer=customer,
            record=record,
            form=form,
            errors=errors,
            status_labels=STATUS_LABELS,
            active_page="customers_index",
        )

    @app.route("/attendance/doctor/<int:attendance_id>", methods=["GET", "POST"], endpoint="attendance_doctor")
    @login_required
    def attendance_doctor(attendance_id: int):
        return _status_form(attendance_id, who="doctor")

    @app.route("/attendance/lawyer/<int:attendance_id>", methods=["GET", "POST"], endpoint="attendance_lawyer")
    @login_required
    def attendance_lawyer(attendance_id: int):
        return _status_form(attendance_id, who="lawyer")

    def _status_form(attendance_id: int, *, who: str):
        record = container.attendance_service.get(attendance_id)
        form = _record_form(record)
        errors: dict[str, str] = {}

        if request.method == "POST":
            form = dict(request.form)
            update = (
                container.attendance_service.update_doctor
                if who == "doctor"
                else container.attendance_service.update_lawyer
            )
            try:
                update(attendance_id, form)
                flash(f"{who.capitalize()} status updated.", "success")
                return redirect(url_for(f"{who}_index"))
            except ValidationError as e:
                errors = e.errors
                flash(str(e), "danger")
            except Exception:
                app.logger.exception("%s update of attendance %s failed", who, attendance_id)
                flash("System error while saving the attendance.", "danger")

        return render_template(
            "attendance/status_form.html",
            record=record,
            form=form,
            errors=errors,
            who=who,
            status_labels=STATUS_LABELS[who],
            active_page=f"{who}_index",
        )

    @app.route("/attendance/detail", methods=["POST"], endpoint="attendance_detail")
    @login_required
    def attendance_detail():
        key = request.form.get("expandRowKey", "").strip()
        if not key.isdigit():
            return NO_DATA_HTML
        history = container.attendance_service.history(int(key), page_arg())
        return render_template("attendance/_details.html", history=history, customer_id=int(key))

    # --- queues ---------------------------------------------------------------

    @app.route("/doctor/index", methods=["GET"], endpoint="doctor_index")
    @login_required
    def doctor_index():
        return render_template(
            "doctor/index.html",
            records=container.attendance_service.doctor_list(),
            today=now_local().date(),
            active_page="doctor_index",
        )

    @app.route("/lawyer/index", methods=["GET"], endpoint="lawyer_index")
    @login_required
    def lawyer_index():
        return render_template(
            "lawyer/index.html",
            records=container.attendance_service.lawyer_list(),
            today=now_local().date(),
            active_page="lawyer_index",
        )

    @app.route("/attendance/queue", methods=["GET"], endpoint="attendance_queue")
    @login_required
    def attendance_queue():
        return render_template(
            "attendance/queue.html",
            records=container.attendance_service.queue(),
            today=now_local().date(),
            refresh_seconds=QUEUE_REFRESH_SECONDS,
            active_page="attendance_queue",
        )

    # --- statistics -----------------------------------------------------------

    @app.route("/attendance/statistics", methods=["GET"], endpoint="attendance_statistics")
    @login_required
    def attendance_statistics():
        start = _parse_date_arg("start")
        end = _parse_date_arg("end")
        report = container.statistics_service.build_report(start=start, end=end)
        return render_template(
            "attendance/statistics.html",
            report=report,
            start=start.isoformat() if start else "",
            end=end.isoformat() if end else "",
            active_page="attendance_statistics",
        )

    @app.route("/attendance/statistics.csv", methods=["GET"], endpoint="attendance_statistics_csv")
    @login_required
    def attendance_statistics_csv():
        start = _parse_date_arg("start")
        end = _parse_date_arg("end")
        report = container.statistics_service.build_report(start=start, end=end)
        filename = f"statistics_{datetime.now().strftime('%Y%m%d')}.csv"
        return app.response_class(
            container.statistics_service.to_csv(report),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )
