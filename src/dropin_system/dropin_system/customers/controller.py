from __future__ import annotations

from datetime import datetime

from flask import Flask, flash, redirect, render_template, request, send_file, url_for

from ..common.web import login_required, page_arg, pop_parent_url, query_filters, remember_parent_url
from ..container import Container
from ..core.exceptions import NotFoundError, ValidationError
from .service import GENDER_CHOICES, XLSX_MIMETYPE

YES_NO = [("1", "Yes"), ("0", "No")]


def register(app: Flask, container: Container) -> None:
    def _render_form(form: dict, errors: dict, *, title: str, customer=None, is_new: bool):
        return render_template(
            "customers/form.html",
            form=form,
            errors=errors,
            title=title,
            customer=customer,
            is_new=is_new,
            genders=GENDER_CHOICES,
            yes_no=YES_NO,
            languages=container.language_service.options(),
            dropin_dates=container.dropin_service.date_options(),
            active_page="customers_index",
        )

    @app.route("/customers/index", methods=["GET"], endpoint="customers_index")
    @login_required
    def customers_index():
        filters = query_filters("ID", "Name", "Gender", "Eligible", "Interpreter")
        rows = container.customer_service.search(filters)
        return render_template(
            "customers/index.html",
            rows=rows,
            filters=filters,
            genders=GENDER_CHOICES,
            yes_no=YES_NO,
            languages=container.language_service.options(),
            active_page="customers_index",
        )

    @app.route("/customers/view/<int:customer_id>", methods=["GET"], endpoint="customers_view")
    @login_required
    def customers_view(customer_id: int):
        customer = container.customer_service.get(customer_id)
        return render_template(
            "customers/view.html",
            customer=customer,
            language_name=container.customer_service.language_name(customer),
            history=container.attendance_service.history(customer_id, page_arg()),
            active_page="customers_index",
        )

    @app.route("/customers/create", methods=["GET", "POST"], endpoint="customers_create")
    @login_required
    def customers_create():
        form = dict(request.form) if request.method == "POST" else {"Eligible": "1", "NeedInterpreter": "0"}
        errors: dict[str, str] = {}

        if request.method == "POST":
            try:
                container.customer_service.create(
                    form,
                    need_doctor=bool(request.form.get("Doctor")),
                    need_lawyer=bool(request.form.get("Lawyer")),
                )
                flash("Customer saved and checked in for today.", "success")
                return redirect(url_for("customers_index"))
            except ValidationError as e:
                errors = e.errors
                flash(str(e), "danger")
            except Exception:
                app.logger.exception("customer create failed")
                flash("System error while saving the customer.", "danger")

        return _render_form(form, errors, title="Create Customers", is_new=True)

    @app.route("/customers/update/<int:customer_id>", methods=["GET", "POST"], endpoint="customers_update")
    @login_required
    def customers_update(customer_id: int):
        customer = container.customer_service.get(customer_id)
        form = container.customer_service.form_values(customer)
        errors: dict[str, str] = {}

        if request.method == "POST":
            form = dict(request.form)
            try:
                container.customer_service.update(customer_id, form)
                flash("Customer updated.", "success")
                return redirect(pop_parent_url(url_for("customers_view", customer_id=customer_id)))
            except ValidationError as e:
                errors = e.errors
                flash(str(e), "danger")
            except Exception:
                app.logger.exception("customer %s update failed", customer_id)
                flash("System error while saving the customer.", "danger")
        else:
            remember_parent_url()

        return _render_form(
            form,
            errors,
            title=f"Update Customers: {customer.name}",
            customer=customer,
            is_new=False,
        )

    @app.route("/customers/delete/<int:customer_id>", methods=["POST"], endpoint="customers_delete")
    @login_required
    def customers_delete(customer_id: int):
        try:
            container.customer_service.delete(customer_id)
            flash("Customer deleted.", "success")
        except NotFoundError:
            raise
        except Exception:
            app.logger.exception("customer %s delete failed", customer_id)
            flash("System error while deleting the customer.", "danger")
        return redirect(url_for("customers_index"))

    @app.route("/customers/export-all", methods=["GET"], endpoint="customers_export_all")
    @login_required
    def customers_export_all():
        output = container.customer_service.export_all()
        stamp = datetime.now().strftime("%Y%m%d")
        return send_file(
            output,
            download_name=f"customers_{stamp}.xlsx",
            as_attachment=True,
            mimetype=XLSX_MIMETYPE,
        )

    @app.route("/customers/export-dropin-obs", methods=["GET"], endpoint="customers_export_dropin_obs")
    @login_required
    def customers_export_dropin_obs():
        output = container.customer_service.export_dropin_observations()
        stamp = datetime.now().strftime("%Y%m%d")
        return send_file(
            output,
            download_name=f"dropin_observations_{stamp}.xlsx",
            as_attachment=True,
            mimetype=XLSX_MIMETYPE,
        )
