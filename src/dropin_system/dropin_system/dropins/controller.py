from __future__ import annotations

from flask import Flask, flash, redirect, render_template, request, url_for

from ..common.web import login_required, query_filters
from ..container import Container
from ..core.exceptions import NotFoundError, ValidationError
from .service import ENTRANCE_CHOICES


def register(app: Flask, container: Container) -> None:
    def _render_form(form: dict, errors: dict, title: str):
        return render_template(
            "dropins/form.html",
            form=form,
            errors=errors,
            title=title,
            entrances=ENTRANCE_CHOICES,
            active_page="dropin_index",
        )

    @app.route("/dropin/index", methods=["GET"], endpoint="dropin_index")
    @login_required
    def dropin_index():
        filters = query_filters("ID", "DropinDate", "MainEntrance")
        dropins = container.dropin_service.search(filters)
        return render_template(
            "dropins/index.html",
            dropins=dropins,
            filters=filters,
            entrances=ENTRANCE_CHOICES,
            active_page="dropin_index",
        )

    @app.route("/dropin/create", methods=["GET", "POST"], endpoint="dropin_create")
    @login_required
    def dropin_create():
        form = dict(request.form) if request.method == "POST" else {}
        errors: dict[str, str] = {}

        if request.method == "POST":
            try:
                container.dropin_service.create(form)
                flash("Drop-in saved.", "success")
                return redirect(url_for("dropin_index"))
            except ValidationError as e:
                errors = e.errors
                flash(str(e), "danger")
            except Exception:
                app.logger.exception("drop-in create failed")
                flash("System error while saving the drop-in.", "danger")

        return _render_form(form, errors, "Create Dropin")

    @app.route("/dropin/update/<int:dropin_id>", methods=["GET", "POST"], endpoint="dropin_update")
    @login_required
    def dropin_update(dropin_id: int):
        dropin = container.dropin_service.get(dropin_id)
        form = {"DropinDate": dropin.dropin_date.isoformat(), "MainEntrance": dropin.main_entrance or ""}
        errors: dict[str, str] = {}

        if request.method == "POST":
            form = dict(request.form)
            try:
                container.dropin_service.update(dropin_id, form)
                flash("Drop-in updated.", "success")
                return redirect(url_for("dropin_index"))
            except ValidationError as e:
                errors = e.errors
                flash(str(e), "danger")
            except Exception:
                app.logger.exception("drop-in %s update failed", dropin_id)
                flash("System error while saving the drop-in.", "danger")

        return _render_form(form, errors, f"Update Dropin: {dropin.formatted_date}")

    @app.route("/dropin/delete/<int:dropin_id>", methods=["POST"], endpoint="dropin_delete")
    @login_required
    def dropin_delete(dropin_id: int):
        try:
            container.dropin_service.delete(dropin_id)
            flash("Drop-in deleted.", "success")
        except NotFoundError:
            raise
        except Exception:
            app.logger.exception("drop-in %s delete failed", dropin_id)
            flash("System error while deleting the drop-in.", "danger")
        return redirect(url_for("dropin_index"))
