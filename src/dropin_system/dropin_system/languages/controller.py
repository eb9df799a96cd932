from __future__ import annotations

from flask import Flask, flash, redirect, render_template, request, url_for

from ..common.web import login_required, query_filters
from ..container import Container
from ..core.exceptions import NotFoundError, ValidationError


def register(app: Flask, container: Container) -> None:
    @app.route("/languages/index", methods=["GET"], endpoint="languages_index")
    @login_required
    def languages_index():
        filters = query_filters("ID", "Language", "ShortName")
        languages = container.language_service.search(filters)
        return render_template(
            "languages/index.html",
            languages=languages,
            filters=filters,
            active_page="languages_index",
        )

    @app.route("/languages/create", methods=["GET", "POST"], endpoint="languages_create")
    @login_required
    def languages_create():
        form = dict(request.form) if request.method == "POST" else {}
        errors: dict[str, str] = {}

        if request.method == "POST":
            try:
                container.language_service.create(form)
                flash("Language saved.", "success")
                return redirect(url_for("languages_index"))
            except ValidationError as e:
                errors = e.errors
                flash(str(e), "danger")
            except Exception:
                app.logger.exception("language create failed")
                flash("System error while saving the language.", "danger")

        return render_template(
            "languages/form.html",
            form=form,
            errors=errors,
            title="Create Languages",
            active_page="languages_index",
        )

    @app.route("/languages/update/<int:language_id>", methods=["GET", "POST"], endpoint="languages_update")
    @login_required
    def languages_update(language_id: int):
        language = container.language_service.get(language_id)
        form = {"Language": language.language, "ShortName": language.short_name or ""}
        errors: dict[str, str] = {}

        if request.method == "POST":
            form = dict(request.form)
            try:
                container.language_service.update(language_id, form)
                flash("Language updated.", "success")
                return redirect(url_for("languages_index"))
            except ValidationError as e:
                errors = e.errors
                flash(str(e), "danger")
            except Exception:
                app.logger.exception("language %s update failed", language_id)
                flash("System error while saving the language.", "danger")

        return render_template(
            "languages/form.html",
            form=form,
            errors=errors,
            title=f"Update Languages: {language.language}",
            language=language,
            active_page="languages_index",
        )

    @app.route("/languages/delete/<int:language_id>", methods=["POST"], endpoint="languages_delete")
    @login_required
    def languages_delete(language_id: int):
        try:
            container.language_service.delete(language_id)
            flash("Language deleted.", "success")
        except NotFoundError:
            raise
        except Exception:
            app.logger.exception("language %s delete failed", language_id)
            flash("System error while deleting the language.", "danger")
        return redirect(url_for("languages_index"))
