from __future__ import annotations

from flask import Flask, render_template, session

from ..common.web import login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/", methods=["GET"], endpoint="site_index")
    def site_index():
        summary = None
        if "user_id" in session:
            summary = {
                "doctor": len(container.attendance_service.doctor_list()),
                "lawyer": len(container.attendance_service.lawyer_list()),
            }
        return render_template("site/index.html", summary=summary, active_page="site_index")

    @app.route("/about", methods=["GET"], endpoint="site_about")
    @login_required
    def site_about():
        return render_template("site/about.html", active_page="site_about")
