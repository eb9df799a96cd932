from __future__ import annotations

from flask import Flask, flash, redirect, render_template, request, session, url_for

from ..common.web import safe_local_url
from ..container import Container
from ..core.exceptions import AuthenticationError


def register(app: Flask, container: Container) -> None:
    @app.route("/login", methods=["GET", "POST"], endpoint="login")
    def login():
        if "user_id" in session:
            return redirect(url_for("customers_index"))

        if request.method == "POST":
            username = request.form.get("username", "")
            password = request.form.get("password", "")

            try:
                s_user = container.auth_service.authenticate(username, password)
            except AuthenticationError as e:
                flash(str(e), "danger")
            else:
                session.clear()
                session.permanent = bool(request.form.get("remember_me"))
                session["user_id"] = s_user.user_id
                session["name"] = s_user.full_name
                app.logger.info("user %s logged in", s_user.username)
                flash("Logged in.", "success")
                return redirect(safe_local_url(request.args.get("next")) or url_for("customers_index"))

        return render_template("login.html")

    @app.route("/logout", methods=["GET", "POST"], endpoint="logout")
    def logout():
        session.clear()
        flash("You have been logged out.", "info")
        return redirect(url_for("site_index"))
