from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, render_template, session

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .common.logging_setup import configure_logging
from .container import Container, build_container
from .core.exceptions import NotFoundError
from .customers.controller import register as register_customers
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_users, list_tables
from .database.connection import DBConfig
from .dropins.controller import register as register_dropins
from .languages.controller import register as register_languages
from .site.controller import register as register_site
from .users.controller import register as register_users

log = logging.getLogger(__name__)

ROOT = Path(__file__).resolve().parents[3]


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__, template_folder=str(ROOT / "templates"))

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["APP_NAME"] = getattr(settings, "APP_NAME", "Drop-in")
    app.config["APP_VERSION"] = getattr(settings, "APP_VERSION", "dev")
    app.config["APP_SUPPORT_EMAIL"] = getattr(settings, "APP_SUPPORT_EMAIL", "")
    app.config["APP_ADMIN_EMAIL"] = getattr(settings, "APP_ADMIN_EMAIL", "")

    configure_logging(
        app,
        debug=app.config["DEBUG"],
        trace_level=int(getattr(settings, "TRACE_LEVEL", 0)),
    )
    log.info("settings=%s db=%s", settings_module, DBConfig.from_dict(db_config).describe())

    if container is None:
        if getattr(settings, "AUTO_INIT_DB", False):
            apply_schema(db_config, schema_path=ROOT / "database" / "schema.sql")
            log.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if getattr(settings, "AUTO_SEED_DB", False):
            apply_seed_sql(db_config, seed_path=ROOT / "database" / "seed.sql")
            ensure_demo_users(db_config)
            log.info("demo seed ready")
        container = build_container(db_config=db_config)

    @app.context_processor
    def inject_globals():
        current_user = None
        if "user_id" in session:
            current_user = {"user_id": session["user_id"], "full_name": session.get("name")}
        return {
            "app_name": app.config["APP_NAME"],
            "app_version": app.config["APP_VERSION"],
            "support_email": app.config["APP_SUPPORT_EMAIL"],
            "admin_email": app.config["APP_ADMIN_EMAIL"],
            "current_user": current_user,
        }

    @app.errorhandler(NotFoundError)
    def handle_not_found(e: NotFoundError):
        return render_template("404.html", message=str(e)), 404

    @app.errorhandler(404)
    def handle_404(e):
        return render_template("404.html", message=NotFoundError().args[0]), 404

    register_site(app, container)
    register_users(app, container)
    register_customers(app, container)
    register_attendance(app, container)
    register_dropins(app, container)
    register_languages(app, container)

    return app
