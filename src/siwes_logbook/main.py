from __future__ import annotations

import importlib
import logging

from dotenv import load_dotenv
from flask import Flask
from werkzeug.exceptions import HTTPException

from .common.http import error_response
from .common.logging_config import setup_logging
from .config import get_settings_module
from .core.exceptions import DomainError
from .database.bootstrap import apply_schema, list_tables

from .container import Container, build_container
from .attendance.controller import register as register_attendance
from .weeks.controller import register as register_weeks
from .grading.controller import register as register_grading

logger = logging.getLogger(__name__)


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        if e.http_status >= 500:
            logger.warning("%s: %s", e.code, e.message)
        return error_response(e.code, e.message or e.code, e.http_status)

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        code = (e.name or "http_error").lower().replace(" ", "_")
        return error_response(code, e.description or e.name, e.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        logger.exception("Unhandled error")
        return error_response("internal_error", "Internal server error", 500)


def create_app(container: Container | None = None) -> Flask:
    """Build the Flask app.

    Tests pass a ready container; otherwise one is wired from the settings
    module picked by APP_ENV.
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config)
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))

        container = build_container(
            db_config=db_config,
            two_tier_approval=bool(getattr(settings, "TWO_TIER_APPROVAL", True)),
            current_session_id=getattr(settings, "CURRENT_SESSION_ID", None),
            abort_on_degraded_read=bool(getattr(settings, "GRADING_ABORT_ON_DEGRADED_READ", True)),
        )

    _register_error_handlers(app)
    register_attendance(app, container)
    register_weeks(app, container)
    register_grading(app, container)

    return app
