from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .common.web import register_error_handlers
from .container import Container, build_container
from .database.bootstrap import apply_schema, ensure_demo_identities, list_tables
from .notifications.controller import register as register_notifications
from .payroll.controller import register as register_payroll
from .requests.controller import register as register_requests
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(container: Optional[Container] = None) -> Flask:
    """Build the Flask app.

    With no ``container`` the MySQL-backed one is built from the settings
    module chosen by APP_ENV; tests pass their own.
    """

    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    _configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

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
            apply_schema(db_config, schema_path=SCHEMA_PATH)
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            ensure_demo_identities(db_config)

        container = build_container(
            db_config=db_config,
            late_grace_minutes=int(getattr(settings, "LATE_GRACE_MINUTES", 5)),
            late_counts_as_present=bool(getattr(settings, "LATE_COUNTS_AS_PRESENT", False)),
            admin_otp_required=bool(getattr(settings, "ADMIN_OTP_REQUIRED", False)),
            otp_ttl_seconds=int(getattr(settings, "OTP_TTL_SECONDS", 300)),
        )

    app.extensions["container"] = container
    register_error_handlers(app)
    register_users(app, container)
    register_attendance(app, container)
    register_payroll(app, container)
    register_requests(app, container)
    register_notifications(app, container)

    return app
