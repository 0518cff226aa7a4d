from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .combined.controller import register as register_combined
from .container import Container, build_container
from .database.bootstrap import apply_schema, ensure_admin_user, list_tables
from .late_uploads.controller import register as register_late_uploads
from .meetings.controller import register as register_meetings
from .reports.controller import register as register_reports
from .schools.controller import register as register_schools
from .sheets.controller import register as register_sheets
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    """Application factory.

    Tests pass a prebuilt ``container``; in that case the database bootstrap
    is skipped entirely.
    """

    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=logging.DEBUG if app.config["DEBUG"] else logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    if container is None:
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if getattr(settings, "AUTO_INIT_DB", False):
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
        if getattr(settings, "AUTO_SEED_DB", False):
            admin_email = getattr(settings, "ADMIN_EMAIL", "")
            admin_password = getattr(settings, "ADMIN_PASSWORD", "")
            if admin_email and admin_password:
                ensure_admin_user(db_config, email=admin_email, password=admin_password)
            else:
                logger.warning("AUTO_SEED_DB is set but ADMIN_EMAIL/ADMIN_PASSWORD are missing")

        container = build_container(
            db_config=db_config,
            supabase_url=getattr(settings, "SUPABASE_URL", ""),
            supabase_key=getattr(settings, "SUPABASE_SERVICE_KEY", ""),
            sheets_bucket=getattr(settings, "SHEETS_BUCKET"),
            attendance_bucket=getattr(settings, "ATTENDANCE_BUCKET"),
            admin_reset_secret=getattr(settings, "ADMIN_RESET_SECRET", ""),
        )

    register_users(app, container)
    register_schools(app, container)
    register_late_uploads(app, container)
    register_sheets(app, container)
    register_attendance(app, container)
    register_reports(app, container)
    register_combined(app, container)
    register_meetings(app, container)

    return app
