from __future__ import annotations

import importlib
import logging
from datetime import datetime, time, timedelta
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .common.http import register_error_handlers
from .container import Container, build_container
from .core.constants import DEFAULT_TEACHER_CHECKIN_CUTOFF
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_users, list_tables
from .database.connection import DBConfig
from .teacher_attendance.controller import register as register_teacher_attendance
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"


def _parse_cutoff(value) -> time:
    if isinstance(value, time):
        return value
    if not value:
        return DEFAULT_TEACHER_CHECKIN_CUTOFF
    return datetime.strptime(str(value).strip(), "%H:%M").time()


def _configure_logging(level_name: str) -> None:
    level = getattr(logging, (level_name or "INFO").upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
    logging.getLogger().setLevel(level)


def create_app(container: Optional[Container] = None) -> Flask:
    """App factory. Pass a prebuilt container to run on other repositories (tests)."""
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.permanent_session_lifetime = timedelta(days=7)
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["QR_TOKEN"] = getattr(settings, "QR_TOKEN", "SCHOOL_CHECKIN_SYSTEM")
    app.config["HISTORY_PAGE_SIZE"] = int(getattr(settings, "HISTORY_PAGE_SIZE", 50))
    app.config["STUDENT_PAGE_SIZE"] = int(getattr(settings, "STUDENT_PAGE_SIZE", 10))
    app.config["PUBLIC_BASE_URL"] = getattr(settings, "PUBLIC_BASE_URL", "")
    cutoff = _parse_cutoff(getattr(settings, "TEACHER_CHECKIN_CUTOFF", None))

    _configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    logger.info("settings=%s db=%s", settings_module, DBConfig.from_mapping(db_config).describe())

    if container is None:
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=DATABASE_DIR / "seed.sql")
            ensure_demo_users(db_config)
            logger.info("demo seed ready")

        container = build_container(db_config=db_config, qr_token=app.config["QR_TOKEN"], checkin_cutoff=cutoff)

    register_error_handlers(app)
    register_users(app, container)
    register_attendance(app, container)
    register_teacher_attendance(app, container)

    return app
