from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask
from flask_cors import CORS

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .common.http import ok, register_error_handlers
from .container import Container, build_container
from .content.controller import register as register_content
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_users, list_tables
from .memberships.controller import register as register_memberships
from .payments.controller import register as register_payments
from .plans.controller import register as register_plans
from .progress.controller import register as register_progress
from .transformations.controller import register as register_transformations
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

_DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"


def _configure_logging(level_name: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level_name).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _prepare_database(settings, db_config: dict) -> None:
    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config, schema_path=_DATABASE_DIR / "schema.sql")
        logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
    if bool(getattr(settings, "AUTO_SEED_DB", False)):
        apply_seed_sql(db_config, seed_path=_DATABASE_DIR / "seed.sql")
        ensure_demo_users(db_config)
        logger.info("Demo seed ready")


def create_app(container: Optional[Container] = None) -> Flask:
    """Build the API.

    Passing a prebuilt `container` skips all database setup (used by tests).
    """

    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    _configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    CORS(app, origins=list(getattr(settings, "CORS_ORIGINS", [])), supports_credentials=True)
    register_error_handlers(app)

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
        _prepare_database(settings, db_config)
        container = build_container(
            db_config=db_config,
            jwt_secret=getattr(settings, "JWT_SECRET"),
            jwt_expires_days=int(getattr(settings, "JWT_EXPIRES_DAYS", 30)),
            demo_mode=bool(getattr(settings, "DEMO_MODE", False)),
            razorpay_key_id=getattr(settings, "RAZORPAY_KEY_ID", ""),
            razorpay_key_secret=getattr(settings, "RAZORPAY_KEY_SECRET", ""),
            currency=getattr(settings, "PAYMENT_CURRENCY", "INR"),
        )

    logger.info("Payments running in %s mode", "demo" if container.gateway.demo else "live")

    @app.get("/api/health", endpoint="health")
    def health():
        return ok({"status": "OK", "message": "Gym API is running"})

    register_users(app, container)
    register_plans(app, container)
    register_memberships(app, container)
    register_attendance(app, container)
    register_content(app, container)
    register_payments(app, container)
    register_progress(app, container)
    register_transformations(app, container)

    return app
