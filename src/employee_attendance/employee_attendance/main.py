from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .attendance.query_controller import register as register_attendance_queries
from .container import Container, build_container
from .database.bootstrap import apply_schema, apply_seed_sql, list_tables

logger = logging.getLogger(__name__)

REPO_ROOT = Path(__file__).resolve().parents[3]


def create_app(
    settings_override: Optional[Mapping] = None,
    *,
    container: Optional[Container] = None,
) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    overrides = dict(settings_override or {})

    def setting(name: str, default=None):
        return overrides.get(name, getattr(settings, name, default))

    logging.basicConfig(
        level=str(setting("LOG_LEVEL", "INFO")).upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app.secret_key = setting("SECRET_KEY")
    app.config["DEBUG"] = bool(setting("DEBUG", False))
    app.config["TESTING"] = bool(setting("TESTING", False))
    db_config = dict(setting("DB_CONFIG", {}))

    if container is None:
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )
        if bool(setting("AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
            logger.info("Schema ready (tables=%s)", len(list_tables(db_config)))
        if bool(setting("AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
            logger.info("Demo seed ready")
        container = build_container(db_config=db_config)

    app.extensions["container"] = container

    register_attendance(app, container)
    register_attendance_queries(app, container)

    @app.errorhandler(Exception)
    def handle_unexpected(error: Exception):
        if isinstance(error, HTTPException):
            return jsonify({"message": error.description}), error.code
        logger.error("Unhandled error", exc_info=error)
        return jsonify({"message": f"An error occurred: {error}"}), 500

    return app
