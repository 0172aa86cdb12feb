"""HRM portal package.

Organized by feature modules (users, attendance, requests, groups, devices,
contracts, news) with a thin Flask controller layer over service and
repository layers.
"""
from __future__ import annotations

import importlib
import logging

from dotenv import load_dotenv
from flask import Flask, jsonify
from flask_cors import CORS

from .api.auth import CONTAINER_KEY
from .api.errors import register_error_handlers
from .config import get_settings_module

logger = logging.getLogger(__name__)


def create_app(container=None) -> Flask:
    load_dotenv(override=False)
    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app = Flask(__name__)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["API_PREFIX"] = getattr(settings, "API_PREFIX", "/api").rstrip("/")
    prefix = app.config["API_PREFIX"]

    CORS(app, resources={f"{prefix}/*": {"origins": getattr(settings, "CORS_ORIGINS", [])}})

    if container is None:
        from .container import build_container
        from .database.bootstrap import apply_schema, ensure_admin_user, list_tables

        db_config = dict(getattr(settings, "DB_CONFIG"))
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )
        if getattr(settings, "AUTO_INIT_DB", False):
            apply_schema(db_config)
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
        if getattr(settings, "AUTO_SEED_DB", False):
            if ensure_admin_user(db_config, password=getattr(settings, "INITIAL_ADMIN_PASSWORD")):
                logger.info("Created initial admin account")
        container = build_container(db_config=db_config, settings=settings)

    app.extensions[CONTAINER_KEY] = container

    from .attendance.controller import register as register_attendance
    from .attendance_requests.controller import register as register_attendance_requests
    from .cli import register as register_cli
    from .contracts.controller import register as register_contracts
    from .devices.controller import register as register_devices
    from .groups.controller import register as register_groups
    from .news.controller import register as register_news
    from .requests.controller import register as register_requests
    from .users.controller import register as register_users

    register_users(app, container)
    register_attendance(app, container)
    register_requests(app, container)
    register_attendance_requests(app, container)
    register_groups(app, container)
    register_devices(app, container)
    register_contracts(app, container)
    register_news(app, container)
    register_cli(app, container)
    register_error_handlers(app)

    @app.route(f"{prefix}/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify({"status": "ok"})

    return app
