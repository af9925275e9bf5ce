from __future__ import annotations

import importlib
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .auth.controller import register as register_auth
from .container import Container, build_container
from .database.bootstrap import apply_schema, ensure_demo_teacher, list_tables
from .logging_config import get_logger, setup_logging
from .reports.controller import register as register_reports
from .students.controller import register as register_students

REPO_ROOT = Path(__file__).resolve().parents[3]


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__, template_folder=str(REPO_ROOT / "templates"))

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    log = get_logger("http")

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        if getattr(settings, "AUTO_INIT_DB", False):
            apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
            log.info("schema ready", extra={"context": {"tables": len(list_tables(db_config))}})
        if getattr(settings, "AUTO_SEED_DB", False):
            ensure_demo_teacher(db_config)
        container = build_container(db_config=db_config)
        log.info(
            "app configured",
            extra={"context": {"settings": settings_module, "db": container.conn.description}},
        )

    app.extensions["class_attendance"] = container

    register_auth(app, container)
    register_students(app, container)
    register_attendance(app, container)
    register_reports(app, container)

    return app


def main() -> None:
    app = create_app()
    app.run(
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "5000")),
        debug=bool(app.config.get("DEBUG")),
    )


if __name__ == "__main__":
    main()
