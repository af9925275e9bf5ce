"""Create the configured database, apply schema.sql, optionally seed the demo teacher.

Usage: python scripts/init_db.py [--seed]
"""
from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.class_attendance.class_attendance.database.bootstrap import (
    DEMO_TEACHER_EMAIL,
    apply_schema,
    ensure_demo_teacher,
    list_tables,
)
from src.class_attendance.class_attendance.database.connection import DBConfig
from src.class_attendance.class_attendance.logging_config import setup_logging


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--seed", action="store_true", help=f"create or reset {DEMO_TEACHER_EMAIL}")
    args = parser.parse_args(argv)

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    db_config = dict(settings.DB_CONFIG)

    apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
    if args.seed:
        ensure_demo_teacher(db_config)

    tables = list_tables(db_config)
    print(f"OK: {DBConfig.from_mapping(db_config).description} (tables={len(tables)}: {', '.join(sorted(tables))})")


if __name__ == "__main__":
    main()
