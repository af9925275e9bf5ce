from __future__ import annotations

import re
import uuid
from pathlib import Path
from typing import Iterable

import mysql.connector
from werkzeug.security import generate_password_hash

from ..logging_config import get_logger
from .connection import DBConfig

log = get_logger("db")

DEMO_TEACHER_EMAIL = "teacher@example.com"
DEMO_TEACHER_PASSWORD = "teacher123"


def _connect(db_config: dict, *, with_database: bool = True):
    config = DBConfig.from_mapping(db_config)
    return mysql.connector.connect(**config.connect_kwargs(with_database=with_database))


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql usable regardless of the configured DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_comments(sql: str) -> str:
    return re.sub(r"(?m)^\s*--.*$", "", sql)


def iter_sql_statements(sql: str) -> Iterable[str]:
    """Split a script on ';' outside of quoted strings."""
    buf: list[str] = []
    quote = None
    escape = False

    for ch in sql:
        buf.append(ch)
        if escape:
            escape = False
        elif ch == "\\":
            escape = True
        elif quote:
            if ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch == ";":
            stmt = "".join(buf[:-1]).strip()
            buf.clear()
            if stmt:
                yield stmt

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(db_config: dict) -> None:
    database = DBConfig.from_mapping(db_config).database
    conn = _connect(db_config, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    sql = _strip_comments(_strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8")))

    conn = _connect(db_config)
    try:
        cur = conn.cursor()
        for stmt in iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()
    log.info("schema applied", extra={"context": {"path": str(schema_path)}})


def ensure_demo_teacher(db_config: dict) -> None:
    """Create (or reset the password of) the demo teacher account."""
    conn = _connect(db_config)
    try:
        cur = conn.cursor(dictionary=True)
        password_hash = generate_password_hash(DEMO_TEACHER_PASSWORD)
        cur.execute("SELECT id FROM users WHERE email=%s", (DEMO_TEACHER_EMAIL,))
        existing = cur.fetchone()
        if existing:
            cur.execute("UPDATE users SET password_hash=%s WHERE id=%s", (password_hash, existing["id"]))
        else:
            cur.execute(
                "INSERT INTO users (id, email, full_name, password_hash) VALUES (%s, %s, %s, %s)",
                (str(uuid.uuid4()), DEMO_TEACHER_EMAIL, "Demo Teacher", password_hash),
            )
        conn.commit()
    finally:
        conn.close()
    log.info("demo teacher ready", extra={"context": {"email": DEMO_TEACHER_EMAIL}})


def list_tables(db_config: dict) -> list[str]:
    conn = _connect(db_config)
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
