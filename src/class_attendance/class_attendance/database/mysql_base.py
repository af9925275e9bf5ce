from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

import mysql.connector

from ..core.exceptions import DataServiceError
from ..logging_config import get_logger
from .connection import DatabaseConnection

log = get_logger("db")


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Yield ``(conn, cursor)`` inside one transaction.

    Commits on success, rolls back on any error. Driver errors are logged and
    re-raised as DataServiceError; IntegrityError is re-raised untouched so
    repositories can translate constraint violations themselves.
    """
    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as e:
        log.error("connection failed", extra={"context": {"error": str(e)}})
        raise DataServiceError("Could not reach the data service") from e

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.IntegrityError:
        conn.rollback()
        raise
    except mysql.connector.Error as e:
        conn.rollback()
        log.error("query failed", extra={"context": {"error": str(e)}})
        raise DataServiceError("The data service rejected the request") from e
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def placeholders(values: Sequence[Any]) -> str:
    """``%s,%s,...`` for an IN (...) clause."""
    return ",".join(["%s"] * len(values))


def require_columns(row: Mapping[str, Any], columns: Iterable[str], *, table: str) -> None:
    """Validate a loosely-typed row before it is mapped to a dataclass."""
    missing = [c for c in columns if row.get(c) is None]
    if missing:
        log.error("malformed row", extra={"context": {"table": table, "missing": missing}})
        raise DataServiceError(f"Malformed {table} row: missing {', '.join(missing)}")
