from __future__ import annotations

from typing import Any, Mapping, Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, require_columns
from .model import User
from .repository import UserRepository

_COLUMNS = "id, email, full_name, password_hash, created_at"


def _to_user(row: Mapping[str, Any]) -> User:
    require_columns(row, ("id", "email", "password_hash"), table="users")
    return User(
        id=str(row["id"]),
        email=str(row["email"]),
        full_name=row.get("full_name"),
        password_hash=str(row["password_hash"]),
        created_at=row.get("created_at"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE id=%s", (user_id,))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE email=%s", (email,))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def create_user(self, *, user_id: str, email: str, full_name: Optional[str], password_hash: str) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO users(id, email, full_name, password_hash) VALUES(%s,%s,%s,%s)",
                (user_id, email, full_name, password_hash),
            )
            return user_id

