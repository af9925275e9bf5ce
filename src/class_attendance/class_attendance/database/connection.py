from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

import mysql.connector


@dataclass(frozen=True)
class DBConfig:
    host: str = "localhost"
    port: int = 3306
    user: str = "root"
    password: str = ""
    database: str = "class_attendance"

    @classmethod
    def from_mapping(cls, settings: Mapping[str, Any]) -> "DBConfig":
        """Build from a settings ``DB_CONFIG`` dict; missing keys keep their defaults."""
        defaults = cls()
        return cls(
            host=str(settings.get("host") or defaults.host),
            port=int(settings.get("port") or defaults.port),
            user=str(settings.get("user") or defaults.user),
            password=str(settings.get("password") or ""),
            database=str(settings.get("database") or defaults.database),
        )

    def connect_kwargs(self, *, with_database: bool = True) -> dict[str, Any]:
        kwargs: dict[str, Any] = dict(
            host=self.host,
            port=self.port,
            user=self.user,
            password=self.password,
            use_pure=True,
        )
        if with_database:
            kwargs["database"] = self.database
        return kwargs

    @property
    def description(self) -> str:
        return f"{self.user}@{self.host}:{self.port}/{self.database}"


class DatabaseConnection:
    """Process-wide connection factory.

    Each repository call opens a short-lived connection through :meth:`connect`;
    asking for an instance with a different config replaces the shared one.
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig):
        self.config = config

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if cls._instance is None or cls._instance.config != config:
            cls._instance = DatabaseConnection(config)
        return cls._instance

    @property
    def description(self) -> str:
        return self.config.description

    def connect(self):
        return mysql.connector.connect(**self.config.connect_kwargs())
