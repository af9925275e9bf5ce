"""Structured JSON logging configuration.

Every log line is a single JSON object written to stdout, tagged with a
channel (http, db, auth, report) so entries can be filtered per concern.
"""
from __future__ import annotations

import json
import logging
from datetime import datetime, timezone

CHANNELS = ("http", "db", "auth", "report")


class StructuredJsonFormatter(logging.Formatter):
    """Formats a record as one JSON line.

    Keys:
    - timestamp: ISO 8601 timestamp in UTC
    - level: log severity
    - message: human-readable message
    - channel: last component of the logger name
    - context: business context passed via ``extra={"context": {...}}``
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z",
            "level": record.levelname,
            "message": record.getMessage(),
            "channel": record.name.split(".")[-1] if "." in record.name else "app",
            "context": getattr(record, "context", {}) or {},
        }
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, default=str)


def setup_logging(level: str = "INFO") -> None:
    """Configure the package logger and its channel loggers."""
    handler = logging.StreamHandler()
    handler.setFormatter(StructuredJsonFormatter())

    root = logging.getLogger("class_attendance")
    root.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    root.handlers = [handler]
    root.propagate = False

    for channel in CHANNELS:
        logging.getLogger(f"class_attendance.{channel}").setLevel(logging.NOTSET)


def get_logger(channel: str) -> logging.Logger:
    return logging.getLogger(f"class_attendance.{channel}")
