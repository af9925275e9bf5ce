from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """One persisted mark: a student's status on a date."""

    id: Optional[int]
    student_register_number: str
    date: date
    status: AttendanceStatus
    recorded_by: str
    recorded_at: Optional[datetime] = None


@dataclass(frozen=True)
class DayStats:
    present: int
    absent: int
    total: int
