from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime

from ..core.constants import MONTH_NAMES


@dataclass(frozen=True)
class StudentSummary:
    register_number: str
    name: str
    department: str
    class_name: str
    total_working_days: int
    present_count: int
    absent_count: int
    attendance_percentage: int


@dataclass(frozen=True)
class MonthlyReport:
    month: int
    year: int
    start: date
    end: date
    total_working_days: int
    generated_at: datetime
    rows: list[StudentSummary]

    @property
    def month_name(self) -> str:
        return MONTH_NAMES[self.month - 1]

    @property
    def title(self) -> str:
        return f"Monthly Attendance Report - {self.month_name} {self.year}"

    def filename(self, ext: str = "pdf") -> str:
        return f"attendance_report_{self.month_name}_{self.year}.{ext}"
