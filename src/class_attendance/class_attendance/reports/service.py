from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import month_bounds, now_local
from ..core.constants import MISSING_VALUE
from ..core.enums import AttendanceStatus
from ..core.exceptions import AuthenticationError, ValidationError
from ..logging_config import get_logger
from ..students.repository import StudentRepository
from .model import MonthlyReport, StudentSummary

log = get_logger("report")


def attendance_percentage(present: int, working_days: int) -> int:
    """round(present / working_days * 100), halves rounded up; 0 without working days."""
    if working_days <= 0:
        return 0
    return (present * 200 + working_days) // (working_days * 2)


class MonthlyReportService:
    def __init__(self, attendance: AttendanceRepository, students: StudentRepository):
        self._attendance = attendance
        self._students = students

    def build(self, owner_id: Optional[str], *, month: int, year: int, now: Optional[datetime] = None) -> MonthlyReport:
        if not owner_id:
            raise AuthenticationError("No authenticated user")
        start, end = month_bounds(month, year)

        students = self._students.list_for_owner(owner_id, order_by_name=True)
        if not students:
            raise ValidationError("No students found. Please add students first.")

        rows = self._attendance.list_in_range(owner_id, start=start, end=end)

        # Working days are the dates someone actually recorded, not calendar days.
        total_working_days = len({r.date for r in rows})

        present: dict[str, int] = {}
        absent: dict[str, int] = {}
        for r in rows:
            bucket = present if r.status == AttendanceStatus.PRESENT else absent
            bucket[r.student_register_number] = bucket.get(r.student_register_number, 0) + 1

        summaries = [
            StudentSummary(
                register_number=s.register_number or MISSING_VALUE,
                name=s.name,
                department=s.department or MISSING_VALUE,
                class_name=s.class_name,
                total_working_days=total_working_days,
                present_count=present.get(s.register_number, 0),
                absent_count=absent.get(s.register_number, 0),
                attendance_percentage=attendance_percentage(present.get(s.register_number, 0), total_working_days),
            )
            for s in students
        ]
        summaries.sort(key=lambda x: (x.class_name, x.name))

        log.info(
            "monthly report built",
            extra={"context": {"owner": owner_id, "month": month, "year": year, "working_days": total_working_days}},
        )
        return MonthlyReport(
            month=int(month),
            year=int(year),
            start=start,
            end=end,
            total_working_days=total_working_days,
            generated_at=now or now_local(),
            rows=summaries,
        )
