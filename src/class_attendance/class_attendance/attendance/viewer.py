from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from ..core.enums import DayStatus
from ..core.exceptions import AuthenticationError
from ..students.model import Student
from ..students.repository import StudentRepository
from .filters import RosterFilters, filter_options
from .repository import AttendanceRepository


@dataclass(frozen=True)
class DayRecord:
    student: Student
    status: DayStatus


@dataclass(frozen=True)
class DayView:
    day: date
    records: list[DayRecord]
    present: int
    absent: int
    not_marked: int
    options: dict[str, list[str]] = field(default_factory=dict)

    @property
    def grouped(self) -> dict[str, list[DayRecord]]:
        """Records grouped by class, oldest-added first inside each class."""
        groups: dict[str, list[DayRecord]] = {}
        for r in self.records:
            groups.setdefault(r.student.class_name, []).append(r)
        for members in groups.values():
            members.sort(key=lambda r: r.student.created_at)
        return groups


def derive_statuses(students, rows) -> list[DayRecord]:
    """Left join of roster against one date's rows."""
    by_key = {r.student_register_number: r.status for r in rows}
    out = []
    for s in students:
        status = by_key.get(s.register_number)
        out.append(DayRecord(student=s, status=DayStatus(status.value) if status else DayStatus.NOT_MARKED))
    return out


class RecordViewerService:
    """Read-only view of one date's attendance over the roster."""

    def __init__(self, attendance: AttendanceRepository, students: StudentRepository):
        self._attendance = attendance
        self._students = students

    def view_day(self, owner_id: Optional[str], day: date, filters: Optional[RosterFilters] = None) -> DayView:
        if not owner_id:
            raise AuthenticationError("No authenticated user")
        filters = filters or RosterFilters()

        students = self._students.list_for_owner(owner_id)
        rows = self._attendance.list_for_date(owner_id, day)
        records = [r for r in derive_statuses(students, rows) if filters.matches(r.student, r.status)]

        return DayView(
            day=day,
            records=records,
            present=sum(1 for r in records if r.status == DayStatus.PRESENT),
            absent=sum(1 for r in records if r.status == DayStatus.ABSENT),
            not_marked=sum(1 for r in records if r.status == DayStatus.NOT_MARKED),
            options=filter_options(students),
        )
