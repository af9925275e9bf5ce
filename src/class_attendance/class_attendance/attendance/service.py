from __future__ import annotations

from datetime import date
from typing import Mapping, Optional

from ..core.enums import AttendanceStatus
from ..core.exceptions import AuthenticationError, ConfirmationRequiredError, NotFoundError
from ..logging_config import get_logger
from ..students.repository import StudentRepository
from .model import DayStats
from .repository import AttendanceRepository
from .workflow import DailySheet

log = get_logger("db")


class AttendanceService:
    """Use cases: open a date for marking, save it, clear single marks."""

    def __init__(self, attendance: AttendanceRepository, students: StudentRepository):
        self._attendance = attendance
        self._students = students

    @staticmethod
    def _require_identity(owner_id: Optional[str]) -> str:
        if not owner_id:
            raise AuthenticationError("No authenticated user")
        return owner_id

    def open_day(self, owner_id: Optional[str], day: date, *, draft: Optional[Mapping[str, str]] = None) -> DailySheet:
        """Load roster then that date's rows; optionally re-apply an unsaved draft."""
        owner_id = self._require_identity(owner_id)

        sheet = DailySheet(day, self._students.list_for_owner(owner_id))
        keys = [s.register_number for s in sheet.students]
        rows = self._attendance.list_for_date(owner_id, day, keys)
        sheet.seed({r.student_register_number: r.status for r in rows})

        if draft:
            sheet.restore_draft(draft)
        return sheet

    def save_day(self, owner_id: Optional[str], sheet: DailySheet) -> int:
        """Replace the stored marks for every student in the working copy.

        Not a delta: the whole working copy is written each time, so saving
        the same sheet twice leaves the same rows behind.
        """
        owner_id = self._require_identity(owner_id)
        entries = sheet.begin_save()
        try:
            written = self._attendance.replace_day(owner_id, sheet.day, entries)
        except Exception:
            sheet.abort_save()
            raise
        sheet.finish_save(entries)
        log.info(
            "attendance saved",
            extra={"context": {"owner": owner_id, "date": sheet.day.isoformat(), "rows": written}},
        )
        return written

    def clear_mark(self, owner_id: Optional[str], register_number: str, day: date, *, confirmed: bool = False) -> None:
        """Delete one stored mark, turning the student back to not-marked."""
        if not confirmed:
            raise ConfirmationRequiredError("Please confirm removing this attendance record.")
        owner_id = self._require_identity(owner_id)
        if not self._attendance.delete_mark(owner_id, register_number, day):
            raise NotFoundError("Attendance record not found")

    def day_stats(self, owner_id: Optional[str], day: date) -> DayStats:
        rows = self._attendance.list_for_date(self._require_identity(owner_id), day)
        present = sum(1 for r in rows if r.status == AttendanceStatus.PRESENT)
        absent = sum(1 for r in rows if r.status == AttendanceStatus.ABSENT)
        return DayStats(present=present, absent=absent, total=len(rows))
