"""Daily marking sheet.

A sheet owns everything the marking page edits for one date: the roster, the
committed snapshot loaded from the database, and the working copy the teacher
toggles. Nothing is written until the attendance service saves the sheet.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Mapping, Optional, Sequence

from ..core.enums import AttendanceStatus, DayStatus, SheetState
from ..core.exceptions import ValidationError
from ..students.model import Student
from ..students.service import group_by_class
from .filters import RosterFilters


@dataclass(frozen=True)
class SheetCounts:
    present: int
    absent: int
    marked: int
    total: int


class DailySheet:
    def __init__(self, day: date, students: Sequence[Student]):
        self.day = day
        self.state = SheetState.LOADING
        self._students = list(students)
        self._by_key = {s.register_number: s for s in self._students}
        self._committed: dict[str, AttendanceStatus] = {}
        self._working: dict[str, AttendanceStatus] = {}

    # -- loading ---------------------------------------------------------

    def seed(self, committed: Mapping[str, AttendanceStatus]) -> None:
        """Install the rows loaded for this date as snapshot and working copy."""
        self._committed = {k: AttendanceStatus(v) for k, v in committed.items() if k in self._by_key}
        self._working = dict(self._committed)
        self.state = SheetState.READY

    def restore_draft(self, working: Mapping[str, str]) -> None:
        """Re-apply unsaved edits kept between requests; unknown students are dropped."""
        for key, status in working.items():
            if key in self._by_key:
                self._working[key] = AttendanceStatus(status)

    # -- editing ---------------------------------------------------------

    def _require_ready(self) -> None:
        if self.state != SheetState.READY:
            raise ValidationError(f"Sheet is {self.state.value.lower()}")

    def set_status(self, register_number: str, status: AttendanceStatus | str) -> None:
        self._require_ready()
        if register_number not in self._by_key:
            raise ValidationError(f"Unknown student: {register_number}")
        self._working[register_number] = AttendanceStatus(status)

    def mark_all(self, status: AttendanceStatus | str, filters: Optional[RosterFilters] = None) -> int:
        """Mark every currently visible student; returns how many were touched."""
        self._require_ready()
        status = AttendanceStatus(status)
        visible = self.visible_students(filters)
        for s in visible:
            self._working[s.register_number] = status
        return len(visible)

    # -- reading ---------------------------------------------------------

    @property
    def students(self) -> list[Student]:
        return list(self._students)

    @property
    def committed(self) -> dict[str, AttendanceStatus]:
        return dict(self._committed)

    @property
    def working(self) -> dict[str, AttendanceStatus]:
        return dict(self._working)

    @property
    def is_dirty(self) -> bool:
        return self._working != self._committed

    def status_of(self, register_number: str) -> DayStatus:
        status = self._working.get(register_number)
        return DayStatus(status.value) if status else DayStatus.NOT_MARKED

    def visible_students(self, filters: Optional[RosterFilters] = None) -> list[Student]:
        filters = filters or RosterFilters()
        return [s for s in self._students if filters.matches(s, self.status_of(s.register_number))]

    def grouped(self, filters: Optional[RosterFilters] = None) -> dict[str, list[Student]]:
        return group_by_class(self.visible_students(filters))

    def counts(self) -> SheetCounts:
        values = list(self._working.values())
        present = sum(1 for v in values if v == AttendanceStatus.PRESENT)
        absent = sum(1 for v in values if v == AttendanceStatus.ABSENT)
        return SheetCounts(present=present, absent=absent, marked=len(values), total=len(self._students))

    # -- saving ----------------------------------------------------------

    def begin_save(self) -> dict[str, AttendanceStatus]:
        self._require_ready()
        if not self.is_dirty:
            raise ValidationError("There are no changes to save")
        self.state = SheetState.SAVING
        return dict(self._working)

    def finish_save(self, saved: Mapping[str, AttendanceStatus]) -> None:
        self._committed = dict(saved)
        self.state = SheetState.READY

    def abort_save(self) -> None:
        self.state = SheetState.READY
