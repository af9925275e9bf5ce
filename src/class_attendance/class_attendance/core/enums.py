from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Status persisted for a (student, date) pair."""

    PRESENT = "present"
    ABSENT = "absent"


class DayStatus(str, Enum):
    """Status shown in the record viewer.

    NOT_MARKED is never stored: it means the student has no row for the date.
    """

    PRESENT = "present"
    ABSENT = "absent"
    NOT_MARKED = "not_marked"


class StudyYear(str, Enum):
    YEAR1 = "year1"
    YEAR2 = "year2"
    YEAR3 = "year3"


class AuthEvent(str, Enum):
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"


class SheetState(str, Enum):
    """Lifecycle of a daily marking sheet."""

    LOADING = "LOADING"
    READY = "READY"
    SAVING = "SAVING"
