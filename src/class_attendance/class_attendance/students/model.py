from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import StudyYear


@dataclass(frozen=True)
class Student:
    """Roster entry, keyed by its register number.

    ``added_by`` is the owning teacher; only the owner ever sees the row.
    """

    register_number: str
    roll_number: str
    name: str
    class_name: str
    department: Optional[str]
    shift: int
    year: StudyYear
    added_by: str
    created_at: datetime


@dataclass(frozen=True)
class StudentFields:
    """Raw form input for creating or editing a student."""

    name: str = ""
    class_name: str = ""
    roll_number: str = ""
    register_number: str = ""
    department: str = ""
    shift: int | str = 1
    year: str = StudyYear.YEAR1.value
