from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Mapping, Optional

from ..core.constants import FILTER_ALL
from ..core.enums import DayStatus
from ..students.model import Student


def _norm(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    if not value or value == FILTER_ALL:
        return None
    return value


@dataclass(frozen=True)
class RosterFilters:
    """Independent roster filters, composed with AND. ``None`` means no filter."""

    class_name: Optional[str] = None
    department: Optional[str] = None
    shift: Optional[str] = None
    year: Optional[str] = None
    status: Optional[str] = None

    @classmethod
    def from_mapping(cls, args: Mapping[str, str]) -> "RosterFilters":
        return cls(
            class_name=_norm(args.get("class")),
            department=_norm(args.get("department")),
            shift=_norm(args.get("shift")),
            year=_norm(args.get("year")),
            status=_norm(args.get("status")),
        )

    @property
    def active(self) -> bool:
        return any(v is not None for v in asdict(self).values())

    def as_query(self) -> dict[str, str]:
        """Inverse of :meth:`from_mapping`, for building links."""
        return {
            "class": self.class_name or FILTER_ALL,
            "department": self.department or FILTER_ALL,
            "shift": self.shift or FILTER_ALL,
            "year": self.year or FILTER_ALL,
            "status": self.status or FILTER_ALL,
        }

    def matches(self, student: Student, status: DayStatus) -> bool:
        if self.class_name is not None and student.class_name != self.class_name:
            return False
        if self.department is not None and (student.department or "") != self.department:
            return False
        if self.shift is not None and str(student.shift) != self.shift:
            return False
        if self.year is not None and student.year.value != self.year:
            return False
        if self.status is not None and status.value != self.status:
            return False
        return True


def filter_options(students) -> dict[str, list[str]]:
    """Distinct classes and departments for the filter dropdowns, in roster order."""
    classes: list[str] = []
    departments: list[str] = []
    for s in students:
        if s.class_name not in classes:
            classes.append(s.class_name)
        if s.department and s.department not in departments:
            departments.append(s.department)
    return {"classes": classes, "departments": departments}
