from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from ..auth.repository import UserRepository
from ..common.validators import require_choice, require_non_empty
from ..core.constants import ALLOWED_SHIFTS
from ..core.enums import StudyYear
from ..core.exceptions import (
    AuthenticationError,
    ConfigurationError,
    ConfirmationRequiredError,
    NotFoundError,
    ValidationError,
)
from ..logging_config import get_logger
from .model import Student, StudentFields
from .repository import StudentRepository

log = get_logger("db")


@dataclass(frozen=True)
class CleanStudent:
    name: str
    class_name: str
    roll_number: str
    register_number: str
    department: str
    shift: int
    year: StudyYear


def clean_student_fields(fields: StudentFields, *, require_key: bool = True) -> CleanStudent:
    """Validate form input. Raises ValidationError on the first bad field."""
    name = require_non_empty(fields.name, "Name")
    class_name = require_non_empty(fields.class_name, "Class")
    roll_number = require_non_empty(fields.roll_number, "Roll number")
    register_number = (
        require_non_empty(fields.register_number, "Register number")
        if require_key
        else (fields.register_number or "").strip()
    )
    department = require_non_empty(fields.department, "Department")
    year_s = require_non_empty(fields.year, "Year")

    try:
        shift = int(fields.shift)
    except (TypeError, ValueError):
        raise ValidationError("Shift must be 1 or 2")
    require_choice(shift, "Shift", ALLOWED_SHIFTS)
    require_choice(year_s, "Year", [y.value for y in StudyYear])

    return CleanStudent(
        name=name,
        class_name=class_name,
        roll_number=roll_number,
        register_number=register_number,
        department=department,
        shift=shift,
        year=StudyYear(year_s),
    )


def group_by_class(students: Iterable[Student]) -> dict[str, list[Student]]:
    """Group students by class, oldest-added first inside each class.

    Classes keep the order in which they first appear in ``students``.
    """
    groups: dict[str, list[Student]] = {}
    for s in students:
        groups.setdefault(s.class_name, []).append(s)
    for members in groups.values():
        members.sort(key=lambda s: s.created_at)
    return groups


class RosterService:
    """Use cases: maintain the signed-in teacher's student roster."""

    def __init__(self, students: StudentRepository, users: UserRepository):
        self._students = students
        self._users = users

    @staticmethod
    def _require_identity(owner_id: Optional[str]) -> str:
        if not owner_id:
            raise AuthenticationError("No authenticated user")
        return owner_id

    def add_student(self, owner_id: Optional[str], fields: StudentFields) -> str:
        clean = clean_student_fields(fields)
        owner_id = self._require_identity(owner_id)

        if not self._users.get_by_id(owner_id):
            raise ConfigurationError("Your user profile is missing. Contact the administrator.")

        register_number = self._students.create(
            owner_id=owner_id,
            register_number=clean.register_number,
            roll_number=clean.roll_number,
            name=clean.name,
            class_name=clean.class_name,
            department=clean.department,
            shift=clean.shift,
            year=clean.year,
        )
        log.info("student added", extra={"context": {"owner": owner_id, "register_number": register_number}})
        return register_number

    def update_student(self, owner_id: Optional[str], register_number: str, fields: StudentFields) -> None:
        """Update mutable fields. The register number itself never changes."""
        clean = clean_student_fields(fields, require_key=False)
        owner_id = self._require_identity(owner_id)

        ok = self._students.update(
            owner_id=owner_id,
            register_number=register_number,
            roll_number=clean.roll_number,
            name=clean.name,
            class_name=clean.class_name,
            department=clean.department,
            shift=clean.shift,
            year=clean.year,
        )
        if not ok:
            raise NotFoundError("Student not found")

    def delete_student(self, owner_id: Optional[str], register_number: str, *, confirmed: bool = False) -> None:
        if not confirmed:
            raise ConfirmationRequiredError(
                "Deleting a student also deletes all their attendance records. Please confirm."
            )
        owner_id = self._require_identity(owner_id)

        if not self._students.delete(owner_id, register_number):
            raise NotFoundError("Student not found")
        log.info("student deleted", extra={"context": {"owner": owner_id, "register_number": register_number}})

    def get_student(self, owner_id: Optional[str], register_number: str) -> Student:
        student = self._students.get(self._require_identity(owner_id), register_number)
        if not student:
            raise NotFoundError("Student not found")
        return student

    def list_students(self, owner_id: Optional[str]) -> Sequence[Student]:
        return self._students.list_for_owner(self._require_identity(owner_id))

    def grouped_roster(self, owner_id: Optional[str]) -> dict[str, list[Student]]:
        return group_by_class(self.list_students(owner_id))

    def count_students(self, owner_id: Optional[str]) -> int:
        return self._students.count_for_owner(self._require_identity(owner_id))
