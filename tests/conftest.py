from __future__ import annotations

import sys
from dataclasses import replace
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Optional

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from src.class_attendance.class_attendance.attendance.model import AttendanceRecord  # noqa: E402
from src.class_attendance.class_attendance.auth.model import User  # noqa: E402
from src.class_attendance.class_attendance.core.enums import AttendanceStatus, StudyYear  # noqa: E402
from src.class_attendance.class_attendance.core.exceptions import ValidationError  # noqa: E402
from src.class_attendance.class_attendance.students.model import Student  # noqa: E402

OWNER = "11111111-1111-1111-1111-111111111111"
OTHER_OWNER = "22222222-2222-2222-2222-222222222222"


class InMemoryUsers:
    def __init__(self, users: Optional[list[User]] = None):
        self.by_id = {u.id: u for u in users or []}

    def get_by_id(self, user_id):
        return self.by_id.get(user_id)

    def get_by_email(self, email):
        return next((u for u in self.by_id.values() if u.email == email), None)

    def create_user(self, *, user_id, email, full_name, password_hash):
        self.by_id[user_id] = User(id=user_id, email=email, full_name=full_name, password_hash=password_hash)
        return user_id


class InMemoryAttendance:
    """Owner-scoped attendance rows; ``calls`` records every write."""

    def __init__(self, students: "InMemoryStudents"):
        self._students = students
        self.rows: list[AttendanceRecord] = []
        self.calls: list[str] = []
        self._id = 0

    def add(self, owner_id, register_number, day, status):
        self._id += 1
        self.rows.append(
            AttendanceRecord(
                id=self._id,
                student_register_number=register_number,
                date=day,
                status=AttendanceStatus(status),
                recorded_by=owner_id,
            )
        )

    def list_for_date(self, owner_id, day, register_numbers=None):
        return [
            r
            for r in self.rows
            if r.recorded_by == owner_id
            and r.date == day
            and (register_numbers is None or r.student_register_number in register_numbers)
        ]

    def list_in_range(self, owner_id, *, start, end):
        return [r for r in self.rows if r.recorded_by == owner_id and start <= r.date <= end]

    def replace_day(self, owner_id, day, entries):
        self.calls.append("replace_day")
        if not entries:
            return 0
        self.rows = [
            r
            for r in self.rows
            if not (r.date == day and r.student_register_number in entries and r.recorded_by == owner_id)
        ]
        written = 0
        for key, status in entries.items():
            if self._students.get(owner_id, key):
                self.add(owner_id, key, day, status)
                written += 1
        return written

    def delete_mark(self, owner_id, register_number, day):
        self.calls.append("delete_mark")
        before = len(self.rows)
        self.rows = [
            r
            for r in self.rows
            if not (r.recorded_by == owner_id and r.student_register_number == register_number and r.date == day)
        ]
        return len(self.rows) < before

    def cascade_student(self, register_number):
        self.rows = [r for r in self.rows if r.student_register_number != register_number]


class InMemoryStudents:
    def __init__(self):
        self.rows: dict[str, Student] = {}
        self.calls: list[str] = []
        self.attendance: Optional[InMemoryAttendance] = None
        self._clock = datetime(2025, 1, 1, 8, 0, 0)

    def put(self, student: Student) -> Student:
        self.rows[student.register_number] = student
        return student

    def list_for_owner(self, owner_id, *, order_by_name=False):
        items = [s for s in self.rows.values() if s.added_by == owner_id]
        if order_by_name:
            items.sort(key=lambda s: (s.class_name, s.name))
        else:
            items.sort(key=lambda s: (s.class_name, s.created_at))
        return items

    def get(self, owner_id, register_number):
        s = self.rows.get(register_number)
        return s if s and s.added_by == owner_id else None

    def count_for_owner(self, owner_id):
        return len(self.list_for_owner(owner_id))

    def create(self, *, owner_id, register_number, roll_number, name, class_name, department, shift, year):
        self.calls.append("create")
        if register_number in self.rows or any(s.roll_number == roll_number for s in self.rows.values()):
            raise ValidationError("Register number or roll number already exists")
        self._clock += timedelta(minutes=1)
        self.rows[register_number] = Student(
            register_number=register_number,
            roll_number=roll_number,
            name=name,
            class_name=class_name,
            department=department,
            shift=shift,
            year=year,
            added_by=owner_id,
            created_at=self._clock,
        )
        return register_number

    def update(self, *, owner_id, register_number, roll_number, name, class_name, department, shift, year):
        self.calls.append("update")
        current = self.get(owner_id, register_number)
        if not current:
            return False
        self.rows[register_number] = replace(
            current,
            roll_number=roll_number,
            name=name,
            class_name=class_name,
            department=department,
            shift=shift,
            year=year,
        )
        return True

    def delete(self, owner_id, register_number):
        self.calls.append("delete")
        if not self.get(owner_id, register_number):
            return False
        del self.rows[register_number]
        if self.attendance is not None:
            self.attendance.cascade_student(register_number)
        return True


def make_student(
    register_number: str,
    *,
    name: str = "",
    class_name: str = "CS-A",
    department: Optional[str] = "CSE",
    shift: int = 1,
    year: StudyYear = StudyYear.YEAR1,
    owner: str = OWNER,
    minute: int = 0,
) -> Student:
    return Student(
        register_number=register_number,
        roll_number=f"R-{register_number}",
        name=name or f"Student {register_number}",
        class_name=class_name,
        department=department,
        shift=shift,
        year=year,
        added_by=owner,
        created_at=datetime(2025, 1, 1, 9, 0) + timedelta(minutes=minute),
    )


@pytest.fixture
def owner_user() -> User:
    return User(id=OWNER, email="teacher@example.com", full_name="Teacher", password_hash="x")


@pytest.fixture
def users_repo(owner_user) -> InMemoryUsers:
    return InMemoryUsers([owner_user])


@pytest.fixture
def students_repo() -> InMemoryStudents:
    return InMemoryStudents()


@pytest.fixture
def attendance_repo(students_repo) -> InMemoryAttendance:
    repo = InMemoryAttendance(students_repo)
    students_repo.attendance = repo
    return repo


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2025, 3, 10, 8, 30, 0)


@pytest.fixture
def today(fixed_now) -> date:
    return fixed_now.date()
