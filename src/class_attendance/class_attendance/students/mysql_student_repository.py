from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

import mysql.connector

from ..core.enums import StudyYear
from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, require_columns
from .model import Student
from .repository import StudentRepository

_COLUMNS = "register_number, roll_number, name, class, department, shift, year, added_by, created_at"


def _to_student(row: Mapping[str, Any]) -> Student:
    require_columns(
        row,
        ("register_number", "roll_number", "name", "class", "added_by", "created_at"),
        table="students",
    )
    return Student(
        register_number=str(row["register_number"]),
        roll_number=str(row["roll_number"]),
        name=str(row["name"]),
        class_name=str(row["class"]),
        department=row.get("department"),
        shift=int(row.get("shift") or 1),
        year=StudyYear(row.get("year") or StudyYear.YEAR1.value),
        added_by=str(row["added_by"]),
        created_at=row["created_at"],
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_owner(self, owner_id: str, *, order_by_name: bool = False) -> Sequence[Student]:
        order = "class ASC, name ASC" if order_by_name else "class ASC, created_at ASC"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM students WHERE added_by=%s ORDER BY {order}",
                (owner_id,),
            )
            return [_to_student(r) for r in fetchall(cur)]

    def get(self, owner_id: str, register_number: str) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM students WHERE added_by=%s AND register_number=%s",
                (owner_id, register_number),
            )
            row = fetchone(cur)
            return _to_student(row) if row else None

    def count_for_owner(self, owner_id: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM students WHERE added_by=%s", (owner_id,))
            row = fetchone(cur)
            return int(row["n"]) if row else 0

    def create(
        self,
        *,
        owner_id: str,
        register_number: str,
        roll_number: str,
        name: str,
        class_name: str,
        department: str,
        shift: int,
        year: StudyYear,
    ) -> str:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO students(register_number, roll_number, name, class, department, shift, year, added_by)
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (register_number, roll_number, name, class_name, department, int(shift), year.value, owner_id),
                )
        except mysql.connector.IntegrityError as e:
            raise ValidationError("Register number or roll number already exists") from e
        return register_number

    def update(
        self,
        *,
        owner_id: str,
        register_number: str,
        roll_number: str,
        name: str,
        class_name: str,
        department: str,
        shift: int,
        year: StudyYear,
    ) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                # MySQL reports 0 affected rows for a no-op update, so match first.
                cur.execute(
                    "SELECT 1 AS found FROM students WHERE added_by=%s AND register_number=%s",
                    (owner_id, register_number),
                )
                if not fetchone(cur):
                    return False
                cur.execute(
                    """
                    UPDATE students
                    SET roll_number=%s, name=%s, class=%s, department=%s, shift=%s, year=%s
                    WHERE added_by=%s AND register_number=%s
                    """,
                    (roll_number, name, class_name, department, int(shift), year.value, owner_id, register_number),
                )
                return True
        except mysql.connector.IntegrityError as e:
            raise ValidationError("Roll number already exists") from e

    def delete(self, owner_id: str, register_number: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM students WHERE added_by=%s AND register_number=%s",
                (owner_id, register_number),
            )
            return cur.rowcount > 0
