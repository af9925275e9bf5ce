from __future__ import annotations

from datetime import date
from typing import Any, Mapping, Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, placeholders, require_columns
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = "id, student_register_number, date, status, recorded_by, recorded_at"


def _to_record(row: Mapping[str, Any]) -> AttendanceRecord:
    require_columns(row, ("student_register_number", "date", "status", "recorded_by"), table="attendance")
    return AttendanceRecord(
        id=int(row["id"]) if row.get("id") is not None else None,
        student_register_number=str(row["student_register_number"]),
        date=row["date"],
        status=AttendanceStatus(row["status"]),
        recorded_by=str(row["recorded_by"]),
        recorded_at=row.get("recorded_at"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_date(
        self,
        owner_id: str,
        day: date,
        register_numbers: Optional[Sequence[str]] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses = ["recorded_by=%s", "date=%s"]
        params: list[object] = [owner_id, day]

        if register_numbers is not None:
            if not register_numbers:
                return []
            clauses.append(f"student_register_number IN ({placeholders(register_numbers)})")
            params.extend(register_numbers)

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance WHERE {where}", tuple(params))
            return [_to_record(r) for r in fetchall(cur)]

    def list_in_range(self, owner_id: str, *, start: date, end: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance
                WHERE recorded_by=%s AND date BETWEEN %s AND %s
                ORDER BY date ASC
                """,
                (owner_id, start, end),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def replace_day(self, owner_id: str, day: date, entries: Mapping[str, AttendanceStatus]) -> int:
        if not entries:
            return 0

        keys = list(entries)
        written = 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                DELETE FROM attendance
                WHERE recorded_by=%s AND date=%s AND student_register_number IN ({placeholders(keys)})
                """,
                (owner_id, day, *keys),
            )
            # The SELECT only yields a row for students the caller owns; the
            # upsert keeps (student, date) unique even against a concurrent writer.
            for register_number, status in entries.items():
                cur.execute(
                    """
                    INSERT INTO attendance(student_register_number, status, recorded_by, date)
                    SELECT register_number, %s, %s, %s
                    FROM students
                    WHERE register_number=%s AND added_by=%s
                    ON DUPLICATE KEY UPDATE status=%s, recorded_by=%s, recorded_at=CURRENT_TIMESTAMP
                    """,
                    (status.value, owner_id, day, register_number, owner_id, status.value, owner_id),
                )
                written += 1 if cur.rowcount else 0
        return written

    def delete_mark(self, owner_id: str, register_number: str, day: date) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM attendance WHERE recorded_by=%s AND student_register_number=%s AND date=%s",
                (owner_id, register_number, day),
            )
            return cur.rowcount > 0
