from __future__ import annotations

from datetime import date
from typing import Mapping, Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def list_for_date(
        self,
        owner_id: str,
        day: date,
        register_numbers: Optional[Sequence[str]] = None,
    ) -> Sequence[AttendanceRecord]:
        """Rows recorded by ``owner_id`` on ``day``, optionally restricted to some students."""
        raise NotImplementedError

    def list_in_range(self, owner_id: str, *, start: date, end: date) -> Sequence[AttendanceRecord]:
        """Rows recorded by ``owner_id`` with ``start <= date <= end``."""
        raise NotImplementedError

    def replace_day(self, owner_id: str, day: date, entries: Mapping[str, AttendanceStatus]) -> int:
        """Make the rows for (day, entries' students) exactly match ``entries``.

        Runs as one transaction. Returns the number of rows written.
        """
        raise NotImplementedError

    def delete_mark(self, owner_id: str, register_number: str, day: date) -> bool:
        raise NotImplementedError
