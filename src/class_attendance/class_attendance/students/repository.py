from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import StudyYear
from .model import Student


class StudentRepository(Protocol):
    """Owner-scoped access to the students table.

    Every method takes ``owner_id`` and never returns or touches rows added by
    someone else.
    """

    def list_for_owner(self, owner_id: str, *, order_by_name: bool = False) -> Sequence[Student]:
        """Order by class, then creation time (or name when ``order_by_name``)."""
        raise NotImplementedError

    def get(self, owner_id: str, register_number: str) -> Optional[Student]:
        raise NotImplementedError

    def count_for_owner(self, owner_id: str) -> int:
        raise NotImplementedError

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
        raise NotImplementedError

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
        raise NotImplementedError

    def delete(self, owner_id: str, register_number: str) -> bool:
        """Delete the student; attendance rows go with it (cascade)."""
        raise NotImplementedError
