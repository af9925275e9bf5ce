from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class User:
    """Teacher account.

    ``id`` is the opaque identity every owned row points at.
    """

    id: str
    email: str
    full_name: Optional[str]
    password_hash: str
    created_at: Optional[datetime] = None

    @property
    def display_name(self) -> str:
        return self.full_name or self.email
