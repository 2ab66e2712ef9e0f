from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Staff:
    """Domain entity: a member of the healthcare staff.

    `staff_code` is the human-readable identifier (D001, N012, ...). It is
    allocated once at creation and never regenerated.
    """

    staff_id: int
    staff_code: str
    name: str
    role: str
    shift: str
    email: Optional[str] = None
    created_at: Optional[datetime] = None

    def summary(self) -> dict:
        return {
            "id": self.staff_id,
            "staff_code": self.staff_code,
            "name": self.name,
            "role": self.role,
            "shift": self.shift,
        }

    def as_dict(self) -> dict:
        return {
            **self.summary(),
            "email": self.email,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
