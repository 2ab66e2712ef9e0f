from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import ShiftType


@dataclass(frozen=True)
class ShiftAssignment:
    """One staff member's dated shift. Times are 'HH:MM' strings."""

    shift_assignment_id: int
    staff_id: int
    shift_date: date
    shift_type: ShiftType
    start_time: str
    end_time: str
    assigned_by: Optional[int] = None
    notes: Optional[str] = None
    is_leave_day: bool = False
    created_at: Optional[datetime] = None

    def as_dict(self) -> dict:
        return {
            "id": self.shift_assignment_id,
            "staff_id": self.staff_id,
            "shift_date": self.shift_date.isoformat(),
            "shift_type": self.shift_type.value,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "assigned_by": self.assigned_by,
            "notes": self.notes,
            "is_leave_day": self.is_leave_day,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
