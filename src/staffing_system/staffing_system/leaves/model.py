from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import LeaveStatus, LeaveType


def inclusive_days(start_date: date, end_date: date) -> int:
    """Calendar days covered by [start_date, end_date], both ends included."""
    return (end_date - start_date).days + 1


@dataclass(frozen=True)
class LeaveRequest:
    leave_id: int
    staff_id: int
    leave_type: LeaveType
    start_date: date
    end_date: date
    reason: str
    status: LeaveStatus
    number_of_days: int
    created_at: datetime
    approved_by: Optional[int] = None
    approval_date: Optional[datetime] = None
    remarks: Optional[str] = None

    def overlaps(self, start_date: date, end_date: date) -> bool:
        return self.start_date <= end_date and self.end_date >= start_date

    def as_dict(self) -> dict:
        return {
            "id": self.leave_id,
            "staff_id": self.staff_id,
            "leave_type": self.leave_type.value,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "reason": self.reason,
            "status": self.status.value,
            "number_of_days": self.number_of_days,
            "approved_by": self.approved_by,
            "approval_date": self.approval_date.isoformat() if self.approval_date else None,
            "remarks": self.remarks,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
