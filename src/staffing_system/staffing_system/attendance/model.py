from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one staff member's attendance for a (day, shift).

    (staff_id, work_date, shift) is the natural key.
    """

    attendance_id: int
    staff_id: int
    work_date: date
    shift: str
    status: AttendanceStatus
    remarks: Optional[str]
    marked_by: Optional[int]
    marked_at: datetime

    def as_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "staff_id": self.staff_id,
            "date": self.work_date.isoformat(),
            "shift": self.shift,
            "status": self.status.value,
            "remarks": self.remarks,
            "marked_by": self.marked_by,
            "marked_at": self.marked_at.isoformat() if self.marked_at else None,
        }


@dataclass(frozen=True)
class MarkResult:
    record: AttendanceRecord
    created: bool


@dataclass(frozen=True)
class BulkItemError:
    staff_id: object
    message: str

    def as_dict(self) -> dict:
        return {"staff_id": self.staff_id, "message": self.message}


@dataclass(frozen=True)
class BulkMarkResult:
    """Best-effort batch outcome: successes and per-item failures side by side."""

    results: list[AttendanceRecord] = field(default_factory=list)
    errors: list[BulkItemError] = field(default_factory=list)

    @property
    def success_count(self) -> int:
        return len(self.results)

    @property
    def error_count(self) -> int:
        return len(self.errors)
