from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def upsert_by_key(
        self,
        *,
        staff_id: int,
        work_date: date,
        shift: str,
        status: AttendanceStatus,
        remarks: Optional[str],
        marked_by: Optional[int],
        marked_at: datetime,
    ) -> tuple[int, bool]:
        """Create or overwrite the record for (staff_id, work_date, shift).

        Returns (attendance_id, created).
        """

        raise NotImplementedError

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_records(
        self,
        *,
        work_date: Optional[date] = None,
        shift: Optional[str] = None,
        staff_id: Optional[int] = None,
        status: Optional[AttendanceStatus] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        """Newest day first, then shift label."""

        raise NotImplementedError

    def update_record(
        self,
        *,
        attendance_id: int,
        status: AttendanceStatus,
        remarks: Optional[str],
        marked_by: Optional[int],
        marked_at: datetime,
    ) -> bool:
        raise NotImplementedError

    def delete(self, attendance_id: int) -> bool:
        raise NotImplementedError

    def move_shift(self, *, staff_id: int, old_shift: str, new_shift: str, from_date: date) -> int:
        """Relabel records dated on/after from_date; colliding rows are skipped.

        Returns the number of records moved.
        """

        raise NotImplementedError
