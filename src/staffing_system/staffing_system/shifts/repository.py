from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import ShiftType
from .model import ShiftAssignment


class ShiftRepository(Protocol):
    def create(
        self,
        *,
        staff_id: int,
        shift_date: date,
        shift_type: ShiftType,
        start_time: str,
        end_time: str,
        assigned_by: Optional[int],
        notes: Optional[str],
        is_leave_day: bool,
    ) -> int:
        """Insert an assignment. Raises ConflictError when (staff_id, shift_date) is taken."""

        raise NotImplementedError

    def get_by_id(self, shift_assignment_id: int) -> Optional[ShiftAssignment]:
        raise NotImplementedError

    def get_for_staff_and_date(self, *, staff_id: int, shift_date: date) -> Optional[ShiftAssignment]:
        raise NotImplementedError

    def update(
        self,
        *,
        shift_assignment_id: int,
        shift_type: ShiftType,
        start_time: str,
        end_time: str,
        notes: Optional[str],
    ) -> bool:
        raise NotImplementedError

    def delete(self, shift_assignment_id: int) -> bool:
        raise NotImplementedError

    def list_assignments(
        self,
        *,
        staff_id: Optional[int] = None,
        shift_date: Optional[date] = None,
        shift_type: Optional[ShiftType] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[ShiftAssignment]:
        """Ordered by shift_date, then start_time."""

        raise NotImplementedError
