from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, Optional, Protocol, Sequence

from ..core.enums import LeaveStatus, LeaveType
from .model import LeaveRequest


class LeaveRepository(Protocol):
    def create(
        self,
        *,
        staff_id: int,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        reason: str,
        number_of_days: int,
    ) -> int:
        """Insert a Pending request. Returns leave_id."""

        raise NotImplementedError

    def get_by_id(self, leave_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def find_overlapping(
        self,
        *,
        staff_id: int,
        start_date: date,
        end_date: date,
        statuses: Iterable[LeaveStatus],
    ) -> Optional[LeaveRequest]:
        """Any request in `statuses` whose range intersects [start_date, end_date]."""

        raise NotImplementedError

    def list_requests(
        self,
        *,
        staff_id: Optional[int] = None,
        status: Optional[LeaveStatus] = None,
        leave_type: Optional[LeaveType] = None,
        start_from: Optional[date] = None,
        end_until: Optional[date] = None,
    ) -> Sequence[LeaveRequest]:
        """Newest first."""

        raise NotImplementedError

    def decide(
        self,
        *,
        leave_id: int,
        status: LeaveStatus,
        approved_by: Optional[int],
        approval_date: datetime,
        remarks: Optional[str] = None,
    ) -> bool:
        """Approve/reject; only applies while the request is still Pending."""

        raise NotImplementedError

    def cancel(self, *, leave_id: int) -> bool:
        """Only applies while the request is Pending or Approved."""

        raise NotImplementedError

    def summary_by_status(
        self,
        *,
        staff_id: Optional[int] = None,
        start_from: Optional[date] = None,
        end_until: Optional[date] = None,
    ) -> dict[LeaveStatus, tuple[int, int]]:
        """status -> (request count, total number_of_days)."""

        raise NotImplementedError
