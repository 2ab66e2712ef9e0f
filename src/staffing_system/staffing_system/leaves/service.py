from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import month_bounds, now_local, optional_day, to_day
from ..common.validators import parse_enum, require_fields, require_max_length
from ..core.constants import MAX_LEAVE_REASON, MAX_LEAVE_REMARKS
from ..core.enums import LeaveStatus, LeaveType
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..staff.lookup import as_id, require_staff
from ..staff.repository import StaffRepository
from .model import LeaveRequest, inclusive_days
from .repository import LeaveRepository

logger = logging.getLogger(__name__)

# Requests that still block the calendar for their staff member.
BLOCKING_STATUSES = (LeaveStatus.PENDING, LeaveStatus.APPROVED)


class LeaveService:
    def __init__(self, leaves: LeaveRepository, staff: StaffRepository):
        self._leaves = leaves
        self._staff = staff

    def _require_leave(self, leave_id) -> LeaveRequest:
        leave = self._leaves.get_by_id(as_id(leave_id, "Leave ID"))
        if not leave:
            raise NotFoundError("Leave request not found")
        return leave

    @staticmethod
    def _clean_remarks(remarks: Optional[str]) -> Optional[str]:
        remarks = (remarks or "").strip() or None
        return require_max_length(remarks, "Remarks", MAX_LEAVE_REMARKS)

    def apply(
        self,
        *,
        staff_id,
        leave_type,
        start_date,
        end_date,
        reason: str,
        today: Optional[date] = None,
    ) -> LeaveRequest:
        """File a Pending request.

        Checks run in a fixed order and the first failure wins: required
        fields, staff exists, range order, not in the past, no overlap with a
        Pending or Approved request of the same staff member.
        """
        require_fields(
            {
                "staff_id": staff_id,
                "leave_type": leave_type,
                "start_date": start_date,
                "end_date": end_date,
                "reason": (reason or "").strip(),
            },
            "staff_id",
            "leave_type",
            "start_date",
            "end_date",
            "reason",
        )
        kind = parse_enum(LeaveType, leave_type, "Leave type")
        start = to_day(start_date, "start_date")
        end = to_day(end_date, "end_date")
        reason = require_max_length(reason.strip(), "Reason", MAX_LEAVE_REASON)

        staff = require_staff(self._staff, staff_id)

        if start > end:
            raise ValidationError("Start date cannot be after end date")
        if start < (today or now_local().date()):
            raise ValidationError("Cannot apply leave for past dates")

        clash = self._leaves.find_overlapping(
            staff_id=staff.staff_id,
            start_date=start,
            end_date=end,
            statuses=BLOCKING_STATUSES,
        )
        if clash:
            raise ConflictError("Leave application overlaps with existing leave request")

        leave_id = self._leaves.create(
            staff_id=staff.staff_id,
            leave_type=kind,
            start_date=start,
            end_date=end,
            reason=reason,
            number_of_days=inclusive_days(start, end),
        )
        logger.info(
            "Leave applied: id=%s staff=%s %s..%s (%s)",
            leave_id,
            staff.staff_code,
            start,
            end,
            kind.value,
        )
        return self._leaves.get_by_id(leave_id)

    def _decide(
        self,
        *,
        leave_id,
        status: LeaveStatus,
        verb: str,
        decided_by: Optional[int],
        remarks: Optional[str],
        now: Optional[datetime],
    ) -> LeaveRequest:
        leave = self._require_leave(leave_id)
        if leave.status != LeaveStatus.PENDING:
            raise ValidationError(f"Cannot {verb} a {leave.status.value.lower()} leave request")
        remarks = self._clean_remarks(remarks)

        decided = self._leaves.decide(
            leave_id=leave.leave_id,
            status=status,
            approved_by=decided_by,
            approval_date=now or now_local(),
            remarks=remarks,
        )
        if not decided:
            raise ConflictError("Leave request was updated by someone else, please reload")

        logger.info("Leave %s: id=%s by=%s", status.value.lower(), leave.leave_id, decided_by)
        return self._leaves.get_by_id(leave.leave_id)

    def approve(
        self,
        *,
        leave_id,
        approved_by: Optional[int] = None,
        remarks: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> LeaveRequest:
        return self._decide(
            leave_id=leave_id,
            status=LeaveStatus.APPROVED,
            verb="approve",
            decided_by=approved_by,
            remarks=remarks,
            now=now,
        )

    def reject(
        self,
        *,
        leave_id,
        rejected_by: Optional[int] = None,
        remarks: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> LeaveRequest:
        return self._decide(
            leave_id=leave_id,
            status=LeaveStatus.REJECTED,
            verb="reject",
            decided_by=rejected_by,
            remarks=remarks,
            now=now,
        )

    def cancel(self, *, leave_id, today: Optional[date] = None) -> LeaveRequest:
        """Withdraw a Pending or Approved request that has not started yet."""
        leave = self._require_leave(leave_id)
        if leave.status == LeaveStatus.CANCELLED:
            raise ValidationError("Leave request is already cancelled")
        if leave.status == LeaveStatus.REJECTED:
            raise ValidationError("Cannot cancel a rejected leave request")
        if leave.start_date <= (today or now_local().date()):
            raise ValidationError("Cannot cancel leave that has already started")

        if not self._leaves.cancel(leave_id=leave.leave_id):
            raise ConflictError("Leave request was updated by someone else, please reload")

        logger.info("Leave cancelled: id=%s", leave.leave_id)
        return self._leaves.get_by_id(leave.leave_id)

    def statistics(self, *, staff_id=None, month=None, year=None) -> dict:
        """Counts per status and approved days.

        With both month and year only requests lying wholly inside that month
        are counted.
        """
        staff_filter = as_id(staff_id, "Staff ID") if staff_id not in (None, "") else None
        start_from = end_until = None
        if month not in (None, "") and year not in (None, ""):
            try:
                start_from, end_until = month_bounds(int(month), int(year))
            except ValueError:
                raise ValidationError("month and year must be numbers")

        summary = self._leaves.summary_by_status(
            staff_id=staff_filter,
            start_from=start_from,
            end_until=end_until,
        )

        def count(status: LeaveStatus) -> int:
            return summary.get(status, (0, 0))[0]

        return {
            "total_requests": sum(n for n, _ in summary.values()),
            "approved": count(LeaveStatus.APPROVED),
            "pending": count(LeaveStatus.PENDING),
            "rejected": count(LeaveStatus.REJECTED),
            "cancelled": count(LeaveStatus.CANCELLED),
            "total_days_approved": summary.get(LeaveStatus.APPROVED, (0, 0))[1],
        }

    def _with_staff(self, leaves: Sequence[LeaveRequest]) -> list[dict]:
        staff_by_id = self._staff.get_many(leave.staff_id for leave in leaves)
        out: list[dict] = []
        for leave in leaves:
            row = leave.as_dict()
            member = staff_by_id.get(leave.staff_id)
            row["staff"] = member.summary() if member else None
            out.append(row)
        return out

    def list_leaves(
        self,
        *,
        staff_id=None,
        status=None,
        leave_type=None,
        start_date=None,
        end_date=None,
    ) -> list[dict]:
        leaves = self._leaves.list_requests(
            staff_id=as_id(staff_id, "Staff ID") if staff_id not in (None, "") else None,
            status=parse_enum(LeaveStatus, status, "Status") if status else None,
            leave_type=parse_enum(LeaveType, leave_type, "Leave type") if leave_type else None,
            start_from=optional_day(start_date, "start_date"),
            end_until=optional_day(end_date, "end_date"),
        )
        return self._with_staff(leaves)

    def get(self, *, leave_id) -> dict:
        return self._with_staff([self._require_leave(leave_id)])[0]

    def for_staff(self, *, staff_id) -> dict:
        staff = require_staff(self._staff, staff_id)
        leaves = self._leaves.list_requests(staff_id=staff.staff_id)
        return {
            "staff": staff.summary(),
            "count": len(leaves),
            "data": [leave.as_dict() for leave in leaves],
        }
