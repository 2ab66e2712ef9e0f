from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..common.datetime_utils import is_hhmm, minutes_since_midnight, month_bounds, now_local, optional_day, to_day
from ..common.validators import parse_enum, require_fields, require_max_length
from ..core.constants import MAX_SHIFT_NOTES
from ..core.enums import LeaveStatus, ShiftType
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..leaves.repository import LeaveRepository
from ..staff.lookup import as_id, require_staff
from ..staff.repository import StaffRepository
from .model import ShiftAssignment
from .repository import ShiftRepository

logger = logging.getLogger(__name__)


def _check_time(value, field_name: str) -> str:
    value = str(value or "").strip()
    if not is_hhmm(value):
        raise ValidationError(f"{field_name} must be in HH:mm format")
    return value


def _check_order(start_time: str, end_time: str) -> None:
    # Same-day shifts only: a Night shift is entered as e.g. 22:00-23:59.
    if minutes_since_midnight(start_time) >= minutes_since_midnight(end_time):
        raise ValidationError("Start time must be before end time")


def _clean_notes(notes: Optional[str]) -> Optional[str]:
    notes = (notes or "").strip() or None
    return require_max_length(notes, "Notes", MAX_SHIFT_NOTES)


class ShiftService:
    def __init__(self, shifts: ShiftRepository, staff: StaffRepository, leaves: LeaveRepository):
        self._shifts = shifts
        self._staff = staff
        self._leaves = leaves

    def _require_assignment(self, shift_assignment_id) -> ShiftAssignment:
        assignment = self._shifts.get_by_id(as_id(shift_assignment_id, "Shift ID"))
        if not assignment:
            raise NotFoundError("Shift assignment not found")
        return assignment

    def _on_approved_leave(self, staff_id: int, day: date) -> bool:
        covering = self._leaves.find_overlapping(
            staff_id=staff_id,
            start_date=day,
            end_date=day,
            statuses=(LeaveStatus.APPROVED,),
        )
        return covering is not None

    def add(
        self,
        *,
        staff_id,
        shift_date,
        shift_type,
        start_time: str,
        end_time: str,
        notes: Optional[str] = None,
        assigned_by: Optional[int] = None,
    ) -> ShiftAssignment:
        require_fields(
            {
                "staff_id": staff_id,
                "shift_date": shift_date,
                "shift_type": shift_type,
                "start_time": start_time,
                "end_time": end_time,
            },
            "staff_id",
            "shift_date",
            "shift_type",
            "start_time",
            "end_time",
        )
        day = to_day(shift_date, "shift_date")
        notes = _clean_notes(notes)

        staff = require_staff(self._staff, staff_id)

        kind = parse_enum(ShiftType, shift_type, "Shift type")
        start_time = _check_time(start_time, "start_time")
        end_time = _check_time(end_time, "end_time")
        _check_order(start_time, end_time)

        # Informational only: assigning on a leave day is allowed.
        on_leave = self._on_approved_leave(staff.staff_id, day)

        if self._shifts.get_for_staff_and_date(staff_id=staff.staff_id, shift_date=day):
            raise ConflictError("Staff member already has a shift assigned for this date")

        assignment_id = self._shifts.create(
            staff_id=staff.staff_id,
            shift_date=day,
            shift_type=kind,
            start_time=start_time,
            end_time=end_time,
            assigned_by=assigned_by,
            notes=notes,
            is_leave_day=on_leave,
        )
        logger.info(
            "Shift assigned: id=%s staff=%s %s %s %s-%s%s",
            assignment_id,
            staff.staff_code,
            day,
            kind.value,
            start_time,
            end_time,
            " (on approved leave)" if on_leave else "",
        )
        return self._shifts.get_by_id(assignment_id)

    def update(
        self,
        *,
        shift_assignment_id,
        shift_type=None,
        start_time: Optional[str] = None,
        end_time: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> ShiftAssignment:
        """Patch an assignment; omitted fields keep their value.

        Time order is re-checked against the merged values whenever either
        time changes.
        """
        current = self._require_assignment(shift_assignment_id)

        kind = parse_enum(ShiftType, shift_type, "Shift type") if shift_type else current.shift_type
        new_start = _check_time(start_time, "start_time") if start_time else current.start_time
        new_end = _check_time(end_time, "end_time") if end_time else current.end_time
        if start_time or end_time:
            _check_order(new_start, new_end)
        new_notes = _clean_notes(notes) if notes is not None else current.notes

        self._shifts.update(
            shift_assignment_id=current.shift_assignment_id,
            shift_type=kind,
            start_time=new_start,
            end_time=new_end,
            notes=new_notes,
        )
        return self._shifts.get_by_id(current.shift_assignment_id)

    def delete(self, *, shift_assignment_id, today: Optional[date] = None) -> None:
        current = self._require_assignment(shift_assignment_id)
        if current.shift_date < (today or now_local().date()):
            raise ValidationError("Cannot delete past shift assignments")

        if not self._shifts.delete(current.shift_assignment_id):
            raise NotFoundError("Shift assignment not found")
        logger.info("Shift deleted: id=%s date=%s", current.shift_assignment_id, current.shift_date)

    def _with_staff(self, assignments: Sequence[ShiftAssignment]) -> list[dict]:
        staff_by_id = self._staff.get_many(a.staff_id for a in assignments)
        out: list[dict] = []
        for a in assignments:
            row = a.as_dict()
            member = staff_by_id.get(a.staff_id)
            row["staff"] = member.summary() if member else None
            out.append(row)
        return out

    def daily_schedule(self, *, shift_date, shift_type=None) -> dict:
        if shift_date in (None, ""):
            raise ValidationError("date is required")
        day = to_day(shift_date)
        kind = parse_enum(ShiftType, shift_type, "Shift type") if shift_type else None

        assignments = self._shifts.list_assignments(shift_date=day, shift_type=kind)
        rows = self._with_staff(assignments)

        schedule: dict[str, list[dict]] = {t.value: [] for t in ShiftType}
        for row in rows:
            schedule[row["shift_type"]].append(row)

        return {
            "date": day.isoformat(),
            "total_assignments": len(rows),
            "schedule": schedule,
        }

    def statistics(self, *, staff_id=None, month=None, year=None, shift_type=None) -> dict:
        staff_filter = as_id(staff_id, "Staff ID") if staff_id not in (None, "") else None
        kind = parse_enum(ShiftType, shift_type, "Shift type") if shift_type else None
        start = end = None
        if month not in (None, "") and year not in (None, ""):
            try:
                start, end = month_bounds(int(month), int(year))
            except ValueError:
                raise ValidationError("month and year must be numbers")

        assignments = self._shifts.list_assignments(
            staff_id=staff_filter,
            shift_type=kind,
            start_date=start,
            end_date=end,
        )
        by_type = {t.value: 0 for t in ShiftType}
        for a in assignments:
            by_type[a.shift_type.value] += 1

        return {
            "total_shifts": len(assignments),
            "morning": by_type[ShiftType.MORNING.value],
            "evening": by_type[ShiftType.EVENING.value],
            "night": by_type[ShiftType.NIGHT.value],
            "leave_days": sum(1 for a in assignments if a.is_leave_day),
        }

    def list_shifts(
        self,
        *,
        staff_id=None,
        shift_date=None,
        shift_type=None,
        start_date=None,
        end_date=None,
    ) -> list[dict]:
        assignments = self._shifts.list_assignments(
            staff_id=as_id(staff_id, "Staff ID") if staff_id not in (None, "") else None,
            shift_date=optional_day(shift_date, "shift_date"),
            shift_type=parse_enum(ShiftType, shift_type, "Shift type") if shift_type else None,
            start_date=optional_day(start_date, "start_date"),
            end_date=optional_day(end_date, "end_date"),
        )
        return self._with_staff(assignments)

    def get(self, *, shift_assignment_id) -> dict:
        return self._with_staff([self._require_assignment(shift_assignment_id)])[0]

    def for_staff(self, *, staff_id, start_date=None, end_date=None) -> dict:
        staff = require_staff(self._staff, staff_id)
        assignments = self._shifts.list_assignments(
            staff_id=staff.staff_id,
            start_date=optional_day(start_date, "start_date"),
            end_date=optional_day(end_date, "end_date"),
        )
        return {
            "staff": staff.summary(),
            "count": len(assignments),
            "data": [a.as_dict() for a in assignments],
        }
