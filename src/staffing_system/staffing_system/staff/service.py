from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..attendance.service import attendance_rate, summarize_statuses
from ..common.datetime_utils import now_local, optional_day
from ..common.validators import require_non_empty
from ..core.constants import NOT_MARKED, STAFF_CODE_ALLOCATION_ATTEMPTS, WEEKLY_STATS_DAYS
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from .adequacy import evaluate, group_by_shift
from .identifiers import next_staff_code, staff_code_prefix
from .lookup import as_id, require_staff, resolve_staff
from .model import Staff
from .repository import StaffRepository

logger = logging.getLogger(__name__)


def _clean_email(email: Optional[str]) -> Optional[str]:
    email = (email or "").strip().lower()
    return email or None


class StaffService:
    """Use cases: manage staff and report on their shifts and attendance."""

    def __init__(self, staff: StaffRepository, attendance: AttendanceRepository):
        self._staff = staff
        self._attendance = attendance

    def create(self, *, name: str, role: str, shift: str, email: Optional[str] = None) -> Staff:
        name = require_non_empty(name, "Name")
        role = require_non_empty(role, "Role")
        shift = require_non_empty(shift, "Shift")
        email = _clean_email(email)

        prefix = staff_code_prefix(role)
        # The unique key on staff_code settles concurrent creations: the loser
        # re-reads the current maximum and tries the next code.
        for _ in range(STAFF_CODE_ALLOCATION_ATTEMPTS):
            code = next_staff_code(role, self._staff.max_code_for_prefix(prefix))
            try:
                staff_id = self._staff.create(staff_code=code, name=name, role=role, shift=shift, email=email)
            except ConflictError:
                logger.info("Staff code %s taken concurrently, retrying", code)
                continue
            logger.info("Staff created: id=%s code=%s role=%s shift=%s", staff_id, code, role, shift)
            return self._staff.get_by_id(staff_id)

        raise ConflictError(f"Could not allocate a staff code for prefix {prefix}, please retry")

    def update(
        self,
        *,
        staff_id,
        name: Optional[str] = None,
        role: Optional[str] = None,
        shift: Optional[str] = None,
        email: Optional[str] = None,
        today: Optional[date] = None,
    ) -> Staff:
        """Update profile fields. The staff code never changes.

        A shift label change is carried over to the member's attendance
        records from today onwards.
        """
        current = require_staff(self._staff, staff_id)

        new_name = require_non_empty(name, "Name") if name is not None else current.name
        new_role = require_non_empty(role, "Role") if role is not None else current.role
        new_shift = require_non_empty(shift, "Shift") if shift is not None else current.shift
        new_email = _clean_email(email) if email is not None else current.email

        self._staff.update(
            staff_id=current.staff_id,
            name=new_name,
            role=new_role,
            shift=new_shift,
            email=new_email,
        )

        if new_shift != current.shift:
            moved = self._attendance.move_shift(
                staff_id=current.staff_id,
                old_shift=current.shift,
                new_shift=new_shift,
                from_date=today or now_local().date(),
            )
            logger.info(
                "Staff %s shift changed %r -> %r, moved %s upcoming attendance records",
                current.staff_code,
                current.shift,
                new_shift,
                moved,
            )

        return self._staff.get_by_id(current.staff_id)

    def delete(self, *, staff_id) -> None:
        member_id = as_id(staff_id, "Staff ID")
        if not self._staff.delete(member_id):
            raise NotFoundError("Staff member not found")
        logger.info("Staff deleted: id=%s", member_id)

    def resolve(self, ref) -> Staff:
        return resolve_staff(self._staff, ref)

    def _attendance_by_staff(self, day: date, staff: list[Staff]) -> dict[int, object]:
        """Each member's record for the day, preferring their own shift."""
        by_staff: dict[int, object] = {}
        own_shift = {s.staff_id: s.shift for s in staff}
        for r in self._attendance.list_records(work_date=day):
            if r.staff_id not in own_shift:
                continue
            if r.staff_id not in by_staff or r.shift == own_shift[r.staff_id]:
                by_staff[r.staff_id] = r
        return by_staff

    def get(self, *, staff_id, work_date=None) -> dict:
        member = require_staff(self._staff, staff_id)
        data = member.as_dict()

        day = optional_day(work_date)
        if day is not None:
            record = self._attendance_by_staff(day, [member]).get(member.staff_id)
            data["attendance"] = {
                "status": record.status.value if record else NOT_MARKED,
                "remarks": record.remarks if record else None,
                "marked_at": record.marked_at.isoformat() if record else None,
            }
        return data

    def list_staff(self, *, shift: Optional[str] = None, work_date=None) -> dict:
        """Staff (optionally one shift) with per-shift adequacy.

        With a date, each member also carries that day's attendance status
        ("Not Marked" when there is no record).
        """
        day = optional_day(work_date)
        staff = list(self._staff.list_all(shift=shift or None))

        data = [s.as_dict() for s in staff]
        if day is not None:
            records = self._attendance_by_staff(day, staff)
            for row, member in zip(data, staff):
                record = records.get(member.staff_id)
                row["attendance_status"] = record.status.value if record else NOT_MARKED
                row["attendance_remarks"] = record.remarks if record else None

        shift_status = evaluate(group_by_shift(staff))
        return {
            "count": len(staff),
            "filter": {"shift": shift or None, "date": day.isoformat() if day else None},
            "data": data,
            "shift_status": {label: status.as_dict() for label, status in shift_status.items()},
        }

    def weekly_stats(self, *, ref, today: Optional[date] = None) -> dict:
        """Attendance over the seven days ending today, one entry per day."""
        if ref in (None, ""):
            raise ValidationError("Staff ID is required")
        member = resolve_staff(self._staff, ref)

        end = today or now_local().date()
        start = end - timedelta(days=WEEKLY_STATS_DAYS - 1)
        records = list(self._attendance.list_records(staff_id=member.staff_id, start_date=start, end_date=end))

        by_day: dict[date, object] = {}
        for r in records:
            if r.work_date not in by_day or r.shift == member.shift:
                by_day[r.work_date] = r

        days = []
        for offset in range(WEEKLY_STATS_DAYS):
            day = start + timedelta(days=offset)
            record = by_day.get(day)
            days.append(
                {
                    "date": day.isoformat(),
                    "shift": record.shift if record else member.shift,
                    "status": record.status.value if record else NOT_MARKED,
                    "remarks": record.remarks if record else None,
                }
            )

        statistics = summarize_statuses(records)
        statistics["attendance_rate"] = attendance_rate(statistics)
        return {
            "staff": member.summary(),
            "period": {"start": start.isoformat(), "end": end.isoformat()},
            "statistics": statistics,
            "records": days,
        }
