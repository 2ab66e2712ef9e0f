from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Iterable, Optional

from ..common.datetime_utils import now_local, optional_day, to_day
from ..common.validators import parse_enum, require_max_length, require_non_empty
from ..core.constants import LEAVE_DAY_DEFAULT_REMARKS, MAX_ATTENDANCE_REMARKS
from ..core.enums import AttendanceStatus
from ..core.exceptions import DomainError, NotFoundError, ValidationError
from ..staff.lookup import as_id, require_staff, resolve_staff
from ..staff.repository import StaffRepository
from .model import AttendanceRecord, BulkItemError, BulkMarkResult, MarkResult
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

_SUMMARY_KEYS = {
    AttendanceStatus.PRESENT: "present",
    AttendanceStatus.ABSENT: "absent",
    AttendanceStatus.LEAVE: "leave",
    AttendanceStatus.HALF_DAY: "half_day",
}


def summarize_statuses(records: Iterable[AttendanceRecord]) -> dict:
    stats = {"total": 0, "present": 0, "absent": 0, "leave": 0, "half_day": 0}
    for r in records:
        stats["total"] += 1
        stats[_SUMMARY_KEYS[r.status]] += 1
    return stats


def attendance_rate(stats: dict) -> str:
    """present / (present + absent + leave + half_day) as '71.4%'."""
    counted = stats["present"] + stats["absent"] + stats["leave"] + stats["half_day"]
    if not counted:
        return "0.0%"
    return f"{stats['present'] * 100 / counted:.1f}%"


class AttendanceService:
    """Use cases: mark attendance by natural key, and read it back."""

    def __init__(self, attendance: AttendanceRepository, staff: StaffRepository):
        self._attendance = attendance
        self._staff = staff

    @staticmethod
    def _clean_remarks(remarks: Optional[str]) -> Optional[str]:
        if remarks is None:
            return None
        return require_max_length(str(remarks).strip(), "Remarks", MAX_ATTENDANCE_REMARKS)

    def _upsert(
        self,
        *,
        staff_id: int,
        work_date: date,
        shift: str,
        status: AttendanceStatus,
        remarks: Optional[str],
        marked_by: Optional[int],
        now: Optional[datetime],
    ) -> MarkResult:
        attendance_id, created = self._attendance.upsert_by_key(
            staff_id=staff_id,
            work_date=work_date,
            shift=shift,
            status=status,
            remarks=remarks,
            marked_by=marked_by,
            marked_at=now or now_local(),
        )
        record = self._attendance.get_by_id(attendance_id)
        if not record:
            raise NotFoundError("Attendance record not found")
        return MarkResult(record=record, created=created)

    def mark(
        self,
        *,
        staff_id,
        work_date,
        shift: str,
        status,
        remarks: Optional[str] = None,
        marked_by: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> MarkResult:
        """Create or update the record for (staff, day, shift)."""
        if staff_id in (None, ""):
            raise ValidationError("Staff ID is required")
        day = to_day(work_date)
        shift = require_non_empty(shift, "Shift")
        status = parse_enum(AttendanceStatus, status, "Status")
        remarks = self._clean_remarks(remarks)

        staff = require_staff(self._staff, staff_id)
        return self._upsert(
            staff_id=staff.staff_id,
            work_date=day,
            shift=shift,
            status=status,
            remarks=remarks,
            marked_by=marked_by,
            now=now,
        )

    def _mark_for_ref(
        self,
        *,
        staff_ref,
        work_date,
        status: AttendanceStatus,
        remarks: Optional[str],
        marked_by: Optional[int],
        now: Optional[datetime],
    ) -> MarkResult:
        if staff_ref in (None, "") or work_date in (None, ""):
            raise ValidationError("staff_id and date are required")
        day = to_day(work_date)
        remarks = self._clean_remarks(remarks)

        staff = resolve_staff(self._staff, staff_ref)
        return self._upsert(
            staff_id=staff.staff_id,
            work_date=day,
            shift=staff.shift,
            status=status,
            remarks=remarks,
            marked_by=marked_by,
            now=now,
        )

    def quick_mark(
        self,
        *,
        staff_ref,
        work_date,
        remarks: Optional[str] = None,
        marked_by: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> MarkResult:
        """Mark Present for the staff member's own shift; accepts id or staff code."""
        return self._mark_for_ref(
            staff_ref=staff_ref,
            work_date=work_date,
            status=AttendanceStatus.PRESENT,
            remarks=remarks or "",
            marked_by=marked_by,
            now=now,
        )

    def apply_leave_day(
        self,
        *,
        staff_ref,
        work_date,
        remarks: Optional[str] = None,
        marked_by: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> MarkResult:
        return self._mark_for_ref(
            staff_ref=staff_ref,
            work_date=work_date,
            status=AttendanceStatus.LEAVE,
            remarks=remarks or LEAVE_DAY_DEFAULT_REMARKS,
            marked_by=marked_by,
            now=now,
        )

    def mark_bulk(self, items, *, marked_by: Optional[int] = None, now: Optional[datetime] = None) -> BulkMarkResult:
        """Mark each item independently; one bad item never aborts the batch."""
        if not isinstance(items, list) or not items:
            raise ValidationError("attendance_records array is required")

        result = BulkMarkResult()
        for item in items:
            staff_id = item.get("staff_id") if isinstance(item, dict) else None
            try:
                if not isinstance(item, dict):
                    raise ValidationError("Each attendance record must be an object")
                marked = self.mark(
                    staff_id=staff_id,
                    work_date=item.get("date"),
                    shift=item.get("shift"),
                    status=item.get("status"),
                    remarks=item.get("remarks"),
                    marked_by=marked_by,
                    now=now,
                )
                result.results.append(marked.record)
            except DomainError as e:
                result.errors.append(BulkItemError(staff_id=staff_id, message=str(e)))

        logger.info(
            "Bulk attendance marked: ok=%s failed=%s by=%s",
            result.success_count,
            result.error_count,
            marked_by,
        )
        return result

    def _with_staff(self, records) -> list[dict]:
        staff_by_id = self._staff.get_many(r.staff_id for r in records)
        out: list[dict] = []
        for r in records:
            row = r.as_dict()
            member = staff_by_id.get(r.staff_id)
            row["staff"] = member.summary() if member else None
            out.append(row)
        return out

    def list_records(
        self,
        *,
        work_date=None,
        shift: Optional[str] = None,
        staff_id=None,
        status=None,
    ) -> dict:
        """Filtered records plus per (date, shift) groups with status counts."""
        day = optional_day(work_date)
        status_filter = parse_enum(AttendanceStatus, status, "Status") if status else None
        staff_filter = as_id(staff_id, "Staff ID") if staff_id not in (None, "") else None

        records = self._attendance.list_records(
            work_date=day,
            shift=shift or None,
            staff_id=staff_filter,
            status=status_filter,
        )

        grouped: dict[tuple[date, str], dict] = {}
        for r in records:
            key = (r.work_date, r.shift)
            group = grouped.get(key)
            if not group:
                group = {"date": r.work_date.isoformat(), "shift": r.shift, "records": []}
                grouped[key] = group
            group["records"].append(r)

        groups = []
        for group in grouped.values():
            groups.append(
                {
                    "date": group["date"],
                    "shift": group["shift"],
                    "records": [r.as_dict() for r in group["records"]],
                    "summary": summarize_statuses(group["records"]),
                }
            )

        return {
            "count": len(records),
            "filter": {
                "date": day.isoformat() if day else None,
                "shift": shift or None,
                "staff_id": staff_filter,
                "status": status_filter.value if status_filter else None,
            },
            "data": self._with_staff(records),
            "grouped": groups,
        }

    def records_for_staff(self, *, staff_id, start_date=None, end_date=None) -> dict:
        staff = require_staff(self._staff, staff_id)
        records = self._attendance.list_records(
            staff_id=staff.staff_id,
            start_date=optional_day(start_date, "start_date"),
            end_date=optional_day(end_date, "end_date"),
        )
        return {
            "staff": staff.summary(),
            "statistics": summarize_statuses(records),
            "data": [r.as_dict() for r in records],
        }

    def update_record(
        self,
        *,
        attendance_id,
        status=None,
        remarks: Optional[str] = None,
        marked_by: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        """Patch status and/or remarks of a record by id; refreshes the marker."""
        record_id = as_id(attendance_id, "Attendance ID")
        record = self._attendance.get_by_id(record_id)
        if not record:
            raise NotFoundError("Attendance record not found")

        new_status = parse_enum(AttendanceStatus, status, "Status") if status else record.status
        new_remarks = self._clean_remarks(remarks) if remarks is not None else record.remarks

        self._attendance.update_record(
            attendance_id=record_id,
            status=new_status,
            remarks=new_remarks,
            marked_by=marked_by,
            marked_at=now or now_local(),
        )
        return self._attendance.get_by_id(record_id)

    def delete_record(self, *, attendance_id) -> None:
        record_id = as_id(attendance_id, "Attendance ID")
        if not self._attendance.delete(record_id):
            raise NotFoundError("Attendance record not found")
        logger.info("Attendance record deleted: id=%s", record_id)
