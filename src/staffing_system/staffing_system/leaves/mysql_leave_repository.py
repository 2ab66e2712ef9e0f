from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, Optional, Sequence

from ..core.enums import LeaveStatus, LeaveType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, where_clause
from .model import LeaveRequest
from .repository import LeaveRepository

_COLUMNS = (
    "leave_id, staff_id, leave_type, start_date, end_date, reason, status, number_of_days, "
    "created_at, approved_by, approval_date, remarks"
)


def _to_leave(r: dict) -> LeaveRequest:
    return LeaveRequest(
        leave_id=int(r["leave_id"]),
        staff_id=int(r["staff_id"]),
        leave_type=LeaveType(r["leave_type"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        reason=r["reason"],
        status=LeaveStatus(r["status"]),
        number_of_days=int(r["number_of_days"]),
        created_at=r["created_at"],
        approved_by=r.get("approved_by"),
        approval_date=r.get("approval_date"),
        remarks=r.get("remarks"),
    )


def _filters(
    *,
    staff_id: Optional[int] = None,
    start_from: Optional[date] = None,
    end_until: Optional[date] = None,
) -> tuple[list[str], list[object]]:
    clauses: list[str] = []
    params: list[object] = []
    if staff_id is not None:
        clauses.append("staff_id=%s")
        params.append(int(staff_id))
    if start_from is not None:
        clauses.append("start_date>=%s")
        params.append(start_from)
    if end_until is not None:
        clauses.append("end_date<=%s")
        params.append(end_until)
    return clauses, params


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(staff_id, leave_type, start_date, end_date, reason, status, number_of_days)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(staff_id),
                    leave_type.value,
                    start_date,
                    end_date,
                    reason,
                    LeaveStatus.PENDING.value,
                    int(number_of_days),
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(self, leave_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM leave_requests WHERE leave_id=%s", (int(leave_id),))
            r = fetchone(cur)
            return _to_leave(r) if r else None

    def find_overlapping(
        self,
        *,
        staff_id: int,
        start_date: date,
        end_date: date,
        statuses: Iterable[LeaveStatus],
    ) -> Optional[LeaveRequest]:
        values = [s.value for s in statuses]
        placeholders = ",".join(["%s"] * len(values))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM leave_requests
                WHERE staff_id=%s
                  AND status IN ({placeholders})
                  AND start_date<=%s AND end_date>=%s
                ORDER BY start_date
                LIMIT 1
                """,
                tuple([int(staff_id)] + values + [end_date, start_date]),
            )
            r = fetchone(cur)
            return _to_leave(r) if r else None

    def list_requests(
        self,
        *,
        staff_id: Optional[int] = None,
        status: Optional[LeaveStatus] = None,
        leave_type: Optional[LeaveType] = None,
        start_from: Optional[date] = None,
        end_until: Optional[date] = None,
    ) -> Sequence[LeaveRequest]:
        clauses, params = _filters(staff_id=staff_id, start_from=start_from, end_until=end_until)
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)
        if leave_type is not None:
            clauses.append("leave_type=%s")
            params.append(leave_type.value)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM leave_requests
                WHERE {where_clause(clauses)}
                ORDER BY created_at DESC, leave_id DESC
                """,
                tuple(params),
            )
            return [_to_leave(r) for r in fetchall(cur)]

    def decide(
        self,
        *,
        leave_id: int,
        status: LeaveStatus,
        approved_by: Optional[int],
        approval_date: datetime,
        remarks: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s, approved_by=%s, approval_date=%s, remarks=COALESCE(%s, remarks)
                WHERE leave_id=%s AND status=%s
                """,
                (
                    status.value,
                    approved_by,
                    approval_date,
                    remarks,
                    int(leave_id),
                    LeaveStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

    def cancel(self, *, leave_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s
                WHERE leave_id=%s AND status IN (%s,%s)
                """,
                (
                    LeaveStatus.CANCELLED.value,
                    int(leave_id),
                    LeaveStatus.PENDING.value,
                    LeaveStatus.APPROVED.value,
                ),
            )
            return cur.rowcount > 0

    def summary_by_status(
        self,
        *,
        staff_id: Optional[int] = None,
        start_from: Optional[date] = None,
        end_until: Optional[date] = None,
    ) -> dict[LeaveStatus, tuple[int, int]]:
        clauses, params = _filters(staff_id=staff_id, start_from=start_from, end_until=end_until)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT status, COUNT(*) AS requests, COALESCE(SUM(number_of_days), 0) AS days
                FROM leave_requests
                WHERE {where_clause(clauses)}
                GROUP BY status
                """,
                tuple(params),
            )
            return {LeaveStatus(r["status"]): (int(r["requests"]), int(r["days"])) for r in fetchall(cur)}
