from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, where_clause
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = "attendance_id, staff_id, work_date, shift, status, remarks, marked_by, marked_at"


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        staff_id=int(r["staff_id"]),
        work_date=r["work_date"],
        shift=r["shift"],
        status=AttendanceStatus(r["status"]),
        remarks=r.get("remarks"),
        marked_by=r.get("marked_by"),
        marked_at=r["marked_at"],
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

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
        with db_cursor(self._conn_factory) as (_, cur):
            # LAST_INSERT_ID(expr) makes lastrowid report the existing id on update.
            cur.execute(
                """
                INSERT INTO attendance_records(staff_id, work_date, shift, status, remarks, marked_by, marked_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    attendance_id=LAST_INSERT_ID(attendance_id),
                    status=VALUES(status),
                    remarks=VALUES(remarks),
                    marked_by=VALUES(marked_by),
                    marked_at=VALUES(marked_at)
                """,
                (int(staff_id), work_date, shift, status.value, remarks, marked_by, marked_at),
            )
            # rowcount: 1 = inserted, 2 = updated, 0 = existing row left unchanged.
            return int(cur.lastrowid), cur.rowcount == 1

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE attendance_id=%s", (int(attendance_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

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
        clauses: list[str] = []
        params: list[object] = []

        if work_date is not None:
            clauses.append("work_date=%s")
            params.append(work_date)
        if shift is not None:
            clauses.append("shift=%s")
            params.append(shift)
        if staff_id is not None:
            clauses.append("staff_id=%s")
            params.append(int(staff_id))
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)
        if start_date is not None:
            clauses.append("work_date>=%s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("work_date<=%s")
            params.append(end_date)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE {where_clause(clauses)}
                ORDER BY work_date DESC, shift ASC, attendance_id ASC
                """,
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def update_record(
        self,
        *,
        attendance_id: int,
        status: AttendanceStatus,
        remarks: Optional[str],
        marked_by: Optional[int],
        marked_at: datetime,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET status=%s, remarks=%s, marked_by=%s, marked_at=%s
                WHERE attendance_id=%s
                """,
                (status.value, remarks, marked_by, marked_at, int(attendance_id)),
            )
            return cur.rowcount > 0

    def delete(self, attendance_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_records WHERE attendance_id=%s", (int(attendance_id),))
            return cur.rowcount > 0

    def move_shift(self, *, staff_id: int, old_shift: str, new_shift: str, from_date: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            # IGNORE skips rows whose new (staff, date, shift) key already exists.
            cur.execute(
                """
                UPDATE IGNORE attendance_records
                SET shift=%s
                WHERE staff_id=%s AND shift=%s AND work_date>=%s
                """,
                (new_shift, int(staff_id), old_shift, from_date),
            )
            return int(cur.rowcount)
