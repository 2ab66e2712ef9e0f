from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import ShiftType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, mysql_time_to_hhmm, where_clause
from .model import ShiftAssignment
from .repository import ShiftRepository

_COLUMNS = (
    "shift_assignment_id, staff_id, shift_date, shift_type, start_time, end_time, "
    "assigned_by, notes, is_leave_day, created_at"
)


def _to_assignment(r: dict) -> ShiftAssignment:
    return ShiftAssignment(
        shift_assignment_id=int(r["shift_assignment_id"]),
        staff_id=int(r["staff_id"]),
        shift_date=r["shift_date"],
        shift_type=ShiftType(r["shift_type"]),
        start_time=mysql_time_to_hhmm(r["start_time"]),
        end_time=mysql_time_to_hhmm(r["end_time"]),
        assigned_by=r.get("assigned_by"),
        notes=r.get("notes"),
        is_leave_day=bool(r.get("is_leave_day")),
        created_at=r.get("created_at"),
    )


class MySQLShiftRepository(ShiftRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

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
        with db_cursor(
            self._conn_factory,
            duplicate_message="Staff member already has a shift assigned for this date",
        ) as (_, cur):
            cur.execute(
                """
                INSERT INTO shift_assignments(
                    staff_id, shift_date, shift_type, start_time, end_time, assigned_by, notes, is_leave_day
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(staff_id),
                    shift_date,
                    shift_type.value,
                    start_time,
                    end_time,
                    assigned_by,
                    notes,
                    1 if is_leave_day else 0,
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(self, shift_assignment_id: int) -> Optional[ShiftAssignment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM shift_assignments WHERE shift_assignment_id=%s",
                (int(shift_assignment_id),),
            )
            r = fetchone(cur)
            return _to_assignment(r) if r else None

    def get_for_staff_and_date(self, *, staff_id: int, shift_date: date) -> Optional[ShiftAssignment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM shift_assignments WHERE staff_id=%s AND shift_date=%s",
                (int(staff_id), shift_date),
            )
            r = fetchone(cur)
            return _to_assignment(r) if r else None

    def update(
        self,
        *,
        shift_assignment_id: int,
        shift_type: ShiftType,
        start_time: str,
        end_time: str,
        notes: Optional[str],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE shift_assignments
                SET shift_type=%s, start_time=%s, end_time=%s, notes=%s
                WHERE shift_assignment_id=%s
                """,
                (shift_type.value, start_time, end_time, notes, int(shift_assignment_id)),
            )
            return cur.rowcount > 0

    def delete(self, shift_assignment_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM shift_assignments WHERE shift_assignment_id=%s",
                (int(shift_assignment_id),),
            )
            return cur.rowcount > 0

    def list_assignments(
        self,
        *,
        staff_id: Optional[int] = None,
        shift_date: Optional[date] = None,
        shift_type: Optional[ShiftType] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[ShiftAssignment]:
        clauses: list[str] = []
        params: list[object] = []
        if staff_id is not None:
            clauses.append("staff_id=%s")
            params.append(int(staff_id))
        if shift_date is not None:
            clauses.append("shift_date=%s")
            params.append(shift_date)
        if shift_type is not None:
            clauses.append("shift_type=%s")
            params.append(shift_type.value)
        if start_date is not None:
            clauses.append("shift_date>=%s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("shift_date<=%s")
            params.append(end_date)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM shift_assignments
                WHERE {where_clause(clauses)}
                ORDER BY shift_date ASC, start_time ASC, shift_assignment_id ASC
                """,
                tuple(params),
            )
            return [_to_assignment(r) for r in fetchall(cur)]
