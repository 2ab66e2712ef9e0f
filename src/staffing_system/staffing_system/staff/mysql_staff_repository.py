from __future__ import annotations

from typing import Iterable, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .identifiers import staff_code_pattern
from .model import Staff
from .repository import StaffRepository

_COLUMNS = "staff_id, staff_code, name, role, shift, email, created_at"


def _to_staff(r: dict) -> Staff:
    return Staff(
        staff_id=int(r["staff_id"]),
        staff_code=r["staff_code"],
        name=r["name"],
        role=r["role"],
        shift=r["shift"],
        email=r.get("email"),
        created_at=r.get("created_at"),
    )


class MySQLStaffRepository(StaffRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, staff_id: int) -> Optional[Staff]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM staff WHERE staff_id=%s", (int(staff_id),))
            r = fetchone(cur)
            return _to_staff(r) if r else None

    def get_by_code(self, staff_code: str) -> Optional[Staff]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM staff WHERE staff_code=%s", (staff_code,))
            r = fetchone(cur)
            return _to_staff(r) if r else None

    def get_many(self, staff_ids: Iterable[int]) -> dict[int, Staff]:
        ids = sorted({int(i) for i in staff_ids})
        if not ids:
            return {}
        placeholders = ",".join(["%s"] * len(ids))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM staff WHERE staff_id IN ({placeholders})", tuple(ids))
            return {s.staff_id: s for s in (_to_staff(r) for r in fetchall(cur))}

    def list_all(self, *, shift: Optional[str] = None) -> Sequence[Staff]:
        with db_cursor(self._conn_factory) as (_, cur):
            if shift is None:
                cur.execute(f"SELECT {_COLUMNS} FROM staff ORDER BY staff_id")
            else:
                cur.execute(f"SELECT {_COLUMNS} FROM staff WHERE shift=%s ORDER BY staff_id", (shift,))
            return [_to_staff(r) for r in fetchall(cur)]

    def max_code_for_prefix(self, prefix: str) -> Optional[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT staff_code
                FROM staff
                WHERE staff_code REGEXP %s
                ORDER BY CAST(SUBSTRING(staff_code, %s) AS UNSIGNED) DESC
                LIMIT 1
                """,
                (staff_code_pattern(prefix).replace(r"\d", "[0-9]"), len(prefix) + 1),
            )
            r = fetchone(cur)
            return r["staff_code"] if r else None

    def create(self, *, staff_code: str, name: str, role: str, shift: str, email: Optional[str] = None) -> int:
        with db_cursor(self._conn_factory, duplicate_message=f"Staff code {staff_code} is already taken") as (_, cur):
            cur.execute(
                """
                INSERT INTO staff(staff_code, name, role, shift, email)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (staff_code, name, role, shift, email),
            )
            return int(cur.lastrowid)

    def update(self, *, staff_id: int, name: str, role: str, shift: str, email: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE staff
                SET name=%s, role=%s, shift=%s, email=%s
                WHERE staff_id=%s
                """,
                (name, role, shift, email, int(staff_id)),
            )
            # MySQL reports changed rows only, so an unchanged row counts 0.
            return cur.rowcount > 0

    def delete(self, staff_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM staff WHERE staff_id=%s", (int(staff_id),))
            return cur.rowcount > 0
