from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import DEFAULT_JWT_EXPIRES_DAYS
from .database.connection import DBConfig, DatabaseConnection
from .leaves.mysql_leave_repository import MySQLLeaveRepository
from .leaves.repository import LeaveRepository
from .leaves.service import LeaveService
from .shifts.mysql_shift_repository import MySQLShiftRepository
from .shifts.repository import ShiftRepository
from .shifts.service import ShiftService
from .staff.mysql_staff_repository import MySQLStaffRepository
from .staff.repository import StaffRepository
from .staff.service import StaffService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    users_repo: UserRepository
    staff_repo: StaffRepository
    attendance_repo: AttendanceRepository
    leaves_repo: LeaveRepository
    shifts_repo: ShiftRepository

    auth_service: AuthService
    user_service: UserService
    staff_service: StaffService
    attendance_service: AttendanceService
    leave_service: LeaveService
    shift_service: ShiftService


def assemble(
    *,
    users_repo: UserRepository,
    staff_repo: StaffRepository,
    attendance_repo: AttendanceRepository,
    leaves_repo: LeaveRepository,
    shifts_repo: ShiftRepository,
    jwt_secret: str,
    jwt_expires_days: int = DEFAULT_JWT_EXPIRES_DAYS,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire services over the given repositories (MySQL or in-memory)."""
    return Container(
        conn=conn,
        users_repo=users_repo,
        staff_repo=staff_repo,
        attendance_repo=attendance_repo,
        leaves_repo=leaves_repo,
        shifts_repo=shifts_repo,
        auth_service=AuthService(users_repo, secret=jwt_secret, expires_days=jwt_expires_days),
        user_service=UserService(users_repo),
        staff_service=StaffService(staff_repo, attendance_repo),
        attendance_service=AttendanceService(attendance_repo, staff_repo),
        leave_service=LeaveService(leaves_repo, staff_repo),
        shift_service=ShiftService(shifts_repo, staff_repo, leaves_repo),
    )


def build_container(
    *,
    db_config: dict,
    jwt_secret: str,
    jwt_expires_days: int = DEFAULT_JWT_EXPIRES_DAYS,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return assemble(
        users_repo=MySQLUserRepository(conn),
        staff_repo=MySQLStaffRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        leaves_repo=MySQLLeaveRepository(conn),
        shifts_repo=MySQLShiftRepository(conn),
        jwt_secret=jwt_secret,
        jwt_expires_days=jwt_expires_days,
        conn=conn,
    )
