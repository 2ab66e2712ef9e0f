from __future__ import annotations

import re
from dataclasses import replace
from datetime import date, datetime, timedelta
from types import SimpleNamespace
from typing import Iterable, Optional

import pytest

from staffing_system.attendance.model import AttendanceRecord
from staffing_system.container import assemble
from staffing_system.core.enums import LeaveStatus
from staffing_system.core.exceptions import ConflictError
from staffing_system.leaves.model import LeaveRequest
from staffing_system.shifts.model import ShiftAssignment
from staffing_system.staff.identifiers import staff_code_pattern
from staffing_system.staff.model import Staff
from staffing_system.users.model import User

JWT_SECRET = "staffing-test-jwt-secret-0123456789abcdef"


class InMemoryStaff:
    def __init__(self):
        self.rows: dict[int, Staff] = {}
        self._id = 0

    def get_by_id(self, staff_id: int) -> Optional[Staff]:
        return self.rows.get(int(staff_id))

    def get_by_code(self, staff_code: str) -> Optional[Staff]:
        return next((s for s in self.rows.values() if s.staff_code == staff_code), None)

    def get_many(self, staff_ids: Iterable[int]) -> dict[int, Staff]:
        return {i: self.rows[i] for i in set(staff_ids) if i in self.rows}

    def list_all(self, *, shift: Optional[str] = None):
        return [s for s in self.rows.values() if shift is None or s.shift == shift]

    def max_code_for_prefix(self, prefix: str) -> Optional[str]:
        pattern = re.compile(staff_code_pattern(prefix))
        codes = [s.staff_code for s in self.rows.values() if pattern.match(s.staff_code)]
        return max(codes, key=lambda c: int(c[len(prefix):]), default=None)

    def create(self, *, staff_code: str, name: str, role: str, shift: str, email=None) -> int:
        if self.get_by_code(staff_code):
            raise ConflictError(f"Staff code {staff_code} is already taken")
        self._id += 1
        self.rows[self._id] = Staff(
            staff_id=self._id,
            staff_code=staff_code,
            name=name,
            role=role,
            shift=shift,
            email=email,
            created_at=datetime(2024, 12, 1, 9, 0),
        )
        return self._id

    def update(self, *, staff_id: int, name: str, role: str, shift: str, email) -> bool:
        current = self.rows.get(staff_id)
        if not current:
            return False
        self.rows[staff_id] = replace(current, name=name, role=role, shift=shift, email=email)
        return True

    def delete(self, staff_id: int) -> bool:
        return self.rows.pop(int(staff_id), None) is not None


class InMemoryAttendance:
    def __init__(self):
        self.rows: dict[int, AttendanceRecord] = {}
        self._id = 0

    def _find_key(self, staff_id: int, work_date: date, shift: str) -> Optional[AttendanceRecord]:
        return next(
            (r for r in self.rows.values() if (r.staff_id, r.work_date, r.shift) == (staff_id, work_date, shift)),
            None,
        )

    def upsert_by_key(self, *, staff_id, work_date, shift, status, remarks, marked_by, marked_at):
        existing = self._find_key(staff_id, work_date, shift)
        if existing:
            self.rows[existing.attendance_id] = replace(
                existing, status=status, remarks=remarks, marked_by=marked_by, marked_at=marked_at
            )
            return existing.attendance_id, False
        self._id += 1
        self.rows[self._id] = AttendanceRecord(
            attendance_id=self._id,
            staff_id=staff_id,
            work_date=work_date,
            shift=shift,
            status=status,
            remarks=remarks,
            marked_by=marked_by,
            marked_at=marked_at,
        )
        return self._id, True

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        return self.rows.get(int(attendance_id))

    def list_records(
        self,
        *,
        work_date=None,
        shift=None,
        staff_id=None,
        status=None,
        start_date=None,
        end_date=None,
    ):
        out = [
            r
            for r in self.rows.values()
            if (work_date is None or r.work_date == work_date)
            and (shift is None or r.shift == shift)
            and (staff_id is None or r.staff_id == staff_id)
            and (status is None or r.status == status)
            and (start_date is None or r.work_date >= start_date)
            and (end_date is None or r.work_date <= end_date)
        ]
        out.sort(key=lambda r: r.shift)
        out.sort(key=lambda r: r.work_date, reverse=True)
        return out

    def update_record(self, *, attendance_id, status, remarks, marked_by, marked_at) -> bool:
        current = self.rows.get(attendance_id)
        if not current:
            return False
        self.rows[attendance_id] = replace(
            current, status=status, remarks=remarks, marked_by=marked_by, marked_at=marked_at
        )
        return True

    def delete(self, attendance_id: int) -> bool:
        return self.rows.pop(int(attendance_id), None) is not None

    def move_shift(self, *, staff_id, old_shift, new_shift, from_date) -> int:
        moved = 0
        for r in list(self.rows.values()):
            if r.staff_id != staff_id or r.shift != old_shift or r.work_date < from_date:
                continue
            if self._find_key(staff_id, r.work_date, new_shift):
                continue
            self.rows[r.attendance_id] = replace(r, shift=new_shift)
            moved += 1
        return moved


class InMemoryLeaves:
    def __init__(self):
        self.rows: dict[int, LeaveRequest] = {}
        self._id = 0

    def create(self, *, staff_id, leave_type, start_date, end_date, reason, number_of_days) -> int:
        self._id += 1
        self.rows[self._id] = LeaveRequest(
            leave_id=self._id,
            staff_id=staff_id,
            leave_type=leave_type,
            start_date=start_date,
            end_date=end_date,
            reason=reason,
            status=LeaveStatus.PENDING,
            number_of_days=number_of_days,
            created_at=datetime(2024, 12, 1, 9, 0) + timedelta(minutes=self._id),
        )
        return self._id

    def get_by_id(self, leave_id: int) -> Optional[LeaveRequest]:
        return self.rows.get(int(leave_id))

    def find_overlapping(self, *, staff_id, start_date, end_date, statuses):
        statuses = set(statuses)
        return next(
            (
                r
                for r in sorted(self.rows.values(), key=lambda r: r.start_date)
                if r.staff_id == staff_id and r.status in statuses and r.overlaps(start_date, end_date)
            ),
            None,
        )

    def _filtered(self, *, staff_id=None, start_from=None, end_until=None):
        return [
            r
            for r in self.rows.values()
            if (staff_id is None or r.staff_id == staff_id)
            and (start_from is None or r.start_date >= start_from)
            and (end_until is None or r.end_date <= end_until)
        ]

    def list_requests(self, *, staff_id=None, status=None, leave_type=None, start_from=None, end_until=None):
        out = [
            r
            for r in self._filtered(staff_id=staff_id, start_from=start_from, end_until=end_until)
            if (status is None or r.status == status) and (leave_type is None or r.leave_type == leave_type)
        ]
        out.sort(key=lambda r: (r.created_at, r.leave_id), reverse=True)
        return out

    def decide(self, *, leave_id, status, approved_by, approval_date, remarks=None) -> bool:
        current = self.rows.get(leave_id)
        if not current or current.status != LeaveStatus.PENDING:
            return False
        self.rows[leave_id] = replace(
            current,
            status=status,
            approved_by=approved_by,
            approval_date=approval_date,
            remarks=remarks if remarks is not None else current.remarks,
        )
        return True

    def cancel(self, *, leave_id) -> bool:
        current = self.rows.get(leave_id)
        if not current or current.status not in (LeaveStatus.PENDING, LeaveStatus.APPROVED):
            return False
        self.rows[leave_id] = replace(current, status=LeaveStatus.CANCELLED)
        return True

    def summary_by_status(self, *, staff_id=None, start_from=None, end_until=None):
        summary: dict[LeaveStatus, tuple[int, int]] = {}
        for r in self._filtered(staff_id=staff_id, start_from=start_from, end_until=end_until):
            count, days = summary.get(r.status, (0, 0))
            summary[r.status] = (count + 1, days + r.number_of_days)
        return summary


class InMemoryShifts:
    def __init__(self):
        self.rows: dict[int, ShiftAssignment] = {}
        self._id = 0

    def create(self, *, staff_id, shift_date, shift_type, start_time, end_time, assigned_by, notes, is_leave_day) -> int:
        # Mirrors the (staff_id, shift_date) unique key.
        if any(a.staff_id == staff_id and a.shift_date == shift_date for a in self.rows.values()):
            raise ConflictError("Staff member already has a shift assigned for this date")
        self._id += 1
        self.rows[self._id] = ShiftAssignment(
            shift_assignment_id=self._id,
            staff_id=staff_id,
            shift_date=shift_date,
            shift_type=shift_type,
            start_time=start_time,
            end_time=end_time,
            assigned_by=assigned_by,
            notes=notes,
            is_leave_day=is_leave_day,
            created_at=datetime(2024, 12, 1, 9, 0),
        )
        return self._id

    def get_by_id(self, shift_assignment_id: int) -> Optional[ShiftAssignment]:
        return self.rows.get(int(shift_assignment_id))

    def get_for_staff_and_date(self, *, staff_id, shift_date):
        return next(
            (a for a in self.rows.values() if a.staff_id == staff_id and a.shift_date == shift_date),
            None,
        )

    def update(self, *, shift_assignment_id, shift_type, start_time, end_time, notes) -> bool:
        current = self.rows.get(shift_assignment_id)
        if not current:
            return False
        self.rows[shift_assignment_id] = replace(
            current, shift_type=shift_type, start_time=start_time, end_time=end_time, notes=notes
        )
        return True

    def delete(self, shift_assignment_id: int) -> bool:
        return self.rows.pop(int(shift_assignment_id), None) is not None

    def list_assignments(self, *, staff_id=None, shift_date=None, shift_type=None, start_date=None, end_date=None):
        out = [
            a
            for a in self.rows.values()
            if (staff_id is None or a.staff_id == staff_id)
            and (shift_date is None or a.shift_date == shift_date)
            and (shift_type is None or a.shift_type == shift_type)
            and (start_date is None or a.shift_date >= start_date)
            and (end_date is None or a.shift_date <= end_date)
        ]
        out.sort(key=lambda a: (a.shift_date, a.start_time, a.shift_assignment_id))
        return out


class InMemoryUsers:
    def __init__(self):
        self.rows: dict[int, User] = {}
        self._id = 0

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.rows.get(int(user_id))

    def get_by_username(self, username: str) -> Optional[User]:
        return next((u for u in self.rows.values() if u.username == username), None)

    def get_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self.rows.values() if u.email == email), None)

    def create_user(self, *, name, username, email, password_hash) -> int:
        if self.get_by_username(username) or (email and self.get_by_email(email)):
            raise ConflictError("Username or email already registered")
        self._id += 1
        self.rows[self._id] = User(
            user_id=self._id,
            name=name,
            username=username,
            password_hash=password_hash,
            email=email,
        )
        return self._id

    def list_all(self):
        return [self.rows[k] for k in sorted(self.rows)]

    def update_user(self, *, user_id, name, username, email, password_hash) -> bool:
        current = self.rows.get(user_id)
        if not current:
            return False
        self.rows[user_id] = replace(current, name=name, username=username, email=email, password_hash=password_hash)
        return True

    def delete(self, user_id: int) -> bool:
        return self.rows.pop(int(user_id), None) is not None


@pytest.fixture
def repos():
    return SimpleNamespace(
        staff=InMemoryStaff(),
        attendance=InMemoryAttendance(),
        leaves=InMemoryLeaves(),
        shifts=InMemoryShifts(),
        users=InMemoryUsers(),
    )


@pytest.fixture
def container(repos):
    return assemble(
        users_repo=repos.users,
        staff_repo=repos.staff,
        attendance_repo=repos.attendance,
        leaves_repo=repos.leaves,
        shifts_repo=repos.shifts,
        jwt_secret=JWT_SECRET,
    )


@pytest.fixture
def add_staff(container):
    """Create a staff member through the service (so codes are allocated)."""

    def _add(name="Dr. Test", role="Doctor", shift="Morning", email=None) -> Staff:
        return container.staff_service.create(name=name, role=role, shift=shift, email=email)

    return _add


@pytest.fixture
def app(container, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    from staffing_system.main import create_app

    flask_app = create_app(container)
    flask_app.config["TESTING"] = True
    return flask_app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers(container):
    user = container.user_service.register(
        name="Jane Smith",
        username="jane_smith",
        email="jane@example.com",
        password="demo1234",
    )
    token = container.auth_service.issue_token(user)
    return {"Authorization": f"Bearer {token}"}
