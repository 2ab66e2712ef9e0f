from __future__ import annotations

from enum import Enum
from typing import Optional


class StaffRole(str, Enum):
    """Recognised staff roles. Staff.role itself stays free text."""

    DOCTOR = "Doctor"
    NURSE = "Nurse"
    TECHNICIAN = "Technician"
    LAB_TECHNICIAN = "Lab Technician"

    @property
    def quota_role(self) -> "StaffRole":
        """Role whose quota this role counts toward."""
        if self is StaffRole.LAB_TECHNICIAN:
            return StaffRole.TECHNICIAN
        return self

    @classmethod
    def normalize(cls, role: str) -> Optional["StaffRole"]:
        """Map a free-text role onto its quota role, or None if unrecognised."""
        try:
            return cls((role or "").strip()).quota_role
        except ValueError:
            return None


class AttendanceStatus(str, Enum):
    PRESENT = "Present"
    ABSENT = "Absent"
    LEAVE = "Leave"
    HALF_DAY = "Half-Day"


class LeaveType(str, Enum):
    SICK = "Sick Leave"
    CASUAL = "Casual Leave"
    ANNUAL = "Annual Leave"
    MATERNITY = "Maternity Leave"
    OTHER = "Other"


class LeaveStatus(str, Enum):
    """Leave request workflow state."""

    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"
    CANCELLED = "Cancelled"


class ShiftType(str, Enum):
    MORNING = "Morning"
    EVENING = "Evening"
    NIGHT = "Night"
