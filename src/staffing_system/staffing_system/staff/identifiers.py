from __future__ import annotations

import re
from typing import Optional

from ..common.validators import require_non_empty
from ..core.constants import STAFF_CODE_DIGITS
from ..core.enums import StaffRole

_ROLE_PREFIXES = {
    StaffRole.DOCTOR: "D",
    StaffRole.NURSE: "N",
    StaffRole.TECHNICIAN: "T",
    StaffRole.LAB_TECHNICIAN: "T",
}


def staff_code_prefix(role: str) -> str:
    """Single-letter code prefix for a role.

    Unrecognised roles use the upper-cased first letter of the role text.
    """
    role = require_non_empty(role, "Role")
    try:
        return _ROLE_PREFIXES[StaffRole(role)]
    except ValueError:
        return role[0].upper()


def staff_code_pattern(prefix: str) -> str:
    return rf"^{re.escape(prefix)}\d+$"


def next_staff_code(role: str, existing_max: Optional[str]) -> str:
    """Next code after the highest existing code for the role's prefix.

    >>> next_staff_code("Doctor", None)
    'D001'
    >>> next_staff_code("Nurse", "N011")
    'N012'
    >>> next_staff_code("Lab Technician", "T999")
    'T1000'
    """
    prefix = staff_code_prefix(role)
    next_number = 1
    if existing_max and re.match(staff_code_pattern(prefix), existing_max):
        next_number = int(existing_max[len(prefix):]) + 1
    return f"{prefix}{next_number:0{STAFF_CODE_DIGITS}d}"
