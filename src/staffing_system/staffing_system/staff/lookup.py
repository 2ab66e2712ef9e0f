from __future__ import annotations

import re
from typing import Optional

from ..core.exceptions import NotFoundError, ValidationError
from .model import Staff
from .repository import StaffRepository

# Storage primary keys are plain integers; anything else is a staff code.
_PRIMARY_KEY = re.compile(r"^\d+$")


def as_id(value, field_name: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} is invalid")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and _PRIMARY_KEY.match(value.strip()):
        return int(value.strip())
    raise ValidationError(f"{field_name} is invalid")


def require_staff(staff: StaffRepository, staff_id) -> Staff:
    """Fetch by primary key or raise NotFoundError."""
    member = staff.get_by_id(as_id(staff_id, "Staff ID"))
    if not member:
        raise NotFoundError("Staff member not found")
    return member


def find_staff(staff: StaffRepository, ref) -> Optional[Staff]:
    """Look `ref` up as a primary key first, then as a staff code."""
    if isinstance(ref, int) and not isinstance(ref, bool):
        return staff.get_by_id(ref)
    text = str(ref or "").strip()
    if not text:
        return None
    if _PRIMARY_KEY.match(text):
        return staff.get_by_id(int(text))
    return staff.get_by_code(text)


def resolve_staff(staff: StaffRepository, ref) -> Staff:
    member = find_staff(staff, ref)
    if not member:
        raise NotFoundError("Staff member not found")
    return member
