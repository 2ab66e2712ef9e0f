"""Per-shift staffing adequacy against the fixed role quotas.

Pure computation: callers group staff by their shift label and get back one
ShiftStatus per label, in first-seen order.
"""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Iterable, Mapping, Optional, Sequence

from ..core.constants import SHIFT_REQUIREMENTS
from ..core.enums import StaffRole
from .model import Staff

FULLY_STAFFED = "Fully staffed"
SHORT_STAFFED = "Short staffed"


@dataclass(frozen=True)
class Shortage:
    role: str
    required: int
    current: int
    needed: int

    def as_dict(self) -> dict:
        return {"role": self.role, "required": self.required, "current": self.current, "needed": self.needed}


@dataclass(frozen=True)
class ShiftStatus:
    is_fully_staffed: bool
    staff_count: dict[str, int]
    requirements: dict[str, int]
    # None (not an empty list) when nothing is missing.
    shortages: Optional[list[Shortage]]
    missing_staff: Optional[dict[str, int]]
    message: str

    def as_dict(self) -> dict:
        return {
            "is_fully_staffed": self.is_fully_staffed,
            "staff_count": dict(self.staff_count),
            "requirements": dict(self.requirements),
            "shortages": [s.as_dict() for s in self.shortages] if self.shortages is not None else None,
            "missing_staff": dict(self.missing_staff) if self.missing_staff is not None else None,
            "message": self.message,
        }


def group_by_shift(staff: Iterable[Staff]) -> dict[str, list[Staff]]:
    grouped: dict[str, list[Staff]] = {}
    for member in staff:
        grouped.setdefault(member.shift, []).append(member)
    return grouped


def tally_roles(members: Sequence[Staff]) -> Counter:
    """Count members per quota role; unrecognised roles keep their own name."""
    counts: Counter = Counter()
    for member in members:
        quota_role = StaffRole.normalize(member.role)
        counts[quota_role.value if quota_role else member.role] += 1
    return counts


def evaluate_shift(members: Sequence[Staff]) -> ShiftStatus:
    counts = tally_roles(members)
    staff_count = {role: counts.get(role, 0) for role in SHIFT_REQUIREMENTS}

    shortages = [
        Shortage(role=role, required=required, current=staff_count[role], needed=required - staff_count[role])
        for role, required in SHIFT_REQUIREMENTS.items()
        if staff_count[role] < required
    ]
    is_fully_staffed = not shortages

    return ShiftStatus(
        is_fully_staffed=is_fully_staffed,
        staff_count=staff_count,
        requirements=dict(SHIFT_REQUIREMENTS),
        shortages=shortages or None,
        missing_staff={s.role: s.needed for s in shortages} or None,
        message=FULLY_STAFFED if is_fully_staffed else SHORT_STAFFED,
    )


def evaluate(staff_by_shift: Mapping[str, Sequence[Staff]]) -> dict[str, ShiftStatus]:
    return {shift: evaluate_shift(members) for shift, members in staff_by_shift.items()}
