from __future__ import annotations

import calendar
import re
from datetime import date, datetime
from typing import Optional

from ..core.exceptions import ValidationError

_HHMM = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def to_day(value, field_name: str = "date") -> date:
    """Normalise a date, datetime or ISO string to its calendar day.

    Two timestamps on the same day collapse to the same value, which is what
    the natural keys (attendance, shift assignment) rely on.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        text = value.strip()
        try:
            return parse_iso_date(text[:10])
        except ValueError:
            pass
    raise ValidationError(f"{field_name} must be a date in YYYY-MM-DD format")


def optional_day(value, field_name: str = "date") -> Optional[date]:
    if value is None or value == "":
        return None
    return to_day(value, field_name)


def is_hhmm(value: str) -> bool:
    return bool(value) and bool(_HHMM.match(value))


def minutes_since_midnight(value: str) -> int:
    """'06:30' -> 390. Caller validates the format first."""
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def month_bounds(month: int, year: int) -> tuple[date, date]:
    """First and last calendar day of a month."""
    if not 1 <= int(month) <= 12:
        raise ValidationError("month must be between 1 and 12")
    last = calendar.monthrange(int(year), int(month))[1]
    return date(int(year), int(month), 1), date(int(year), int(month), last)
