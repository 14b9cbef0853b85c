from __future__ import annotations

import calendar
import re
from datetime import MAXYEAR, MINYEAR, date, datetime, time
from typing import Optional, Union

from ..core.exceptions import InvalidTimeFormat, ValidationError

_HHMM = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime((value or "").strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Invalid date {value!r}, expected YYYY-MM-DD")


def normalize_day(value: Union[date, datetime, str]) -> date:
    """Reduce a date-ish value to a calendar day (time-of-day is dropped)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return parse_iso_date(value[:10])
    raise ValidationError("date is required")


def parse_hhmm(value: Optional[str], field_name: str = "time") -> Optional[time]:
    """Parse a strict 24-hour HH:mm string. Empty input means "not given"."""
    if value is None:
        return None
    v = str(value).strip()
    if not v:
        return None
    m = _HHMM.match(v)
    if not m:
        raise InvalidTimeFormat(f"{field_name} must be HH:mm between 00:00 and 23:59")
    return time(hour=int(m.group(1)), minute=int(m.group(2)))


def format_hhmm(value: Optional[time]) -> Optional[str]:
    return value.strftime("%H:%M") if value is not None else None


def minute_of_day(value: time) -> int:
    return value.hour * 60 + value.minute


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First and last calendar day of a month."""
    if not MINYEAR <= int(year) <= MAXYEAR:
        raise ValidationError(f"year must be between {MINYEAR} and {MAXYEAR}")
    if not 1 <= int(month) <= 12:
        raise ValidationError("month must be between 1 and 12")
    last = calendar.monthrange(int(year), int(month))[1]
    return date(int(year), int(month), 1), date(int(year), int(month), last)


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()
