import re
from datetime import date, datetime
from typing import Optional, Union

_LEADING_INT = re.compile(r"\s*([+-]?\d+)", re.ASCII)
_MAX_DIGITS = 4300  # CPython's default int-string conversion limit

def parse_int(value: Union[str, int, None]) -> Optional[int]:
    """Read the leading integer of a free-text value ("12kg" -> 12, "3.9" -> 3).

    Only ASCII digits count. Returns None when there is no number to read,
    including digit runs too long to convert; callers must treat that as a
    failed comparison.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    m = _LEADING_INT.match(str(value))
    if not m or len(m.group(1)) > _MAX_DIGITS:
        return None
    try:
        return int(m.group(1))
    except ValueError:
        return None

def parse_date(value: Union[str, date, None]) -> Optional[date]:
    """Calendar date of "YYYY-MM-DD" or an ISO datetime; None if unreadable."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None
