"""ISO 8601 calendar date parsing for form date inputs.

Date inputs emit ``YYYY-MM-DD`` strings. Anything that does not decompose
into a real year/month/day is rejected -- no partial dates, no trailing
time components, no locale formats.

All functions are pure -- no clock reads, no side effects.
"""

from __future__ import annotations

import re
from datetime import date

_PATTERN_ISO_DATE = re.compile(r"([0-9]{4})-([0-9]{2})-([0-9]{2})")


def _validate_date_components(year: int, month: int, day: int) -> bool:
    """Validate that date components form a real calendar date.

    Month lengths and leap years are checked via datetime.date.
    """
    if year < 1 or month < 1 or month > 12 or day < 1 or day > 31:
        return False
    try:
        date(year, month, day)
    except ValueError:
        return False
    return True


def parse_iso_date(value: object) -> date | None:
    """Parse a ``YYYY-MM-DD`` string into a date.

    Args:
        value: Raw field value. Non-strings always fail.

    Returns:
        The parsed date, or None if the value is not a real calendar date.

    Examples:
        >>> parse_iso_date("2024-02-29")
        datetime.date(2024, 2, 29)
        >>> parse_iso_date("2023-02-29") is None
        True
    """
    if not isinstance(value, str):
        return None
    match = _PATTERN_ISO_DATE.fullmatch(value)
    if match is None:
        return None
    year, month, day = (int(g) for g in match.groups())
    if not _validate_date_components(year, month, day):
        return None
    return date(year, month, day)


def is_valid_iso_date(value: object) -> bool:
    """Return True if value parses as a real ``YYYY-MM-DD`` date."""
    return parse_iso_date(value) is not None
