"""Date parsing utilities.

Provider exports carry calendar dates without a time zone. They are read
as midnight UTC so the same row always yields the same timestamp.
"""

import re
from datetime import datetime, timezone

from dateutil import parser as date_parser

_DAY_FIRST_SLASH = re.compile(r"^\d{1,2}/\d{1,2}/\d{4}$")
_DAY_MONTH_NAME = re.compile(r"^\d{1,2}-[A-Za-z]{3}-\d{4}$")


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _midnight_utc(value: datetime) -> datetime:
    return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)


def parse_day_first_date(date_str: str) -> datetime:
    """Parse a DD/MM/YYYY date (e.g. "26/01/2025") to midnight UTC.

    Raises:
        ValueError: If the string is not a valid DD/MM/YYYY date
    """
    date_str = (date_str or "").strip()
    if not _DAY_FIRST_SLASH.match(date_str):
        raise ValueError(f"Invalid date: {date_str}")
    try:
        return _midnight_utc(date_parser.parse(date_str, dayfirst=True))
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Invalid date: {date_str} ({e})")


def parse_day_month_name_date(date_str: str) -> datetime:
    """Parse a DD-Mon-YYYY date (e.g. "06-Apr-2025") to midnight UTC.

    Raises:
        ValueError: If the string is not a valid DD-Mon-YYYY date
    """
    date_str = (date_str or "").strip()
    if not _DAY_MONTH_NAME.match(date_str):
        raise ValueError(f"Invalid date format: {date_str}")
    try:
        return _midnight_utc(date_parser.parse(date_str, dayfirst=True))
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Invalid date format: {date_str} ({e})")


def parse_timestamp(value: str) -> datetime:
    """Parse a YYYY-MM-DD date or an ISO-8601 timestamp into an aware UTC datetime.

    Timestamps without an offset are taken to be UTC.

    Raises:
        ValueError: If the string cannot be parsed
    """
    value = (value or "").strip()
    if not value:
        raise ValueError("Empty date string")
    try:
        return _as_utc(date_parser.isoparse(value))
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{value}': {e}")
